from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from core.exceptions import LifecycleError
from . import experts
from .models import AccessSession, ActivityLog, Expert, User
from .sessions import backoffice_actor
from .utils import client_ip


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    fieldsets = (
        (None, {'fields': ('username', 'password')}),
        ("Dados pessoais", {'fields': ('first_name', 'last_name', 'email')}),
        ("Permissões", {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ("Datas", {'fields': ('last_login', 'date_joined')}),
    )
    readonly_fields = ('last_login', 'date_joined')
    list_display = ('username', 'email', 'is_active', 'is_superuser', 'last_login')
    list_filter = ('is_active', 'is_superuser')
    ordering = ('username',)


def _run(modeladmin, request, queryset, operation, done_label):
    actor = backoffice_actor(request.user, ip_address=client_ip(request))
    done = 0
    for expert in queryset:
        try:
            operation(actor, expert)
            done += 1
        except LifecycleError as e:
            modeladmin.message_user(request, f"{expert.name}: {e.message}", level=messages.ERROR)
    if done:
        messages.success(request, f"{done} expert(s) {done_label}.")


@admin.action(description="Aprovar experts selecionados")
def approve_experts(modeladmin, request, queryset):
    _run(modeladmin, request, queryset, lambda actor, e: experts.approve_expert(actor, e.pk), "aprovado(s)")


@admin.action(description="Reprovar experts selecionados (motivo do cadastro)")
def reject_experts(modeladmin, request, queryset):
    # o motivo é o preenchido em "status_reason" antes da ação
    _run(
        modeladmin, request, queryset,
        lambda actor, e: experts.reject_expert(actor, e.pk, e.status_reason),
        "reprovado(s)",
    )


@admin.register(Expert)
class ExpertAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "status", "course_completed", "can_issue_invoice", "created_at")
    list_filter = ("status", "course_completed", "profile_type")
    search_fields = ("name", "email", "cpf", "company_cnpj")
    date_hierarchy = "created_at"
    # status só muda pelas ações (registro de atividade)
    readonly_fields = ("status", "course_completed_at", "created_at", "updated_at")
    actions = [approve_experts, reject_experts]


@admin.register(AccessSession)
class AccessSessionAdmin(admin.ModelAdmin):
    list_display = ("admin", "expert", "valid_until", "ip_address", "created_at")
    list_select_related = ("admin", "expert")
    readonly_fields = ("token", "created_at")


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "actor_type", "actor_id", "action", "entity_type", "entity_id")
    list_filter = ("actor_type", "entity_type", ("created_at", admin.DateFieldListFilter))
    search_fields = ("action", "entity_id", "actor_id")
    date_hierarchy = "created_at"

    def has_change_permission(self, request, obj=None):
        return False

    def has_add_permission(self, request):
        return False
