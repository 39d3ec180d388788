# indications/admin.py
from django.contrib import admin, messages

from accounts.sessions import backoffice_actor
from accounts.utils import client_ip
from core.exceptions import LifecycleError
from . import services
from .models import Indication


def _run(modeladmin, request, queryset, operation, done_label):
    actor = backoffice_actor(request.user, ip_address=client_ip(request))
    done = 0
    for ind in queryset:
        try:
            operation(actor, ind.pk)
            done += 1
        except LifecycleError as e:
            modeladmin.message_user(request, f"{ind.company_name}: {e.message}", level=messages.ERROR)
    if done:
        messages.success(request, f"{done} indicação(ões) {done_label}.")


@admin.action(description="Aprovar indicações selecionadas")
def approve_indications(modeladmin, request, queryset):
    _run(modeladmin, request, queryset, services.approve, "aprovada(s)")


@admin.action(description="Marcar seleção como perdida")
def mark_indications_lost(modeladmin, request, queryset):
    _run(modeladmin, request, queryset, services.mark_lost, "marcada(s) como perdida(s)")


@admin.register(Indication)
class IndicationAdmin(admin.ModelAdmin):
    list_display = ("company_name", "company_cnpj", "expert", "status", "crm_stage", "created_at", "expires_at")
    list_filter = ("status", "crm_stage", "channel", ("created_at", admin.DateFieldListFilter))
    search_fields = ("company_name", "company_cnpj", "contact_name", "contact_email", "expert__email", "expert__name")
    list_select_related = ("expert",)
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    # status e etapa só mudam pelas transições
    readonly_fields = ("status", "crm_stage", "rejection_reason", "validated_at", "validated_by", "expires_at", "created_at", "updated_at")
    actions = [approve_indications, mark_indications_lost]
