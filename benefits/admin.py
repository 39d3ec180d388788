# benefits/admin.py
from django.contrib import admin, messages

from accounts.sessions import backoffice_actor
from accounts.utils import client_ip
from core.exceptions import LifecycleError
from .models import Benefit
from .services import payments


def _run(modeladmin, request, queryset, operation, done_label):
    actor = backoffice_actor(request.user, ip_address=client_ip(request))
    done = 0
    for benefit in queryset:
        try:
            operation(actor, benefit.pk)
            done += 1
        except LifecycleError as e:
            modeladmin.message_user(request, f"{benefit}: {e.message}", level=messages.ERROR)
    if done:
        messages.success(request, f"{done} benefício(s) {done_label}.")


@admin.action(description="Confirmar pagamento do cliente")
def confirm_client_payment(modeladmin, request, queryset):
    _run(modeladmin, request, queryset, payments.confirm_client_payment, "liberado(s) para NF")


@admin.action(description="Aprovar NF")
def approve_invoice(modeladmin, request, queryset):
    _run(modeladmin, request, queryset, payments.approve_invoice, "com NF aprovada")


@admin.action(description="Marcar como pago (hoje)")
def mark_paid(modeladmin, request, queryset):
    _run(modeladmin, request, queryset, payments.mark_paid, "marcado(s) como pago(s)")


@admin.register(Benefit)
class BenefitAdmin(admin.ModelAdmin):
    list_display = ("indication", "expert", "amount", "status", "contract_date", "expected_payment_date", "payment_date")
    list_filter = ("status", ("contract_date", admin.DateFieldListFilter))
    search_fields = ("indication__company_name", "indication__company_cnpj", "expert__email", "expert__name")
    list_select_related = ("indication", "expert")
    date_hierarchy = "contract_date"
    ordering = ("-created_at",)
    readonly_fields = (
        "indication", "expert", "amount", "contract_date",
        "first_client_payment_date", "invoice_eligible_from", "expected_payment_date",
        "status", "client_paid_at", "invoice_submitted", "invoice_submitted_at",
        "invoice_issued_on", "invoice_amount", "invoice_file", "invoice_rejection_reason",
        "payment_scheduled_for", "payment_made", "payment_date", "created_at", "updated_at",
    )
    actions = [confirm_client_payment, approve_invoice, mark_paid]

    def has_add_permission(self, request):
        # criado apenas pela transição "contratou"
        return False
