# benefits/models.py
import uuid

from django.db import models

from accounts.models import Expert
from indications.models import Indication


class BenefitStatus(models.TextChoices):
    AWAITING_CLIENT_PAYMENT = "awaiting_client_payment", "Aguardando pagamento do cliente"
    RELEASED_FOR_INVOICE = "released_for_invoice", "Liberado para NF"
    AWAITING_REVIEW = "awaiting_review", "Aguardando conferência"
    INVOICE_REJECTED = "invoice_rejected", "NF recusada"
    PROCESSING_PAYMENT = "processing_payment", "Processando pagamento"
    SCHEDULED = "scheduled", "Pagamento agendado"
    PAID = "paid", "Pago"


class Benefit(models.Model):
    """
    Benefício devido ao expert quando a empresa indicada contrata.
    Criado uma única vez (OneToOne com a indicação) ; o valor nunca é recalculado.
    """
    Status = BenefitStatus

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    indication = models.OneToOneField(Indication, on_delete=models.PROTECT, related_name="benefit")
    expert = models.ForeignKey(Expert, on_delete=models.PROTECT, related_name="benefits")

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    contract_date = models.DateField()
    first_client_payment_date = models.DateField()
    invoice_eligible_from = models.DateField()
    expected_payment_date = models.DateField()

    status = models.CharField(
        max_length=24, choices=BenefitStatus.choices, default=BenefitStatus.AWAITING_CLIENT_PAYMENT
    )
    client_paid_at = models.DateTimeField(null=True, blank=True)

    # NF (nota fiscal) do expert
    invoice_submitted = models.BooleanField(default=False)
    invoice_submitted_at = models.DateTimeField(null=True, blank=True)
    invoice_issued_on = models.DateField(null=True, blank=True)
    invoice_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    invoice_file = models.CharField(max_length=255, blank=True)
    invoice_rejection_reason = models.TextField(null=True, blank=True)

    # pagamento
    payment_scheduled_for = models.DateField(null=True, blank=True)
    payment_made = models.BooleanField(default=False)
    payment_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)
        indexes = [models.Index(fields=["status", "expected_payment_date"], name="benefit_status_payment_idx")]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="benefit_amount_positive",
            ),
        ]
        verbose_name = "Benefício"
        verbose_name_plural = "Benefícios"

    def __str__(self):
        return f"{self.indication.company_name} • R$ {self.amount} ({self.get_status_display()})"

    @property
    def accepts_invoice_replacement(self) -> bool:
        return self.status in (BenefitStatus.AWAITING_REVIEW, BenefitStatus.INVOICE_REJECTED)

    @property
    def accepts_invoice(self) -> bool:
        return self.status == BenefitStatus.RELEASED_FOR_INVOICE or self.accepts_invoice_replacement
