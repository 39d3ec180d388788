# indications/models.py
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone

from accounts.models import Expert


class IndicationStatus(models.TextChoices):
    AWAITING_VALIDATION = "awaiting_validation", "Aguardando validação"
    UNDER_ANALYSIS = "under_analysis", "Em análise"  # reservado: nenhuma transição leva a ele
    VALIDATION_REJECTED = "validation_rejected", "Validação recusada"
    IN_CONTACT = "in_contact", "Em contato"
    CONTRACTED = "contracted", "Contratou"
    LOST = "lost", "Perdido"
    # marcadores informativos, escritos apenas pelo ciclo do benefício
    INVOICE_SENT = "invoice_sent", "NF enviada"
    PAID = "paid", "Pago"


class CRMStage(models.TextChoices):
    INITIAL_CONTACT = "initial_contact", "Contato inicial"
    PRESENTATION_SCHEDULED = "presentation_scheduled", "Apresentação marcada"
    PRESENTATION_DONE = "presentation_done", "Apresentação feita"
    PROPOSAL_SENT = "proposal_sent", "Proposta enviada"
    UNDER_EVALUATION = "under_evaluation", "Em avaliação"
    NEGOTIATION = "negotiation", "Negociação"
    CONTRACT_SENT = "contract_sent", "Contrato enviado"
    CONTRACT_SIGNED = "contract_signed", "Contrato assinado"
    LOST = "lost", "Perdido"


# status a partir dos quais a indicação não expira mais
CONVERTED_STATUSES = (
    IndicationStatus.CONTRACTED,
    IndicationStatus.INVOICE_SENT,
    IndicationStatus.PAID,
)


class IndicationQuerySet(models.QuerySet):
    def expired(self, now=None):
        now = now or timezone.now()
        return self.exclude(status__in=CONVERTED_STATUSES).filter(expires_at__lte=now)

    def not_expired(self, now=None):
        now = now or timezone.now()
        return self.filter(Q(status__in=CONVERTED_STATUSES) | Q(expires_at__gt=now))

    def for_expert(self, expert_id):
        return self.filter(expert_id=expert_id)

    def in_pipeline(self):
        """Colunas do CRM (kanban)."""
        return self.filter(
            status__in=(IndicationStatus.IN_CONTACT, IndicationStatus.CONTRACTED, IndicationStatus.LOST)
        )


class Indication(models.Model):
    class Channel(models.TextChoices):
        TECHNICAL_REPORT = "technical_report", "Relatório técnico"
        EMAIL = "email", "E-mail"
        CHAT = "chat", "Conversa (WhatsApp)"

    Status = IndicationStatus
    Stage = CRMStage

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    expert = models.ForeignKey(Expert, on_delete=models.PROTECT, related_name="indications")

    company_name = models.CharField(max_length=200)
    company_cnpj = models.CharField(max_length=14, db_index=True)
    contact_name = models.CharField(max_length=150)
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=32, blank=True)
    employee_count = models.PositiveIntegerField(null=True, blank=True)
    channel = models.CharField(max_length=20, choices=Channel.choices, default=Channel.TECHNICAL_REPORT)
    notes = models.TextField(blank=True)

    status = models.CharField(
        max_length=24, choices=IndicationStatus.choices, default=IndicationStatus.AWAITING_VALIDATION
    )
    crm_stage = models.CharField(max_length=24, choices=CRMStage.choices, null=True, blank=True)
    rejection_reason = models.TextField(null=True, blank=True)

    validated_at = models.DateTimeField(null=True, blank=True)
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
        related_name="validated_indications",
    )
    expires_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = IndicationQuerySet.as_manager()

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["status", "created_at"], name="indication_status_created_idx"),
            models.Index(fields=["expert", "status"], name="indication_expert_status_idx"),
        ]
        verbose_name = "Indicação"
        verbose_name_plural = "Indicações"

    def __str__(self):
        return f"{self.company_name} ({self.get_status_display()})"

    def ensure_expiration(self):
        if not self.expires_at:
            days = int(getattr(settings, "INDICATION_EXPIRY_DAYS", 90))
            self.expires_at = (self.created_at or timezone.now()) + timedelta(days=days)

    def is_expired_at(self, now) -> bool:
        if self.status in CONVERTED_STATUSES:
            return False
        self.ensure_expiration()
        return now >= self.expires_at

    def days_left_at(self, now):
        if self.status in CONVERTED_STATUSES:
            return None
        self.ensure_expiration()
        return max(0, (self.expires_at - now).days)
