# benefits/services/payments.py
"""
Transições do benefício comandadas pelo admin :
pagamento do cliente, conferência da NF, agendamento e pagamento ao expert.
"""
from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from accounts.activity import log_activity
from accounts.permissions import require_admin
from core.exceptions import NotFound, ValidationFailed
from core.utils.inputs import clean_date, clean_reason
from indications.models import Indication, IndicationStatus
from ..lifecycle import check_transition
from ..models import Benefit, BenefitStatus

logger = logging.getLogger(__name__)

B = BenefitStatus
ENTITY = "benefit"


def get_benefit(benefit_id, *, for_update: bool = False) -> Benefit:
    qs = Benefit.objects.select_related("indication", "expert")
    if for_update:
        qs = qs.select_for_update(of=("self",))
    try:
        return qs.get(pk=benefit_id)
    except (Benefit.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Benefício não encontrado.", benefit_id=str(benefit_id))


def _log(session, action, benefit, old_status, **extra):
    log_activity(session, action, ENTITY, benefit.pk, {
        "old_status": old_status,
        "new_status": benefit.status,
        **extra,
    })


@transaction.atomic
def confirm_client_payment(session, benefit_id) -> Benefit:
    """Cliente pagou a 1ª mensalidade : libera o envio da NF."""
    require_admin(session)
    benefit = get_benefit(benefit_id, for_update=True)
    old = benefit.status
    check_transition(old, B.RELEASED_FOR_INVOICE)

    benefit.status = B.RELEASED_FOR_INVOICE
    benefit.client_paid_at = timezone.now()
    benefit.save(update_fields=["status", "client_paid_at", "updated_at"])

    _log(session, "confirm_client_payment", benefit, old)
    logger.info("Pagamento do cliente confirmado: benefit=%s", benefit.pk)
    return benefit


@transaction.atomic
def approve_invoice(session, benefit_id) -> Benefit:
    require_admin(session)
    benefit = get_benefit(benefit_id, for_update=True)
    old = benefit.status
    check_transition(old, B.PROCESSING_PAYMENT)

    benefit.status = B.PROCESSING_PAYMENT
    benefit.save(update_fields=["status", "updated_at"])

    _log(session, "approve_invoice", benefit, old)
    logger.info("NF aprovada: benefit=%s", benefit.pk)
    return benefit


@transaction.atomic
def reject_invoice(session, benefit_id, reason) -> Benefit:
    require_admin(session)
    reason = clean_reason(reason, "Informe a justificativa da recusa da NF.")
    benefit = get_benefit(benefit_id, for_update=True)
    old = benefit.status
    check_transition(old, B.INVOICE_REJECTED)

    benefit.status = B.INVOICE_REJECTED
    benefit.invoice_rejection_reason = reason
    benefit.save(update_fields=["status", "invoice_rejection_reason", "updated_at"])

    _log(session, "reject_invoice", benefit, old, reason=reason)
    logger.info("NF recusada: benefit=%s", benefit.pk)
    return benefit


@transaction.atomic
def schedule_payment(session, benefit_id, scheduled_for) -> Benefit:
    require_admin(session)
    scheduled_for = clean_date(scheduled_for, "data prevista para pagamento")
    benefit = get_benefit(benefit_id, for_update=True)
    old = benefit.status
    check_transition(old, B.SCHEDULED)
    if scheduled_for < benefit.contract_date:
        raise ValidationFailed("A data de pagamento não pode ser anterior à data do contrato.")

    benefit.status = B.SCHEDULED
    benefit.payment_scheduled_for = scheduled_for
    benefit.save(update_fields=["status", "payment_scheduled_for", "updated_at"])

    _log(session, "schedule_payment", benefit, old, scheduled_for=scheduled_for)
    logger.info("Pagamento agendado: benefit=%s para %s", benefit.pk, scheduled_for)
    return benefit


@transaction.atomic
def mark_paid(session, benefit_id, paid_on=None) -> Benefit:
    """Pagamento ao expert executado ; a indicação recebe o marcador ``paid``."""
    require_admin(session)
    paid_on = timezone.localdate() if paid_on in (None, "") else clean_date(paid_on, "data do pagamento")
    benefit = get_benefit(benefit_id, for_update=True)
    old = benefit.status
    check_transition(old, B.PAID)

    benefit.status = B.PAID
    benefit.payment_made = True
    benefit.payment_date = paid_on
    benefit.save(update_fields=["status", "payment_made", "payment_date", "updated_at"])

    Indication.objects.filter(pk=benefit.indication_id).update(
        status=IndicationStatus.PAID, updated_at=timezone.now()
    )

    _log(session, "mark_as_paid", benefit, old, payment_date=paid_on, amount=benefit.amount)
    logger.info("Benefício pago: benefit=%s valor=%s em %s", benefit.pk, benefit.amount, paid_on)
    return benefit
