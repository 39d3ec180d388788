# benefits/lifecycle.py
from core.exceptions import InvalidTransition
from .models import BenefitStatus

B = BenefitStatus

TRANSITIONS = {
    B.AWAITING_CLIENT_PAYMENT: {B.RELEASED_FOR_INVOICE},
    B.RELEASED_FOR_INVOICE: {B.AWAITING_REVIEW},
    # reenvio de NF antes da conferência substitui o arquivo
    B.AWAITING_REVIEW: {B.AWAITING_REVIEW, B.PROCESSING_PAYMENT, B.INVOICE_REJECTED},
    B.INVOICE_REJECTED: {B.AWAITING_REVIEW},
    B.PROCESSING_PAYMENT: {B.SCHEDULED, B.PAID},
    B.SCHEDULED: {B.PAID},
    B.PAID: set(),
}


def can_transition(current, target) -> bool:
    return BenefitStatus(target) in TRANSITIONS.get(BenefitStatus(current), set())


def check_transition(current, target):
    if not can_transition(current, target):
        raise InvalidTransition(
            f"Transição não permitida: {BenefitStatus(current).label} → {BenefitStatus(target).label}.",
            current=str(current),
            target=str(target),
        )
