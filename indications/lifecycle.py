# indications/lifecycle.py
"""
Máquina de estados da indicação.

Status e etapas de CRM são enums fechados (``IndicationStatus`` / ``CRMStage``);
as tabelas abaixo são a única fonte das transições permitidas. Os serviços
chamam ``check_transition`` antes de qualquer escrita.
"""
from core.exceptions import InvalidTransition, ValidationFailed
from .models import CRMStage, IndicationStatus

S = IndicationStatus

# transições comandadas pelo admin ; INVOICE_SENT / PAID pertencem ao ciclo do benefício
TRANSITIONS = {
    S.AWAITING_VALIDATION: {S.IN_CONTACT, S.VALIDATION_REJECTED},
    S.IN_CONTACT: {S.CONTRACTED, S.LOST},
    S.UNDER_ANALYSIS: set(),
    S.VALIDATION_REJECTED: set(),
    S.CONTRACTED: set(),
    S.LOST: set(),
    S.INVOICE_SENT: set(),
    S.PAID: set(),
}

# etapas livres entre si (arrastar no kanban)
ACTIVE_STAGES = (
    CRMStage.INITIAL_CONTACT,
    CRMStage.PRESENTATION_SCHEDULED,
    CRMStage.PRESENTATION_DONE,
    CRMStage.PROPOSAL_SENT,
    CRMStage.UNDER_EVALUATION,
    CRMStage.NEGOTIATION,
    CRMStage.CONTRACT_SENT,
)
TERMINAL_STAGES = (CRMStage.CONTRACT_SIGNED, CRMStage.LOST)


def parse_status(value) -> IndicationStatus:
    try:
        return IndicationStatus(value)
    except ValueError:
        raise ValidationFailed(f"Status desconhecido: {value!r}.")


def parse_stage(value) -> CRMStage:
    try:
        return CRMStage(value)
    except ValueError:
        raise ValidationFailed(f"Etapa de CRM desconhecida: {value!r}.")


def can_transition(current, target) -> bool:
    return IndicationStatus(target) in TRANSITIONS.get(IndicationStatus(current), set())


def check_transition(current, target):
    if not can_transition(current, target):
        raise InvalidTransition(
            f"Transição não permitida: {IndicationStatus(current).label} → {IndicationStatus(target).label}.",
            current=str(current),
            target=str(target),
        )


def is_active(status) -> bool:
    """Indicação em prospecção comercial (pré-contrato)."""
    return status == S.IN_CONTACT


def check_stage_move(status, stage):
    if not is_active(status):
        raise InvalidTransition("Somente indicações em contato podem mudar de etapa no CRM.")
    if CRMStage(stage) not in ACTIVE_STAGES:
        raise InvalidTransition("Etapa terminal: use a transição dedicada.")
