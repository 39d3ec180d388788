# indications/services.py
"""
Transições da indicação comandadas pelo admin (e a criação pelo expert).

Cada função recebe a ``ActorSession`` explícita, valida as entradas antes de
qualquer escrita, trava a linha (``select_for_update``) e grava o registro de
atividade na mesma transação.
"""
from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from accounts.activity import log_activity
from accounts.permissions import require_admin, require_expert
from benefits.models import Benefit, BenefitStatus
from benefits.services.dates import derive_dates
from core.exceptions import ConflictError, InvalidTransition, NotFound, ValidationFailed
from core.utils.inputs import clean_amount, clean_date, clean_reason
from .forms import IndicationForm
from .lifecycle import check_stage_move, check_transition, parse_stage, parse_status
from .models import CRMStage, Indication, IndicationStatus

logger = logging.getLogger(__name__)

S = IndicationStatus
ENTITY = "indication"


# -------------------------------------------------------------
# Helpers
# -------------------------------------------------------------
def get_indication(indication_id, *, for_update: bool = False) -> Indication:
    qs = Indication.objects.select_related("expert")
    if for_update:
        qs = qs.select_for_update(of=("self",))
    try:
        return qs.get(pk=indication_id)
    except (Indication.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Indicação não encontrada.", indication_id=str(indication_id))


def _admin_pk(session):
    return int(session.actor_id)


def _has_benefit(indication_id) -> bool:
    return Benefit.objects.filter(indication_id=indication_id).exists()


# -------------------------------------------------------------
# Expert : nova indicação
# -------------------------------------------------------------
@transaction.atomic
def submit_indication(session, data: dict) -> Indication:
    require_expert(session)
    expert = session.get_expert()
    if not expert.can_submit_indications:
        raise ValidationFailed(
            "Seu cadastro precisa estar aprovado e o curso concluído para enviar indicações."
        )

    form = IndicationForm(data)
    if not form.is_valid():
        raise ValidationFailed(form.error_message(), errors=form.errors.get_json_data())

    indication = form.save(commit=False)
    indication.expert = expert
    indication.status = S.AWAITING_VALIDATION
    indication.crm_stage = None
    indication.save()

    log_activity(session, "create_indication", ENTITY, indication.pk, {"company_cnpj": indication.company_cnpj})
    logger.info("Indicação criada: id=%s expert=%s", indication.pk, expert.pk)
    return indication


# -------------------------------------------------------------
# Admin : validação
# -------------------------------------------------------------
@transaction.atomic
def approve(session, indication_id) -> Indication:
    require_admin(session)
    ind = get_indication(indication_id, for_update=True)
    old = ind.status
    check_transition(old, S.IN_CONTACT)

    ind.status = S.IN_CONTACT
    ind.validated_at = timezone.now()
    ind.validated_by_id = _admin_pk(session)
    ind.save(update_fields=["status", "validated_at", "validated_by", "updated_at"])

    log_activity(session, f"update_indication_status_{S.IN_CONTACT}", ENTITY, ind.pk,
                 {"old_status": old, "new_status": ind.status})
    logger.info("Indicação aprovada: id=%s admin=%s", ind.pk, session.actor_id)
    return ind


@transaction.atomic
def reject(session, indication_id, reason) -> Indication:
    require_admin(session)
    reason = clean_reason(reason)
    ind = get_indication(indication_id, for_update=True)
    old = ind.status
    check_transition(old, S.VALIDATION_REJECTED)

    ind.status = S.VALIDATION_REJECTED
    ind.rejection_reason = reason
    ind.validated_at = timezone.now()
    ind.validated_by_id = _admin_pk(session)
    ind.save(update_fields=["status", "rejection_reason", "validated_at", "validated_by", "updated_at"])

    log_activity(session, f"update_indication_status_{S.VALIDATION_REJECTED}", ENTITY, ind.pk,
                 {"old_status": old, "new_status": ind.status, "reason": reason})
    logger.info("Indicação recusada: id=%s admin=%s", ind.pk, session.actor_id)
    return ind


# -------------------------------------------------------------
# Admin : contrato assinado -> benefício
# -------------------------------------------------------------
@transaction.atomic
def mark_contracted(session, indication_id, amount, contract_date) -> Benefit:
    """
    in_contact -> contracted + criação do benefício (única por indicação).

    Entradas validadas antes de tudo ; benefício existente -> ConflictError
    sem nenhuma alteração. A unicidade em banco (OneToOne) fecha a janela
    entre a checagem e o insert.
    """
    require_admin(session)
    amount = clean_amount(amount)
    contract_date = clean_date(contract_date)

    ind = get_indication(indication_id, for_update=True)
    if _has_benefit(ind.pk):
        raise ConflictError(
            "Já existe um benefício criado para esta indicação. Não é possível criar duplicados.",
            indication_id=str(ind.pk),
        )
    old_status, old_stage = ind.status, ind.crm_stage
    check_transition(old_status, S.CONTRACTED)

    dates = derive_dates(contract_date)
    try:
        with transaction.atomic():
            benefit = Benefit.objects.create(
                indication=ind,
                expert_id=ind.expert_id,
                amount=amount,
                contract_date=contract_date,
                first_client_payment_date=dates.first_client_payment,
                invoice_eligible_from=dates.invoice_eligible_from,
                expected_payment_date=dates.expected_payment,
                status=BenefitStatus.AWAITING_CLIENT_PAYMENT,
            )
    except IntegrityError:
        raise ConflictError(
            "Já existe um benefício criado para esta indicação. Não é possível criar duplicados.",
            indication_id=str(ind.pk),
        )

    ind.status = S.CONTRACTED
    ind.crm_stage = CRMStage.CONTRACT_SIGNED
    ind.save(update_fields=["status", "crm_stage", "updated_at"])

    log_activity(session, f"update_indication_status_{S.CONTRACTED}", ENTITY, ind.pk, {
        "old_status": old_status,
        "new_status": ind.status,
        "old_crm_status": old_stage,
        "benefit_id": str(benefit.pk),
        "benefit_data": {"amount": amount, "contract_date": contract_date, **dates.as_dict()},
    })
    logger.info("Indicação contratada: id=%s benefit=%s valor=%s", ind.pk, benefit.pk, amount)
    return benefit


@transaction.atomic
def mark_lost(session, indication_id) -> Indication:
    require_admin(session)
    ind = get_indication(indication_id, for_update=True)
    old_status, old_stage = ind.status, ind.crm_stage
    check_transition(old_status, S.LOST)

    ind.status = S.LOST
    ind.crm_stage = CRMStage.LOST
    ind.save(update_fields=["status", "crm_stage", "updated_at"])

    log_activity(session, "mark_as_lost", ENTITY, ind.pk, {
        "old_status": old_status,
        "old_crm_status": old_stage,
    })
    logger.info("Indicação perdida: id=%s", ind.pk)
    return ind


# -------------------------------------------------------------
# Admin : CRM (kanban)
# -------------------------------------------------------------
@transaction.atomic
def move_crm_stage(session, indication_id, stage, *, amount=None, contract_date=None) -> Indication:
    """
    Mudança livre entre as etapas ativas ; ``contract_signed`` passa pela
    transição protegida ``mark_contracted`` e ``lost`` por ``mark_lost``.
    """
    require_admin(session)
    stage = parse_stage(stage)
    if stage == CRMStage.CONTRACT_SIGNED:
        return mark_contracted(session, indication_id, amount, contract_date).indication
    if stage == CRMStage.LOST:
        return mark_lost(session, indication_id)

    ind = get_indication(indication_id, for_update=True)
    check_stage_move(ind.status, stage)
    if ind.crm_stage == stage:
        return ind

    old_stage = ind.crm_stage
    ind.crm_stage = stage
    ind.save(update_fields=["crm_stage", "updated_at"])

    log_activity(session, "update_crm_status", ENTITY, ind.pk, {"old_status": old_stage, "new_status": stage})
    logger.info("Etapa CRM: id=%s %s -> %s", ind.pk, old_stage, stage)
    return ind


def change_status(session, indication_id, status, *, reason=None, amount=None, contract_date=None) -> Indication:
    """Edição direta de status pelo admin ; despacha para a transição correspondente."""
    require_admin(session)
    target = parse_status(status)
    if target == S.IN_CONTACT:
        return approve(session, indication_id)
    if target == S.VALIDATION_REJECTED:
        return reject(session, indication_id, reason)
    if target == S.CONTRACTED:
        return mark_contracted(session, indication_id, amount, contract_date).indication
    if target == S.LOST:
        return mark_lost(session, indication_id)
    raise InvalidTransition(f"O status {target.label} não pode ser definido manualmente.")
