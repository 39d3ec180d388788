# accounts/experts.py
"""
Cadastro do expert : aprovação pelo admin e autoatendimento (curso e dados).
"""
from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.forms.models import model_to_dict
from django.utils import timezone

from core.exceptions import InvalidTransition, NotFound, ValidationFailed
from core.utils.inputs import clean_reason
from .activity import log_activity
from .forms import PROFILE_FIELDS, ExpertProfileForm
from .models import Expert
from .permissions import require_admin, require_expert

logger = logging.getLogger(__name__)

ES = Expert.Status
ENTITY = "expert"


def get_expert(expert_id, *, for_update: bool = False) -> Expert:
    qs = Expert.objects.all()
    if for_update:
        qs = qs.select_for_update()
    try:
        return qs.get(pk=expert_id)
    except (Expert.DoesNotExist, ValidationError, ValueError):
        raise NotFound("Expert não encontrado.", expert_id=str(expert_id))


# -------------------------------------------------------------
# Admin : aprovação do cadastro
# -------------------------------------------------------------
@transaction.atomic
def approve_expert(session, expert_id) -> Expert:
    require_admin(session)
    expert = get_expert(expert_id, for_update=True)
    old = expert.status
    if old == ES.APPROVED:
        raise InvalidTransition("Este expert já está aprovado.")

    expert.status = ES.APPROVED
    expert.status_reason = ""
    expert.save(update_fields=["status", "status_reason", "updated_at"])

    log_activity(session, "approve_expert", ENTITY, expert.pk, {"old_status": old, "new_status": expert.status})
    logger.info("Expert aprovado: id=%s admin=%s", expert.pk, session.actor_id)
    return expert


@transaction.atomic
def reject_expert(session, expert_id, reason) -> Expert:
    require_admin(session)
    reason = clean_reason(reason)
    expert = get_expert(expert_id, for_update=True)
    old = expert.status
    if old == ES.REJECTED:
        raise InvalidTransition("Este expert já está reprovado.")

    expert.status = ES.REJECTED
    expert.status_reason = reason
    expert.save(update_fields=["status", "status_reason", "updated_at"])

    log_activity(session, "reject_expert", ENTITY, expert.pk,
                 {"old_status": old, "new_status": expert.status, "reason": reason})
    logger.info("Expert reprovado: id=%s admin=%s", expert.pk, session.actor_id)
    return expert


# -------------------------------------------------------------
# Expert : autoatendimento
# -------------------------------------------------------------
@transaction.atomic
def complete_course(session) -> Expert:
    """Marca o curso obrigatório como concluído ; repetir não muda a data."""
    require_expert(session)
    expert = get_expert(session.actor_id, for_update=True)
    if expert.course_completed:
        return expert

    expert.course_completed = True
    expert.course_completed_at = timezone.now()
    expert.save(update_fields=["course_completed", "course_completed_at", "updated_at"])

    log_activity(session, "complete_course", ENTITY, expert.pk,
                 {"completed_at": expert.course_completed_at})
    logger.info("Curso concluído: expert=%s", expert.pk)
    return expert


@transaction.atomic
def update_profile(session, data: dict) -> Expert:
    """Atualização parcial : campos ausentes mantêm o valor atual."""
    require_expert(session)
    expert = get_expert(session.actor_id, for_update=True)
    current = model_to_dict(expert, fields=PROFILE_FIELDS)
    merged = {**current, **{k: v for k, v in (data or {}).items() if k in PROFILE_FIELDS}}

    form = ExpertProfileForm(merged, instance=expert)
    if not form.is_valid():
        raise ValidationFailed(form.error_message(), errors=form.errors.get_json_data())
    changed = [name for name in form.changed_data if name in PROFILE_FIELDS]
    expert = form.save()

    if changed:
        log_activity(session, "update_profile", ENTITY, expert.pk, {"fields": sorted(changed)})
        logger.info("Dados do expert atualizados: expert=%s campos=%s", expert.pk, ",".join(sorted(changed)))
    return expert
