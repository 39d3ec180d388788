# accounts/sessions.py
"""
Sessão explícita passada a cada chamada do ciclo de vida.

Os serviços nunca leem estado global : a view (ou o teste) resolve o token
Bearer com ``resolve_session`` e repassa a ``ActorSession`` obtida.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.utils import timezone

from .models import AccessSession, Expert, User

logger = logging.getLogger(__name__)

ADMIN = "admin"
EXPERT = "expert"


@dataclass(frozen=True)
class ActorSession:
    kind: str
    actor_id: str
    token: str
    valid_until: datetime
    ip_address: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.kind == ADMIN

    @property
    def is_expert(self) -> bool:
        return self.kind == EXPERT

    def is_valid(self, now=None) -> bool:
        return self.valid_until > (now or timezone.now())

    def get_expert(self) -> Expert:
        return Expert.objects.get(pk=self.actor_id)


def _to_actor(s: AccessSession) -> ActorSession:
    if s.admin_id:
        return ActorSession(ADMIN, str(s.admin_id), s.token, s.valid_until, s.ip_address)
    return ActorSession(EXPERT, str(s.expert_id), s.token, s.valid_until, s.ip_address)


def open_admin_session(user: User, *, ip_address=None, user_agent: str = "") -> ActorSession:
    s = AccessSession(admin=user, ip_address=ip_address, user_agent=(user_agent or "")[:255])
    s.ensure_token(hours=settings.ADMIN_SESSION_HOURS)
    s.save()
    User.objects.filter(pk=user.pk).update(last_login=timezone.now())
    logger.info("Sessão admin aberta: user=%s ip=%s", user.pk, ip_address)
    return _to_actor(s)


def open_expert_session(expert: Expert, *, ip_address=None, user_agent: str = "") -> ActorSession:
    s = AccessSession(expert=expert, ip_address=ip_address, user_agent=(user_agent or "")[:255])
    s.ensure_token(hours=settings.EXPERT_SESSION_HOURS)
    s.save()
    logger.info("Sessão expert aberta: expert=%s", expert.pk)
    return _to_actor(s)


def resolve_session(token: str) -> ActorSession:
    """Token desconhecido ou expirado -> PermissionDenied."""
    token = (token or "").strip()
    if not token:
        raise PermissionDenied("Sessão ausente.")
    s = (
        AccessSession.objects.select_related("admin", "expert")
        .filter(token=token, valid_until__gt=timezone.now())
        .first()
    )
    if s is None:
        raise PermissionDenied("Sessão inválida ou expirada.")
    if s.admin_id and not s.admin.is_active:
        raise PermissionDenied("Administrador inativo.")
    return _to_actor(s)


def close_session(token: str) -> int:
    deleted, _ = AccessSession.objects.filter(token=token).delete()
    return deleted


def purge_expired_sessions(now=None) -> int:
    deleted, _ = AccessSession.objects.filter(valid_until__lte=now or timezone.now()).delete()
    return deleted


def backoffice_actor(user: User, *, ip_address=None) -> ActorSession:
    """Ator para as ações do Django admin (usuário já autenticado pelo admin site)."""
    if not (user and user.is_active and user.is_staff):
        raise PermissionDenied("Reservado à administração.")
    valid_until = timezone.now() + timedelta(hours=settings.ADMIN_SESSION_HOURS)
    return ActorSession(ADMIN, str(user.pk), "", valid_until, ip_address)
