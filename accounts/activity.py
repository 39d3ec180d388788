# accounts/activity.py
import json
import logging

from django.core.serializers.json import DjangoJSONEncoder

from .models import ActivityLog

logger = logging.getLogger(__name__)


def _jsonable(details):
    # Decimal / date / UUID -> valores JSON simples
    return json.loads(json.dumps(details or {}, cls=DjangoJSONEncoder))


def log_activity(session, action: str, entity_type: str = "", entity_id="", details=None) -> ActivityLog:
    """
    Acrescenta uma entrada ao registro de atividades. ``session`` = None para
    ações do sistema.
    """
    if session is None:
        actor_type, actor_id, ip = ActivityLog.ActorType.SYSTEM, "", None
    else:
        actor_type, actor_id, ip = session.kind, session.actor_id, session.ip_address
    entry = ActivityLog.objects.create(
        actor_type=actor_type,
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id or ""),
        details=_jsonable(details),
        ip_address=ip,
    )
    logger.debug("Atividade registrada: %s %s:%s por %s", action, entity_type, entity_id, actor_id or "system")
    return entry
