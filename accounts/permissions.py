from django.core.exceptions import PermissionDenied


def require_admin(session):
    if session is None or not session.is_valid() or not session.is_admin:
        raise PermissionDenied("Reservado à administração.")


def require_expert(session):
    if session is None or not session.is_valid() or not session.is_expert:
        raise PermissionDenied("Reservado aos experts.")


def require_owner_or_admin(session, expert_id):
    """Admin vê tudo ; um expert só acessa os próprios registros."""
    if session is None or not session.is_valid():
        raise PermissionDenied()
    if session.is_admin:
        return
    if not session.is_expert or str(expert_id) != session.actor_id:
        raise PermissionDenied("Registro de outro expert.")
