# accounts/decorators.py
import functools
import logging
from dataclasses import replace

from django.core.exceptions import PermissionDenied
from django.http import JsonResponse

from core.exceptions import LifecycleError
from .sessions import ADMIN, EXPERT, resolve_session
from .utils import bearer_token, client_ip, error_response

logger = logging.getLogger(__name__)


def session_required(kind=None):
    """
    Resolve o token Bearer na tabela de sessões e expõe ``request.actor``.
    Erros de negócio e de permissão viram respostas JSON.
    """
    if kind not in (None, ADMIN, EXPERT):
        raise ValueError(f"Tipo de sessão desconhecido: {kind}")

    def decorator(view):
        @functools.wraps(view)
        def wrapper(request, *args, **kwargs):
            try:
                actor = resolve_session(bearer_token(request))
                if kind and actor.kind != kind:
                    raise PermissionDenied("Acesso não autorizado para este perfil.")
                request.actor = replace(actor, ip_address=client_ip(request))
                return view(request, *args, **kwargs)
            except PermissionDenied as e:
                return JsonResponse(
                    {"success": False, "error": "forbidden", "message": str(e) or "Acesso negado."},
                    status=403,
                )
            except LifecycleError as e:
                logger.info("Operação recusada (%s): %s", e.code, e.message)
                return error_response(e)
        return wrapper
    return decorator


admin_required = session_required(ADMIN)
expert_required = session_required(EXPERT)
