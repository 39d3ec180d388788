# accounts/views.py
import logging

from django.contrib.auth import authenticate
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from core.exceptions import ValidationFailed
from . import experts
from .activity import log_activity
from .decorators import admin_required, expert_required, session_required
from .sessions import close_session, open_admin_session, purge_expired_sessions
from .utils import client_ip, error_response, json_body

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def login_view(request):
    """Login do administrador : devolve um token Bearer válido por ADMIN_SESSION_HOURS."""
    try:
        data = json_body(request)
    except ValidationFailed as e:
        return error_response(e)

    username = (data.get("username") or "").strip()
    password = data.get("password") or ""
    user = authenticate(request, username=username, password=password)
    if user is None:
        logger.info("Login admin recusado: username=%s", username)
        return JsonResponse(
            {"success": False, "error": "invalid_credentials", "message": "Usuário ou senha inválidos."},
            status=401,
        )

    purge_expired_sessions()
    session = open_admin_session(
        user,
        ip_address=client_ip(request),
        user_agent=request.headers.get("User-Agent", ""),
    )
    log_activity(session, "login", details={"ip_address": session.ip_address})
    return JsonResponse(
        {
            "success": True,
            "token": session.token,
            "valid_until": session.valid_until.isoformat(),
            "admin": {"id": user.pk, "username": user.username, "name": user.get_full_name()},
        }
    )


@csrf_exempt
@require_POST
@session_required()
def logout_view(request):
    actor = request.actor
    if actor.is_admin:
        log_activity(actor, "logout")
    close_session(actor.token)
    return JsonResponse({"success": True})


def serialize_expert(expert) -> dict:
    return {
        "id": str(expert.pk),
        "email": expert.email,
        "name": expert.name,
        "whatsapp": expert.whatsapp,
        "profile_type": expert.profile_type,
        "company_name": expert.company_name,
        "company_cnpj": expert.company_cnpj,
        "can_issue_invoice": expert.can_issue_invoice,
        "status": expert.status,
        "status_reason": expert.status_reason,
        "course_completed": expert.course_completed,
        "course_completed_at": expert.course_completed_at.isoformat() if expert.course_completed_at else None,
        "can_submit_indications": expert.can_submit_indications,
        "pix_key": expert.pix_key,
        "pix_key_type": expert.pix_key_type,
    }


def _expert_ok(expert):
    return JsonResponse({"success": True, "expert": serialize_expert(expert)})


# -------------------------------------------------------------
# Expert : autoatendimento
# -------------------------------------------------------------
@csrf_exempt
@require_http_methods(["GET", "POST"])
@expert_required
def me_view(request):
    """GET : dados do expert logado ; POST : atualização parcial."""
    if request.method == "POST":
        return _expert_ok(experts.update_profile(request.actor, json_body(request)))
    return _expert_ok(experts.get_expert(request.actor.actor_id))


@csrf_exempt
@require_POST
@expert_required
def course_completed_view(request):
    return _expert_ok(experts.complete_course(request.actor))


# -------------------------------------------------------------
# Admin : cadastro dos experts
# -------------------------------------------------------------
@csrf_exempt
@require_POST
@admin_required
def expert_approve_view(request, pk):
    return _expert_ok(experts.approve_expert(request.actor, pk))


@csrf_exempt
@require_POST
@admin_required
def expert_reject_view(request, pk):
    data = json_body(request)
    return _expert_ok(experts.reject_expert(request.actor, pk, data.get("reason")))
