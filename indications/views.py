# indications/views.py
import logging

from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import admin_required, expert_required, session_required
from accounts.permissions import require_owner_or_admin
from accounts.utils import json_body
from . import services
from .lifecycle import parse_status
from .models import Indication

logger = logging.getLogger(__name__)


def serialize_indication(ind: Indication, now=None) -> dict:
    now = now or timezone.now()
    benefit = getattr(ind, "benefit", None)
    return {
        "id": str(ind.pk),
        "expert_id": str(ind.expert_id),
        "company_name": ind.company_name,
        "company_cnpj": ind.company_cnpj,
        "contact_name": ind.contact_name,
        "contact_email": ind.contact_email,
        "contact_phone": ind.contact_phone,
        "employee_count": ind.employee_count,
        "channel": ind.channel,
        "notes": ind.notes,
        "status": ind.status,
        "status_label": ind.get_status_display(),
        "crm_stage": ind.crm_stage,
        "rejection_reason": ind.rejection_reason,
        "validated_at": ind.validated_at.isoformat() if ind.validated_at else None,
        "created_at": ind.created_at.isoformat(),
        "expires_at": ind.expires_at.isoformat() if ind.expires_at else None,
        "expired": ind.is_expired_at(now),
        "days_left": ind.days_left_at(now),
        "benefit_id": str(benefit.pk) if benefit else None,
    }


def _ok(ind, status=200):
    return JsonResponse({"success": True, "indication": serialize_indication(ind)}, status=status)


# -------------------------------------------------------------
# Leitura
# -------------------------------------------------------------
@require_GET
@session_required()
def list_view(request):
    """
    Admin : todas ; expert : apenas as próprias.
    Filtros : ?status=, ?pipeline=1 e ?active=1|0 (só as vigentes | só as expiradas).
    """
    actor = request.actor
    qs = Indication.objects.select_related("benefit")
    if actor.is_expert:
        qs = qs.for_expert(actor.actor_id)
    status = request.GET.get("status")
    if status:
        qs = qs.filter(status=parse_status(status))
    if request.GET.get("pipeline") in ("1", "true"):
        qs = qs.in_pipeline()
    now = timezone.now()
    active = request.GET.get("active")
    if active in ("1", "true"):
        qs = qs.not_expired(now)
    elif active in ("0", "false"):
        qs = qs.expired(now)
    return JsonResponse({"success": True, "results": [serialize_indication(i, now) for i in qs[:500]]})


@require_GET
@session_required()
def detail_view(request, pk):
    ind = services.get_indication(pk)
    require_owner_or_admin(request.actor, ind.expert_id)
    return _ok(ind)


# -------------------------------------------------------------
# Expert
# -------------------------------------------------------------
@csrf_exempt
@require_POST
@expert_required
def create_view(request):
    ind = services.submit_indication(request.actor, json_body(request))
    return _ok(ind, status=201)


# -------------------------------------------------------------
# Admin : transições
# -------------------------------------------------------------
@csrf_exempt
@require_POST
@admin_required
def approve_view(request, pk):
    return _ok(services.approve(request.actor, pk))


@csrf_exempt
@require_POST
@admin_required
def reject_view(request, pk):
    data = json_body(request)
    return _ok(services.reject(request.actor, pk, data.get("reason")))


@csrf_exempt
@require_POST
@admin_required
def contract_view(request, pk):
    data = json_body(request)
    benefit = services.mark_contracted(request.actor, pk, data.get("amount"), data.get("contract_date"))
    return JsonResponse(
        {
            "success": True,
            "indication": serialize_indication(benefit.indication),
            "benefit_id": str(benefit.pk),
        },
        status=201,
    )


@csrf_exempt
@require_POST
@admin_required
def lost_view(request, pk):
    return _ok(services.mark_lost(request.actor, pk))


@csrf_exempt
@require_POST
@admin_required
def crm_stage_view(request, pk):
    data = json_body(request)
    ind = services.move_crm_stage(
        request.actor, pk, data.get("stage"),
        amount=data.get("amount"), contract_date=data.get("contract_date"),
    )
    return _ok(ind)


@csrf_exempt
@require_POST
@admin_required
def status_view(request, pk):
    data = json_body(request)
    ind = services.change_status(
        request.actor, pk, data.get("status"),
        reason=data.get("reason"), amount=data.get("amount"), contract_date=data.get("contract_date"),
    )
    return _ok(ind)
