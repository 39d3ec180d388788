# benefits/views.py
import logging
import mimetypes
import posixpath

from django.core import signing
from django.http import FileResponse, Http404, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from accounts.decorators import admin_required, expert_required, session_required
from accounts.permissions import require_owner_or_admin
from accounts.utils import json_body
from .models import Benefit
from .services import invoices, payments, storage

logger = logging.getLogger(__name__)


def _date(value):
    return value.isoformat() if value else None


def serialize_benefit(b: Benefit) -> dict:
    return {
        "id": str(b.pk),
        "indication_id": str(b.indication_id),
        "expert_id": str(b.expert_id),
        "amount": str(b.amount),
        "status": b.status,
        "status_label": b.get_status_display(),
        "contract_date": _date(b.contract_date),
        "first_client_payment_date": _date(b.first_client_payment_date),
        "invoice_eligible_from": _date(b.invoice_eligible_from),
        "expected_payment_date": _date(b.expected_payment_date),
        "client_paid_at": _date(b.client_paid_at),
        "invoice_submitted": b.invoice_submitted,
        "invoice_submitted_at": _date(b.invoice_submitted_at),
        "invoice_issued_on": _date(b.invoice_issued_on),
        "invoice_amount": str(b.invoice_amount) if b.invoice_amount is not None else None,
        "invoice_rejection_reason": b.invoice_rejection_reason,
        "payment_scheduled_for": _date(b.payment_scheduled_for),
        "payment_made": b.payment_made,
        "payment_date": _date(b.payment_date),
    }


def _ok(benefit, status=200):
    return JsonResponse({"success": True, "benefit": serialize_benefit(benefit)}, status=status)


@require_GET
@session_required()
def list_view(request):
    actor = request.actor
    qs = Benefit.objects.all()
    if actor.is_expert:
        qs = qs.filter(expert_id=actor.actor_id)
    status = request.GET.get("status")
    if status:
        qs = qs.filter(status=status)
    return JsonResponse({"success": True, "results": [serialize_benefit(b) for b in qs[:500]]})


@require_GET
@session_required()
def detail_view(request, pk):
    benefit = payments.get_benefit(pk)
    require_owner_or_admin(request.actor, benefit.expert_id)
    return _ok(benefit)


# -------------------------------------------------------------
# Admin
# -------------------------------------------------------------
@csrf_exempt
@require_POST
@admin_required
def confirm_client_payment_view(request, pk):
    return _ok(payments.confirm_client_payment(request.actor, pk))


@csrf_exempt
@require_POST
@admin_required
def approve_invoice_view(request, pk):
    return _ok(payments.approve_invoice(request.actor, pk))


@csrf_exempt
@require_POST
@admin_required
def reject_invoice_view(request, pk):
    data = json_body(request)
    return _ok(payments.reject_invoice(request.actor, pk, data.get("reason")))


@csrf_exempt
@require_POST
@admin_required
def schedule_payment_view(request, pk):
    data = json_body(request)
    return _ok(payments.schedule_payment(request.actor, pk, data.get("scheduled_for")))


@csrf_exempt
@require_POST
@admin_required
def mark_paid_view(request, pk):
    data = json_body(request)
    return _ok(payments.mark_paid(request.actor, pk, data.get("payment_date")))


# -------------------------------------------------------------
# Expert : NF
# -------------------------------------------------------------
@csrf_exempt
@require_POST
@expert_required
def upload_invoice_view(request, pk):
    benefit = invoices.submit_invoice(
        request.actor, pk, request.FILES.get("file"), amount=request.POST.get("amount"),
    )
    return _ok(benefit)


@require_GET
@session_required()
def invoice_url_view(request, pk):
    url = invoices.invoice_download_url(request.actor, pk)
    if url is None:
        return JsonResponse({"success": True, "url": None, "message": "Nenhuma NF disponível."})
    return JsonResponse({"success": True, "url": request.build_absolute_uri(url)})


@require_GET
def invoice_download(request, token):
    """Link assinado de curta duração ; o token em si é a credencial."""
    try:
        path = storage.unsign_token(token)
    except signing.SignatureExpired:
        return JsonResponse({"success": False, "error": "expired", "message": "Link expirado."}, status=410)
    except signing.BadSignature:
        return JsonResponse({"success": False, "error": "forbidden", "message": "Link inválido."}, status=403)

    if not storage.file_exists(path):
        logger.warning("Download de NF ausente do storage: %s", path)
        raise Http404("Arquivo não encontrado.")
    content_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return FileResponse(
        storage.open_file(path),
        content_type=content_type,
        as_attachment=True,
        filename=posixpath.basename(path),
    )
