# benefits/services/invoices.py
"""
Envio e substituição da NF pelo expert.

Ordem : validação do arquivo (sem I/O) -> trava e checagem da transição ->
remoção do arquivo antigo (melhor esforço) -> gravação do novo -> atualização
do registro. Se a atualização falhar, o arquivo recém-gravado é removido.
"""
from __future__ import annotations

import logging
import re
import time

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.db import DatabaseError, transaction
from django.utils import timezone

from accounts.activity import log_activity
from accounts.permissions import require_expert, require_owner_or_admin
from core.exceptions import DependencyFailure, InvalidTransition, ValidationFailed
from core.utils.inputs import clean_amount
from indications.models import Indication, IndicationStatus
from . import storage
from .payments import get_benefit
from ..lifecycle import check_transition
from ..models import Benefit, BenefitStatus

logger = logging.getLogger(__name__)

B = BenefitStatus

EXTENSION_BY_TYPE = {
    "application/pdf": "pdf",
    "text/xml": "xml",
    "application/xml": "xml",
}

_UNSAFE_CHARS_RE = re.compile(r"[^\w\s\-\.]")
_SPACES_RE = re.compile(r"\s+")
_UNDERSCORES_RE = re.compile(r"_+")


def _content_type(upload) -> str:
    return (getattr(upload, "content_type", "") or "").split(";")[0].strip().lower()


def validate_upload(upload):
    """Tipo (PDF/XML) e tamanho (<= INVOICE_MAX_BYTES) ; nenhum I/O."""
    if upload is None:
        raise ValidationFailed("Selecione o arquivo da NF.")
    allowed = getattr(settings, "INVOICE_ALLOWED_CONTENT_TYPES", tuple(EXTENSION_BY_TYPE))
    if _content_type(upload) not in allowed:
        raise ValidationFailed("Tipo de arquivo inválido. Apenas PDF e XML são aceitos.")
    size = getattr(upload, "size", None) or 0
    if size <= 0:
        raise ValidationFailed("O arquivo enviado está vazio.")
    max_bytes = settings.INVOICE_MAX_BYTES
    if size > max_bytes:
        raise ValidationFailed(f"O arquivo excede o limite de {max_bytes // (1024 * 1024)} MB.")


def sanitize_filename(name: str) -> str:
    base, dot, ext = (name or "").rpartition(".")
    if not dot or not base:
        base, ext = name or "", ""
    cleaned = _UNSAFE_CHARS_RE.sub("_", base)
    cleaned = _SPACES_RE.sub("_", cleaned)
    cleaned = _UNDERSCORES_RE.sub("_", cleaned).strip("_")
    if not cleaned:
        cleaned = f"file_{int(time.time() * 1000)}"
    return f"{cleaned}.{ext.lower()}" if ext else cleaned


def build_invoice_path(expert_id, benefit_id, filename: str, content_type: str, now_ms=None) -> str:
    """``{expert_id}/{benefit_id}_{unix_ms}.{ext}``"""
    now_ms = int(time.time() * 1000) if now_ms is None else int(now_ms)
    _, dot, ext = sanitize_filename(filename).rpartition(".")
    if not dot or ext not in ("pdf", "xml"):
        ext = EXTENSION_BY_TYPE.get(content_type, "pdf")
    return f"{expert_id}/{benefit_id}_{now_ms}.{ext}"


def _discard(path: str, reason: str):
    try:
        storage.delete_file(path)
    except Exception:
        logger.warning("Falha ao remover arquivo de NF (%s): %s", reason, path, exc_info=True)


def submit_invoice(session, benefit_id, upload, *, amount=None) -> Benefit:
    """
    Primeiro envio (released_for_invoice) ou substituição (awaiting_review /
    invoice_rejected) ; em ambos os casos o benefício vai para awaiting_review.

    A linha fica travada do teste de transição até a gravação : o arquivo
    antigo só é removido depois que a substituição foi aceita.
    """
    require_expert(session)
    validate_upload(upload)
    declared = None if amount in (None, "") else clean_amount(amount)
    content_type = _content_type(upload)

    stored_path = None
    try:
        with transaction.atomic():
            benefit = get_benefit(benefit_id, for_update=True)
            if str(benefit.expert_id) != session.actor_id:
                raise PermissionDenied("Este benefício pertence a outro expert.")
            if not benefit.accepts_invoice:
                raise InvalidTransition("O envio de NF não está liberado para este benefício.")
            old_status = benefit.status
            check_transition(old_status, B.AWAITING_REVIEW)

            old_path = benefit.invoice_file
            is_replacement = bool(old_path)
            if is_replacement:
                # melhor esforço : uma falha aqui não bloqueia o novo envio
                _discard(old_path, "substituição")

            path = build_invoice_path(benefit.expert_id, benefit.pk, upload.name, content_type)
            try:
                stored_path = storage.store_file(path, upload)
            except Exception as e:
                logger.exception("Falha no upload da NF: benefit=%s path=%s", benefit.pk, path)
                raise DependencyFailure(f"Falha ao enviar o arquivo: {e}")

            now = timezone.now()
            benefit.status = B.AWAITING_REVIEW
            benefit.invoice_submitted = True
            benefit.invoice_submitted_at = now
            benefit.invoice_issued_on = timezone.localdate(now)
            benefit.invoice_amount = declared if declared is not None else benefit.amount
            benefit.invoice_file = stored_path
            benefit.invoice_rejection_reason = None
            benefit.save(update_fields=[
                "status", "invoice_submitted", "invoice_submitted_at", "invoice_issued_on",
                "invoice_amount", "invoice_file", "invoice_rejection_reason", "updated_at",
            ])

            Indication.objects.filter(
                pk=benefit.indication_id,
                status__in=(IndicationStatus.CONTRACTED, IndicationStatus.INVOICE_SENT),
            ).update(status=IndicationStatus.INVOICE_SENT, updated_at=now)

            log_activity(session, "upload_invoice", "benefit", benefit.pk, {
                "old_status": old_status,
                "new_status": benefit.status,
                "file": stored_path,
                "replaced": old_path or None,
                "content_type": content_type,
                "size": upload.size,
            })
    except DatabaseError:
        logger.exception("Falha ao registrar a NF: benefit=%s", benefit_id)
        if stored_path:
            _discard(stored_path, "compensação")
        raise DependencyFailure("Falha ao atualizar o benefício no banco de dados.")

    logger.info("NF enviada: benefit=%s path=%s substituicao=%s", benefit.pk, stored_path, is_replacement)
    return benefit


def invoice_on_file(benefit: Benefit) -> bool:
    """Registro apontando para arquivo ausente = "nenhuma NF" (estado recuperável)."""
    return storage.file_exists(benefit.invoice_file)


def invoice_download_url(session, benefit_id):
    """URL assinada e de curta duração, ou None se não houver NF disponível."""
    benefit = get_benefit(benefit_id)
    require_owner_or_admin(session, benefit.expert_id)
    if not invoice_on_file(benefit):
        if benefit.invoice_file:
            logger.warning("NF registrada mas ausente do storage: benefit=%s path=%s",
                           benefit.pk, benefit.invoice_file)
        return None
    return storage.resolve_download_url(benefit.invoice_file)
