import pytest
from django.core.exceptions import PermissionDenied
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError

from benefits.models import Benefit, BenefitStatus as B
from benefits.services import invoices, payments, storage
from core.exceptions import DependencyFailure, InvalidTransition, ValidationFailed
from indications.models import IndicationStatus

pytestmark = pytest.mark.django_db

PDF = b"%PDF-1.4 nota fiscal de teste"


def _pdf(name="NF 123 (março).pdf", content=PDF, content_type="application/pdf"):
    return SimpleUploadedFile(name, content, content_type=content_type)


@pytest.fixture
def released(admin_session, benefit):
    return payments.confirm_client_payment(admin_session, benefit.pk)


@pytest.fixture
def no_storage(monkeypatch):
    def _fail(*args, **kwargs):
        raise AssertionError("storage não deveria ser acessado")
    monkeypatch.setattr(storage, "store_file", _fail)
    monkeypatch.setattr(storage, "delete_file", _fail)


# ----------------------------
# Validação do arquivo (sem I/O)
# ----------------------------

@pytest.mark.parametrize("upload", [
    SimpleUploadedFile("nota.png", b"\x89PNG", content_type="image/png"),
    SimpleUploadedFile("nota.pdf", b"%PDF", content_type="application/octet-stream"),
    SimpleUploadedFile("nota.pdf", b"", content_type="application/pdf"),
    SimpleUploadedFile("nota.pdf", b"0" * (10 * 1024 * 1024 + 1), content_type="application/pdf"),
    None,
])
def test_invalid_file_touches_neither_storage_nor_database(
    expert_session, released, upload, no_storage, django_assert_num_queries
):
    with django_assert_num_queries(0):
        with pytest.raises(ValidationFailed):
            invoices.submit_invoice(expert_session, released.pk, upload)
    released.refresh_from_db()
    assert released.status == B.RELEASED_FOR_INVOICE
    assert released.invoice_file == ""


def test_size_limit_is_inclusive():
    invoices.validate_upload(_pdf(content=b"0" * (10 * 1024 * 1024)))


def test_xml_accepted_with_charset():
    invoices.validate_upload(_pdf(name="nfe.xml", content=b"<nfe/>", content_type="text/xml; charset=utf-8"))


def test_build_invoice_path():
    path = invoices.build_invoice_path("exp", "ben", "NF 123 (março).PDF", "application/pdf", now_ms=1717000000000)
    assert path == "exp/ben_1717000000000.pdf"
    assert invoices.build_invoice_path("exp", "ben", "sem-extensao", "text/xml", now_ms=1).endswith("_1.xml")
    assert invoices.sanitize_filename("  a  b!!.PDF") == "a_b.pdf"


# ----------------------------
# Envio / substituição
# ----------------------------

def test_first_submission(expert_session, expert, released):
    b = invoices.submit_invoice(expert_session, released.pk, _pdf())
    assert b.status == B.AWAITING_REVIEW
    assert b.invoice_submitted is True
    assert b.invoice_submitted_at is not None
    assert b.invoice_amount == b.amount
    assert b.invoice_file.startswith(f"{expert.pk}/{released.pk}_")
    assert b.invoice_file.endswith(".pdf")
    assert storage.file_exists(b.invoice_file)
    b.indication.refresh_from_db()
    assert b.indication.status == IndicationStatus.INVOICE_SENT


def test_declared_amount(expert_session, released):
    b = invoices.submit_invoice(expert_session, released.pk, _pdf(), amount="1499,90")
    assert str(b.invoice_amount) == "1499.90"


def test_only_owner_submits(other_expert_session, released, no_storage):
    with pytest.raises(PermissionDenied):
        invoices.submit_invoice(other_expert_session, released.pk, _pdf())


def test_admin_cannot_submit(admin_session, released):
    with pytest.raises(PermissionDenied):
        invoices.submit_invoice(admin_session, released.pk, _pdf())


def test_not_released_yet(expert_session, benefit, no_storage):
    with pytest.raises(InvalidTransition):
        invoices.submit_invoice(expert_session, benefit.pk, _pdf())


def test_resubmission_after_rejection(admin_session, expert_session, expert, released):
    invoices.submit_invoice(expert_session, released.pk, _pdf())
    payments.reject_invoice(admin_session, released.pk, "Valor divergente")

    second = invoices.submit_invoice(expert_session, released.pk, _pdf(name="nf-corrigida.pdf"))
    assert second.status == B.AWAITING_REVIEW
    assert second.invoice_rejection_reason is None
    assert storage.file_exists(second.invoice_file)
    # o arquivo antigo foi removido antes do novo envio
    _, files = storage.get_storage().listdir(str(expert.pk))
    assert len(files) == 1


def test_replacement_proceeds_when_old_file_deletion_fails(expert_session, released, monkeypatch, caplog):
    first = invoices.submit_invoice(expert_session, released.pk, _pdf())

    def _broken_delete(path):
        raise OSError("bucket indisponível")
    monkeypatch.setattr(storage, "delete_file", _broken_delete)

    second = invoices.submit_invoice(expert_session, released.pk, _pdf(name="nova.pdf"))
    assert second.status == B.AWAITING_REVIEW
    assert second.invoice_file != first.invoice_file
    assert storage.file_exists(second.invoice_file)
    assert "Falha ao remover arquivo de NF" in caplog.text


def test_approved_invoice_file_is_kept(admin_session, expert_session, released):
    first = invoices.submit_invoice(expert_session, released.pk, _pdf())
    payments.approve_invoice(admin_session, released.pk)

    with pytest.raises(InvalidTransition):
        invoices.submit_invoice(expert_session, released.pk, _pdf(name="nova.pdf"))
    b = Benefit.objects.get(pk=released.pk)
    assert b.status == B.PROCESSING_PAYMENT
    assert b.invoice_file == first.invoice_file
    assert storage.file_exists(first.invoice_file)


def test_approval_during_submission_keeps_approved_file(admin_session, expert_session, expert, released, monkeypatch):
    # o admin aprova com o envio do expert já em andamento
    first = invoices.submit_invoice(expert_session, released.pk, _pdf())
    real_validate = invoices.validate_upload

    def _approve_then_validate(upload):
        payments.approve_invoice(admin_session, released.pk)
        real_validate(upload)
    monkeypatch.setattr(invoices, "validate_upload", _approve_then_validate)

    with pytest.raises(InvalidTransition):
        invoices.submit_invoice(expert_session, released.pk, _pdf(name="nova.pdf"))

    b = Benefit.objects.get(pk=released.pk)
    assert b.status == B.PROCESSING_PAYMENT
    assert b.invoice_file == first.invoice_file
    assert storage.file_exists(first.invoice_file)
    _, files = storage.get_storage().listdir(str(expert.pk))
    assert len(files) == 1


def test_storage_failure_leaves_record_untouched(expert_session, released, monkeypatch):
    def _broken_store(path, content):
        raise OSError("timeout")
    monkeypatch.setattr(storage, "store_file", _broken_store)

    with pytest.raises(DependencyFailure):
        invoices.submit_invoice(expert_session, released.pk, _pdf())
    released.refresh_from_db()
    assert released.status == B.RELEASED_FOR_INVOICE


def test_database_failure_removes_new_file(expert_session, released, monkeypatch):
    stored = []
    real_store = storage.store_file

    def _recording_store(path, content):
        stored.append(real_store(path, content))
        return stored[-1]

    def _broken_log(*args, **kwargs):
        raise DatabaseError("conexão perdida")

    monkeypatch.setattr(storage, "store_file", _recording_store)
    monkeypatch.setattr(invoices, "log_activity", _broken_log)

    with pytest.raises(DependencyFailure):
        invoices.submit_invoice(expert_session, released.pk, _pdf())

    assert len(stored) == 1
    assert not storage.file_exists(stored[0])
    b = Benefit.objects.get(pk=released.pk)
    assert b.status == B.RELEASED_FOR_INVOICE
    assert b.invoice_file == ""


# ----------------------------
# Download
# ----------------------------

def test_download_url_owner_and_admin(admin_session, expert_session, other_expert_session, released):
    assert invoices.invoice_download_url(expert_session, released.pk) is None

    invoices.submit_invoice(expert_session, released.pk, _pdf())
    assert invoices.invoice_download_url(expert_session, released.pk).startswith("/benefits/invoice/")
    assert invoices.invoice_download_url(admin_session, released.pk)
    with pytest.raises(PermissionDenied):
        invoices.invoice_download_url(other_expert_session, released.pk)


def test_missing_file_reported_as_no_invoice(expert_session, released):
    b = invoices.submit_invoice(expert_session, released.pk, _pdf())
    storage.get_storage().delete(b.invoice_file)
    assert invoices.invoice_download_url(expert_session, released.pk) is None
