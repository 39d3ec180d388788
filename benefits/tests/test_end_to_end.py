from datetime import date
from decimal import Decimal

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from accounts.models import ActivityLog
from benefits.models import BenefitStatus as B
from benefits.services import invoices, payments
from indications import services
from indications.models import IndicationStatus

pytestmark = pytest.mark.django_db


def test_referral_to_paid_benefit(admin_session, expert_session):
    ind = services.submit_indication(expert_session, {
        "company_name": "Transportes Rápidos",
        "company_cnpj": "11222333000181",
        "contact_name": "João Prado",
        "employee_count": 40,
        "channel": "technical_report",
    })
    assert ind.status == IndicationStatus.AWAITING_VALIDATION

    ind = services.approve(admin_session, ind.pk)
    assert ind.status == IndicationStatus.IN_CONTACT

    benefit = services.mark_contracted(admin_session, ind.pk, "1000.00", "2024-06-15")
    assert benefit.status == B.AWAITING_CLIENT_PAYMENT
    assert benefit.amount == Decimal("1000.00")
    assert benefit.first_client_payment_date == date(2024, 7, 5)
    assert benefit.invoice_eligible_from == date(2024, 7, 6)
    assert benefit.expected_payment_date == date(2024, 7, 15)
    ind.refresh_from_db()
    assert ind.status == IndicationStatus.CONTRACTED

    payments.confirm_client_payment(admin_session, benefit.pk)
    upload = SimpleUploadedFile("nf.xml", b"<nfe/>", content_type="application/xml")
    assert invoices.submit_invoice(expert_session, benefit.pk, upload).status == B.AWAITING_REVIEW
    assert payments.approve_invoice(admin_session, benefit.pk).status == B.PROCESSING_PAYMENT
    assert payments.schedule_payment(admin_session, benefit.pk, "2024-07-15").status == B.SCHEDULED
    assert payments.mark_paid(admin_session, benefit.pk, "2024-07-15").status == B.PAID

    ind.refresh_from_db()
    assert ind.status == IndicationStatus.PAID
    assert list(
        ActivityLog.objects.order_by("id").values_list("action", flat=True)
    ) == [
        "create_indication",
        "update_indication_status_in_contact",
        "update_indication_status_contracted",
        "confirm_client_payment",
        "upload_invoice",
        "approve_invoice",
        "schedule_payment",
        "mark_as_paid",
    ]
