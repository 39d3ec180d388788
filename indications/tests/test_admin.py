import pytest
from django.urls import reverse

from accounts.models import ActivityLog
from indications.models import IndicationStatus

pytestmark = pytest.mark.django_db


def test_bulk_approve_action(admin_client, admin_user, make_indication):
    pending = make_indication()
    lost = make_indication(status=IndicationStatus.LOST)

    resp = admin_client.post(
        reverse("admin:indications_indication_changelist"),
        {"action": "approve_indications", "_selected_action": [str(pending.pk), str(lost.pk)]},
    )
    assert resp.status_code == 302

    pending.refresh_from_db()
    lost.refresh_from_db()
    assert pending.status == IndicationStatus.IN_CONTACT
    assert pending.validated_by == admin_user
    assert lost.status == IndicationStatus.LOST
    assert ActivityLog.objects.get().actor_id == str(admin_user.pk)
