# conftest.py
import pytest
from django.utils import timezone

from accounts.models import Expert, User
from accounts.sessions import open_admin_session, open_expert_session
from indications.models import CRMStage, Indication, IndicationStatus

IN_MEMORY = {"BACKEND": "django.core.files.storage.InMemoryStorage"}


@pytest.fixture(autouse=True)
def _test_settings(settings):
    settings.STORAGES = {
        "default": IN_MEMORY,
        "invoices": IN_MEMORY,
        "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
    }
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]


# ----------------------------
# Atores
# ----------------------------

@pytest.fixture
def backoffice_user(db):
    return User.objects.create_user("Ana.Admin", "ana@corpvox.com.br", "s3nha-forte", first_name="Ana")


@pytest.fixture
def admin_session(backoffice_user):
    return open_admin_session(backoffice_user, ip_address="10.0.0.1")


def _mk_expert(email, **extra):
    defaults = {
        "name": "Paula Expert",
        "status": Expert.Status.APPROVED,
        "course_completed": True,
        "course_completed_at": timezone.now(),
        "can_issue_invoice": True,
    }
    defaults.update(extra)
    return Expert.objects.create(email=email, **defaults)


@pytest.fixture
def expert(db):
    return _mk_expert("paula@sst.com.br")


@pytest.fixture
def other_expert(db):
    return _mk_expert("rui@sst.com.br", name="Rui Expert")


@pytest.fixture
def expert_session(expert):
    return open_expert_session(expert)


@pytest.fixture
def other_expert_session(other_expert):
    return open_expert_session(other_expert)


@pytest.fixture
def bearer():
    def _headers(session) -> dict:
        return {"Authorization": f"Bearer {session.token}"}
    return _headers


# ----------------------------
# Indicações
# ----------------------------

@pytest.fixture
def make_indication(expert):
    def _make(status=IndicationStatus.AWAITING_VALIDATION, crm_stage=None, owner=None, **extra):
        fields = {
            "company_name": "Metalúrgica Boa Vista",
            "company_cnpj": "11222333000181",
            "contact_name": "Carlos Souza",
            "contact_email": "carlos@boavista.com.br",
            "employee_count": 120,
        }
        fields.update(extra)
        return Indication.objects.create(
            expert=owner or expert, status=status, crm_stage=crm_stage, **fields
        )
    return _make


@pytest.fixture
def in_contact_indication(make_indication):
    return make_indication(status=IndicationStatus.IN_CONTACT, crm_stage=CRMStage.INITIAL_CONTACT)


@pytest.fixture
def benefit(admin_session, in_contact_indication):
    from indications.services import mark_contracted

    return mark_contracted(admin_session, in_contact_indication.pk, "1500.00", "2024-03-20")
