from datetime import date
from decimal import Decimal

import pytest
from django.core.exceptions import PermissionDenied

from accounts.models import ActivityLog
from benefits.models import Benefit, BenefitStatus
from core.exceptions import ConflictError, InvalidTransition, NotFound, ValidationFailed
from indications import services
from indications.models import CRMStage, IndicationStatus

pytestmark = pytest.mark.django_db


# ----------------------------
# Validação
# ----------------------------

def test_approve_moves_to_in_contact(admin_session, make_indication, backoffice_user):
    ind = services.approve(admin_session, make_indication().pk)
    ind.refresh_from_db()
    assert ind.status == IndicationStatus.IN_CONTACT
    assert ind.validated_by == backoffice_user
    assert ind.validated_at is not None
    assert ActivityLog.objects.filter(
        action="update_indication_status_in_contact", entity_id=str(ind.pk)
    ).exists()


@pytest.mark.parametrize("reason", ["", "   ", "\n\t", None])
def test_reject_requires_reason(admin_session, make_indication, reason):
    ind = make_indication()
    with pytest.raises(ValidationFailed):
        services.reject(admin_session, ind.pk, reason)
    ind.refresh_from_db()
    assert ind.status == IndicationStatus.AWAITING_VALIDATION
    assert not ActivityLog.objects.exists()


def test_reject_stores_reason(admin_session, make_indication):
    ind = services.reject(admin_session, make_indication().pk, "  Empresa já atendida  ")
    ind.refresh_from_db()
    assert ind.status == IndicationStatus.VALIDATION_REJECTED
    assert ind.rejection_reason == "Empresa já atendida"


def test_approve_twice_is_invalid(admin_session, make_indication):
    ind = make_indication()
    services.approve(admin_session, ind.pk)
    with pytest.raises(InvalidTransition):
        services.approve(admin_session, ind.pk)


def test_expert_cannot_validate(expert_session, make_indication):
    with pytest.raises(PermissionDenied):
        services.approve(expert_session, make_indication().pk)


def test_unknown_indication(admin_session):
    with pytest.raises(NotFound):
        services.approve(admin_session, "not-a-uuid")


# ----------------------------
# Contrato -> benefício
# ----------------------------

def test_mark_contracted_creates_benefit(admin_session, in_contact_indication):
    benefit = services.mark_contracted(admin_session, in_contact_indication.pk, "1000,00", "2024-03-20")
    in_contact_indication.refresh_from_db()
    assert in_contact_indication.status == IndicationStatus.CONTRACTED
    assert in_contact_indication.crm_stage == CRMStage.CONTRACT_SIGNED
    assert benefit.status == BenefitStatus.AWAITING_CLIENT_PAYMENT
    assert benefit.amount == Decimal("1000.00")
    assert benefit.expert_id == in_contact_indication.expert_id
    assert benefit.first_client_payment_date == date(2024, 4, 5)
    assert benefit.invoice_eligible_from == date(2024, 4, 6)
    assert benefit.expected_payment_date == date(2024, 4, 15)

    entry = ActivityLog.objects.get(action="update_indication_status_contracted")
    assert entry.details["benefit_data"]["amount"] == "1000.00"
    assert entry.details["old_crm_status"] == CRMStage.INITIAL_CONTACT


@pytest.mark.parametrize("amount, contract_date", [
    (None, "2024-03-20"),
    ("0", "2024-03-20"),
    ("-5", "2024-03-20"),
    ("1e30", "2024-03-20"),
    ("12345678901", "2024-03-20"),
    ("1000", None),
    ("1000", "20/03/2024"),
])
def test_mark_contracted_validates_inputs_first(admin_session, in_contact_indication, amount, contract_date):
    with pytest.raises(ValidationFailed):
        services.mark_contracted(admin_session, in_contact_indication.pk, amount, contract_date)
    in_contact_indication.refresh_from_db()
    assert in_contact_indication.status == IndicationStatus.IN_CONTACT
    assert not Benefit.objects.exists()


def test_second_benefit_is_a_conflict(admin_session, benefit):
    ind = benefit.indication
    ind.refresh_from_db()
    before = (ind.status, ind.crm_stage)

    with pytest.raises(ConflictError):
        services.mark_contracted(admin_session, ind.pk, "900", "2024-05-01")

    ind.refresh_from_db()
    assert (ind.status, ind.crm_stage) == before
    assert Benefit.objects.filter(indication=ind).count() == 1


def test_conflict_even_if_status_was_edited_back(admin_session, benefit):
    # registro antigo inconsistente : a unicidade do benefício prevalece
    ind = benefit.indication
    type(ind).objects.filter(pk=ind.pk).update(status=IndicationStatus.IN_CONTACT)
    with pytest.raises(ConflictError):
        services.mark_contracted(admin_session, ind.pk, "900", "2024-05-01")
    ind.refresh_from_db()
    assert ind.status == IndicationStatus.IN_CONTACT


def test_concurrent_contract_hits_unique_benefit(admin_session, benefit, monkeypatch):
    # outra transação criou o benefício depois da checagem : o insert falha
    ind = benefit.indication
    type(ind).objects.filter(pk=ind.pk).update(
        status=IndicationStatus.IN_CONTACT, crm_stage=CRMStage.NEGOTIATION,
    )
    monkeypatch.setattr(services, "_has_benefit", lambda indication_id: False)

    with pytest.raises(ConflictError):
        services.mark_contracted(admin_session, ind.pk, "900", "2024-05-01")

    ind.refresh_from_db()
    assert ind.status == IndicationStatus.IN_CONTACT
    assert ind.crm_stage == CRMStage.NEGOTIATION
    assert Benefit.objects.filter(indication=ind).count() == 1
    assert Benefit.objects.get(indication=ind).amount == Decimal("1500.00")


def test_cannot_contract_before_validation(admin_session, make_indication):
    with pytest.raises(InvalidTransition):
        services.mark_contracted(admin_session, make_indication().pk, "1000", "2024-03-20")
    assert not Benefit.objects.exists()


# ----------------------------
# Perdido / CRM
# ----------------------------

def test_mark_lost(admin_session, in_contact_indication):
    ind = services.mark_lost(admin_session, in_contact_indication.pk)
    assert ind.status == IndicationStatus.LOST
    assert ind.crm_stage == CRMStage.LOST
    assert ActivityLog.objects.filter(action="mark_as_lost").exists()


def test_lost_only_from_active(admin_session, make_indication):
    with pytest.raises(InvalidTransition):
        services.mark_lost(admin_session, make_indication().pk)


def test_free_moves_between_active_stages(admin_session, in_contact_indication):
    ind = services.move_crm_stage(admin_session, in_contact_indication.pk, "negotiation")
    assert ind.crm_stage == CRMStage.NEGOTIATION
    ind = services.move_crm_stage(admin_session, ind.pk, CRMStage.PRESENTATION_DONE)
    assert ind.crm_stage == CRMStage.PRESENTATION_DONE
    assert ind.status == IndicationStatus.IN_CONTACT
    assert ActivityLog.objects.filter(action="update_crm_status").count() == 2


def test_same_stage_is_a_noop(admin_session, in_contact_indication):
    services.move_crm_stage(admin_session, in_contact_indication.pk, CRMStage.INITIAL_CONTACT)
    assert not ActivityLog.objects.exists()


def test_contract_signed_stage_goes_through_contract_transition(admin_session, in_contact_indication):
    with pytest.raises(ValidationFailed):
        services.move_crm_stage(admin_session, in_contact_indication.pk, CRMStage.CONTRACT_SIGNED)

    ind = services.move_crm_stage(
        admin_session, in_contact_indication.pk, CRMStage.CONTRACT_SIGNED,
        amount="750", contract_date="2024-12-10",
    )
    assert ind.status == IndicationStatus.CONTRACTED
    assert ind.benefit.expected_payment_date == date(2025, 1, 15)


def test_lost_stage_goes_through_lost_transition(admin_session, in_contact_indication):
    ind = services.move_crm_stage(admin_session, in_contact_indication.pk, "lost")
    assert ind.status == IndicationStatus.LOST


def test_stage_move_refused_outside_pipeline(admin_session, make_indication):
    with pytest.raises(InvalidTransition):
        services.move_crm_stage(admin_session, make_indication().pk, CRMStage.NEGOTIATION)


def test_unknown_stage(admin_session, in_contact_indication):
    with pytest.raises(ValidationFailed):
        services.move_crm_stage(admin_session, in_contact_indication.pk, "fechado")


# ----------------------------
# Edição direta de status
# ----------------------------

def test_change_status_dispatches(admin_session, make_indication):
    ind = make_indication()
    assert services.change_status(admin_session, ind.pk, "in_contact").status == IndicationStatus.IN_CONTACT
    ind = services.change_status(admin_session, ind.pk, "contracted", amount="300", contract_date="2024-01-31")
    assert ind.status == IndicationStatus.CONTRACTED
    assert ind.benefit.first_client_payment_date == date(2024, 2, 5)


@pytest.mark.parametrize("status", ["paid", "invoice_sent", "under_analysis", "awaiting_validation"])
def test_change_status_refuses_reserved_or_informational(admin_session, make_indication, status):
    ind = make_indication()
    with pytest.raises(InvalidTransition):
        services.change_status(admin_session, ind.pk, status)
    ind.refresh_from_db()
    assert ind.status == IndicationStatus.AWAITING_VALIDATION
