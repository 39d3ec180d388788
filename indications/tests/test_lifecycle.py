import pytest

from core.exceptions import InvalidTransition, ValidationFailed
from indications.lifecycle import (
    ACTIVE_STAGES,
    TRANSITIONS,
    can_transition,
    check_stage_move,
    check_transition,
    parse_stage,
    parse_status,
)
from indications.models import CRMStage, IndicationStatus as S


def test_every_status_has_a_row():
    assert set(TRANSITIONS) == set(S)


@pytest.mark.parametrize("current, target", [
    (S.AWAITING_VALIDATION, S.IN_CONTACT),
    (S.AWAITING_VALIDATION, S.VALIDATION_REJECTED),
    (S.IN_CONTACT, S.CONTRACTED),
    (S.IN_CONTACT, S.LOST),
])
def test_allowed(current, target):
    assert can_transition(current, target)
    check_transition(current, target)


@pytest.mark.parametrize("current, target", [
    (S.AWAITING_VALIDATION, S.CONTRACTED),
    (S.VALIDATION_REJECTED, S.IN_CONTACT),
    (S.LOST, S.IN_CONTACT),
    (S.CONTRACTED, S.LOST),
    (S.UNDER_ANALYSIS, S.IN_CONTACT),
    (S.IN_CONTACT, S.PAID),
])
def test_refused(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidTransition):
        check_transition(current, target)


def test_unknown_values_are_validation_errors():
    with pytest.raises(ValidationFailed):
        parse_status("nf_enviada_2")
    with pytest.raises(ValidationFailed):
        parse_stage("fechado")
    assert parse_stage("negotiation") is CRMStage.NEGOTIATION


def test_stage_moves_only_between_active_stages():
    assert len(ACTIVE_STAGES) == 7
    check_stage_move(S.IN_CONTACT, CRMStage.NEGOTIATION)
    with pytest.raises(InvalidTransition):
        check_stage_move(S.IN_CONTACT, CRMStage.CONTRACT_SIGNED)
    with pytest.raises(InvalidTransition):
        check_stage_move(S.AWAITING_VALIDATION, CRMStage.NEGOTIATION)
