"""
Tests for the vendor import decision lifecycle.
"""

import pytest

from kct_admin.exceptions import InvalidDecisionTransition
from kct_admin.models.vendor import ImportDecision, check_transition, coerce_decision


def test_null_and_blank_mean_no_decision():
    assert coerce_decision(None) == ImportDecision.NONE
    assert coerce_decision("") == ImportDecision.NONE
    assert coerce_decision("staged") == ImportDecision.STAGED


@pytest.mark.parametrize(
    "current, target",
    [(None, "staged"), (None, "skipped"), ("staged", "skipped"), ("skipped", "staged")],
)
def test_admin_can_stage_and_skip(current, target):
    assert check_transition(current, target) is True


def test_same_decision_is_a_no_op():
    assert check_transition("staged", "staged") is False
    assert check_transition("imported", "imported", via_import=True) is False


def test_only_the_import_flow_marks_imported():
    assert check_transition("staged", "imported", via_import=True) is True
    with pytest.raises(InvalidDecisionTransition):
        check_transition("staged", "imported")


@pytest.mark.parametrize("target", ["staged", "skipped", "none"])
def test_imported_is_terminal(target):
    with pytest.raises(InvalidDecisionTransition) as exc_info:
        check_transition("imported", target, item_id=42)
    assert exc_info.value.current == "imported"
    assert exc_info.value.details["id"] == 42


def test_decision_cannot_be_reset_to_none():
    with pytest.raises(InvalidDecisionTransition):
        check_transition("staged", "none")
