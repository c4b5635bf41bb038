import pytest

from app.hrhub.core.error_catalog import AppError
from app.hrhub.services.workflow import (
    PAYROLL_TRANSITIONS,
    PERFORMANCE_SEQUENCE,
    can_transition,
    ensure_transition,
    next_in_sequence,
)


@pytest.mark.parametrize(
    ("current", "target", "allowed"),
    [
        ("DRAFT", "CALCULATING", True),
        ("CALCULATING", "DRAFT", True),
        ("REVIEW", "APPROVED", True),
        ("APPROVED", "PAID", True),
        ("DRAFT", "APPROVED", False),
        ("PAID", "CANCELLED", False),
        ("CANCELLED", "DRAFT", False),
    ],
)
def test_payroll_transitions(current, target, allowed):
    assert can_transition(PAYROLL_TRANSITIONS, current, target) is allowed


def test_rejected_transition_reports_both_states():
    with pytest.raises(AppError) as exc_info:
        ensure_transition(PAYROLL_TRANSITIONS, "PAID", "CANCELLED", subject="Payroll run")
    assert exc_info.value.details == {"current_status": "PAID", "target_status": "CANCELLED"}


def test_performance_sequence_stops_at_closed():
    assert next_in_sequence(PERFORMANCE_SEQUENCE, "CALIBRATION", subject="Cycle") == "CLOSED"
    with pytest.raises(AppError):
        next_in_sequence(PERFORMANCE_SEQUENCE, "CLOSED", subject="Cycle")
