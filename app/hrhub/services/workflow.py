from app.hrhub.core.error_catalog import bad_request

PAYROLL_TRANSITIONS: dict[str, frozenset[str]] = {
    "DRAFT": frozenset({"CALCULATING", "CANCELLED"}),
    # CALCULATING -> DRAFT is the rollback taken when a calculation fails.
    "CALCULATING": frozenset({"REVIEW", "DRAFT", "CANCELLED"}),
    "REVIEW": frozenset({"APPROVED", "CANCELLED"}),
    "APPROVED": frozenset({"PAID", "CANCELLED"}),
    "PAID": frozenset(),
    "CANCELLED": frozenset(),
}

PERFORMANCE_SEQUENCE: tuple[str, ...] = ("DRAFT", "ACTIVE", "EVAL_OPEN", "CALIBRATION", "CLOSED")

TASK_TRANSITIONS: dict[str, frozenset[str]] = {
    "PENDING": frozenset({"DONE", "SKIPPED"}),
    "DONE": frozenset(),
    "SKIPPED": frozenset(),
}


def can_transition(table: dict[str, frozenset[str]], current: str, target: str) -> bool:
    return target in table.get(current, frozenset())


def ensure_transition(table: dict[str, frozenset[str]], current: str, target: str, *, subject: str) -> None:
    if not can_transition(table, current, target):
        raise bad_request(
            f"{subject} cannot move from {current} to {target}",
            details={"current_status": current, "target_status": target},
        )


def next_in_sequence(sequence: tuple[str, ...], current: str, *, subject: str) -> str:
    try:
        index = sequence.index(current)
    except ValueError as exc:
        raise bad_request(f"{subject} has unknown status {current}") from exc
    if index + 1 >= len(sequence):
        raise bad_request(
            f"{subject} is already {current}",
            details={"current_status": current},
        )
    return sequence[index + 1]
