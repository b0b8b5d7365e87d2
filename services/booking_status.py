from typing import Dict, Optional, Tuple
from schemas.booking import (
    STATUS_PENDING, STATUS_CONFIRMED, STATUS_COMPLETED, STATUS_CANCELLED,
    normalize_status
)

ACTION_ACCEPT = "accept"
ACTION_REJECT = "reject"
ACTION_CANCEL = "cancel"
ACTION_COMPLETE = "complete"

ALLOWED_TRANSITIONS = {
    STATUS_PENDING: {STATUS_CONFIRMED, STATUS_CANCELLED},
    STATUS_CONFIRMED: {STATUS_COMPLETED},
    STATUS_COMPLETED: set(),
    STATUS_CANCELLED: set(),
}

# action -> (required current status, resulting status)
ACTIONS: Dict[str, Tuple[str, str]] = {
    ACTION_ACCEPT: (STATUS_PENDING, STATUS_CONFIRMED),
    ACTION_REJECT: (STATUS_PENDING, STATUS_CANCELLED),
    ACTION_CANCEL: (STATUS_PENDING, STATUS_CANCELLED),
    ACTION_COMPLETE: (STATUS_CONFIRMED, STATUS_COMPLETED),
}

PROVIDER_ACTIONS = {ACTION_ACCEPT, ACTION_REJECT, ACTION_CANCEL, ACTION_COMPLETE}
USER_ACTIONS = {ACTION_CANCEL}

# field stamped when the booking enters a status
STATUS_TIMESTAMPS = {
    STATUS_CONFIRMED: "confirmed_at",
    STATUS_COMPLETED: "completed_at",
    STATUS_CANCELLED: "cancelled_at",
}


class InvalidTransitionError(ValueError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change booking status from '{current}' to '{target}'")


def can_transition(current: Optional[str], target: Optional[str]) -> bool:
    return normalize_status(target) in ALLOWED_TRANSITIONS.get(normalize_status(current), set())


def next_status(current: Optional[str], target: str) -> str:
    current = normalize_status(current)
    target = normalize_status(target)
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
    return target


def apply_action(current: Optional[str], action: str) -> str:
    if action not in ACTIONS:
        raise ValueError(f"Unknown booking action: {action}")
    required, target = ACTIONS[action]
    current = normalize_status(current)
    if current != required:
        raise InvalidTransitionError(current, target)
    return target
