"""Bid status state machine.

    pending ──► accepted ──► completed
       │            │
       ├──► rejected └──► cancelled
       └──► cancelled

`pending` is only ever set by bid placement. rejected / completed /
cancelled are terminal. Who may take each edge is decided separately by
`authorization.can_transition`.
"""

from src.mandi_common.enums import BidStatus
from src.mandi_common.errors import InvalidTransitionError

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    BidStatus.PENDING.value: frozenset(
        {BidStatus.ACCEPTED.value, BidStatus.REJECTED.value, BidStatus.CANCELLED.value}
    ),
    BidStatus.ACCEPTED.value: frozenset(
        {BidStatus.COMPLETED.value, BidStatus.CANCELLED.value}
    ),
    BidStatus.REJECTED.value: frozenset(),
    BidStatus.COMPLETED.value: frozenset(),
    BidStatus.CANCELLED.value: frozenset(),
}

TERMINAL_STATES: frozenset[str] = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def is_allowed(from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def check_transition(bid_id: str, from_status: str, to_status: str) -> None:
    """Raise InvalidTransitionError unless from_status -> to_status is an edge."""
    if not is_allowed(from_status, to_status):
        raise InvalidTransitionError(bid_id, from_status, to_status)
