"""Booking status transition table."""

from typing import Union

from fixsewa.exceptions import InvalidInput
from fixsewa.models.booking import BookingStatus

# Re-assigning an assigned booking is allowed: the last assignment wins.
ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.ASSIGNED, BookingStatus.CANCELLED},
    BookingStatus.ASSIGNED: {BookingStatus.ASSIGNED, BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

TERMINAL_STATUSES = {BookingStatus.COMPLETED, BookingStatus.CANCELLED}


def parse_status(value: Union[str, BookingStatus]) -> BookingStatus:
    """Turn a caller-supplied string into a BookingStatus."""
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus((value or "").strip().lower())
    except ValueError:
        valid = ", ".join(s.value for s in BookingStatus)
        raise InvalidInput(f"Invalid status '{value}'. Valid values: {valid}")


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, set())


def check_transition(current: BookingStatus, target: BookingStatus) -> None:
    if not can_transition(current, target):
        raise InvalidInput(
            f"Cannot move booking from {current.value} to {target.value}"
        )


def sources_for(target: BookingStatus) -> set:
    """Statuses from which ``target`` may be reached."""
    return {s for s, targets in ALLOWED_TRANSITIONS.items() if target in targets}
