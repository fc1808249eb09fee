"""EligibilityValidator for checking whether a member may perform a booking action."""

import datetime

from django.utils import timezone

from accounts.models import Member
from events.models import Category, Event, Reservation

from .gates import (
    BOOKING_GATES,
    CANCELLATION_GATES,
    CHECK_IN_GATES,
    RATING_GATES,
    BaseEligibilityGate,
)
from .types import BookingConflictError, EligibilityVerdict


class EligibilityValidator:
    """Runs ordered gate lists against one (member, event) pair.

    ``now`` is captured once so every gate of a single check sees the same instant.
    """

    def __init__(
        self,
        member: Member,
        event: Event,
        *,
        category: Category | None = None,
        reservation: Reservation | None = None,
        now: datetime.datetime | None = None,
    ) -> None:
        self.member = member
        self.event = event
        self.category = category
        self.reservation = reservation
        self.now = now or timezone.now()

    def check_booking(self) -> EligibilityVerdict:
        return self._run(BOOKING_GATES)

    def check_cancellation(self) -> EligibilityVerdict:
        return self._run(CANCELLATION_GATES)

    def check_check_in(self) -> EligibilityVerdict:
        return self._run(CHECK_IN_GATES)

    def check_rating(self) -> EligibilityVerdict:
        return self._run(RATING_GATES)

    def _run(self, gates: list[type[BaseEligibilityGate]]) -> EligibilityVerdict:
        for gate in gates:
            if verdict := gate(self).check():
                return verdict
        return EligibilityVerdict(
            allowed=True,
            event_id=self.event.pk,
            category_id=self.category.pk if self.category else None,
            reservation_id=self.reservation.pk if self.reservation else None,
        )


def ensure_allowed(verdict: EligibilityVerdict, message: str) -> None:
    """Raise BookingConflictError when the verdict denies the action."""
    if not verdict.allowed:
        raise BookingConflictError(message, verdict)
