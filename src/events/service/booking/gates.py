"""Eligibility gate classes for the booking core.

Each gate performs one check. Gates are composed into ordered lists per action
and evaluated by the EligibilityValidator; the first gate that objects decides.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from django.utils.translation import gettext as _

from events.models import Rating, Reservation

from .enums import Messages, Reasons
from .types import EligibilityVerdict

if TYPE_CHECKING:
    from accounts.models import Member
    from events.models import Event

    from .eligibility import EligibilityValidator


class BaseEligibilityGate(abc.ABC):
    """Abstract Base Class for a composable eligibility check."""

    def __init__(self, handler: EligibilityValidator) -> None:
        self.handler = handler
        self.member: Member = handler.member
        self.event: Event = handler.event

    @abc.abstractmethod
    def check(self) -> EligibilityVerdict | None:
        """Perform the eligibility check.

        Returns:
            EligibilityVerdict if this gate blocks the action, None to continue to the next gate.
        """

    def deny(self, reason: Reasons, detail: str, **extra: object) -> EligibilityVerdict:
        return EligibilityVerdict(allowed=False, reason=reason, detail=detail, event_id=self.event.pk, **extra)  # type: ignore[arg-type]


class EventIsBookableGate(BaseEligibilityGate):
    """The event is active and has not started yet."""

    def check(self) -> EligibilityVerdict | None:
        if not self.event.is_active:
            return self.deny(Reasons.EVENT_NOT_BOOKABLE, _(Messages.EVENT_CANCELLED))
        if self.event.has_started(self.handler.now):
            return self.deny(Reasons.EVENT_NOT_BOOKABLE, _(Messages.EVENT_STARTED))
        return None


class CategoryMatchesEventGate(BaseEligibilityGate):
    def check(self) -> EligibilityVerdict | None:
        category = self.handler.category
        assert category is not None
        if category.event_id != self.event.pk:
            return self.deny(Reasons.CATEGORY_MISMATCH, _(Messages.CATEGORY_MISMATCH), category_id=category.pk)
        return None


class PerMemberLimitGate(BaseEligibilityGate):
    """The member holds fewer held reservations for this event than the limit."""

    def check(self) -> EligibilityVerdict | None:
        limit = self.event.get_max_reservations_per_member()
        held = Reservation.objects.held().filter(member=self.member, event=self.event).count()
        if held >= limit:
            return self.deny(Reasons.LIMIT_REACHED, _(Messages.LIMIT_REACHED), limit=limit)
        return None


class ReservationIsHeldGate(BaseEligibilityGate):
    """Only held reservations move anywhere; cancelled and checked-in are terminal."""

    reason = Reasons.NOT_HELD

    def check(self) -> EligibilityVerdict | None:
        reservation = self.handler.reservation
        assert reservation is not None
        if reservation.status != Reservation.Status.HELD:
            return self.deny(self.reason, _(Messages.NOT_HELD), reservation_id=reservation.pk)
        return None


class CancellableGate(ReservationIsHeldGate):
    """Held, and the event has not started."""

    reason = Reasons.NOT_CANCELLABLE

    def check(self) -> EligibilityVerdict | None:
        if verdict := super().check():
            return verdict
        if self.event.has_started(self.handler.now):
            return self.deny(self.reason, _(Messages.EVENT_STARTED), reservation_id=self.handler.reservation.pk)  # type: ignore[union-attr]
        return None


class CheckInWindowGate(BaseEligibilityGate):
    """The event is active and now lies within [start - lead time, end]."""

    def check(self) -> EligibilityVerdict | None:
        opens_at, closes_at = self.event.check_in_window()
        if not self.event.is_active:
            return self.deny(
                Reasons.OUTSIDE_CHECKIN_WINDOW, _(Messages.EVENT_CANCELLED), opens_at=opens_at, closes_at=closes_at
            )
        if not self.event.is_check_in_open(self.handler.now):
            return self.deny(
                Reasons.OUTSIDE_CHECKIN_WINDOW, _(Messages.CHECK_IN_CLOSED), opens_at=opens_at, closes_at=closes_at
            )
        return None


class EventHasFinishedGate(BaseEligibilityGate):
    def check(self) -> EligibilityVerdict | None:
        if not self.event.has_ended(self.handler.now):
            return self.deny(Reasons.NOT_RATABLE, _(Messages.EVENT_NOT_FINISHED))
        return None


class AttendedGate(BaseEligibilityGate):
    """The member was checked in at the event."""

    def check(self) -> EligibilityVerdict | None:
        attended = Reservation.objects.filter(
            member=self.member, event=self.event, status=Reservation.Status.CHECKED_IN
        ).exists()
        if not attended:
            return self.deny(Reasons.NOT_RATABLE, _(Messages.NOT_ATTENDED))
        return None


class NotYetRatedGate(BaseEligibilityGate):
    def check(self) -> EligibilityVerdict | None:
        if Rating.objects.filter(member=self.member, event=self.event).exists():
            return self.deny(Reasons.ALREADY_RATED, _(Messages.ALREADY_RATED))
        return None


BOOKING_GATES: list[type[BaseEligibilityGate]] = [
    EventIsBookableGate,
    CategoryMatchesEventGate,
    PerMemberLimitGate,
]

CANCELLATION_GATES: list[type[BaseEligibilityGate]] = [
    CancellableGate,
]

CHECK_IN_GATES: list[type[BaseEligibilityGate]] = [
    CheckInWindowGate,
    ReservationIsHeldGate,
]

RATING_GATES: list[type[BaseEligibilityGate]] = [
    EventHasFinishedGate,
    AttendedGate,
    NotYetRatedGate,
]
