"""Seat accounting for event categories."""

import structlog
from django.db import transaction
from django.utils.translation import gettext as _

from accounts.models import Member
from events.models import Category, Reservation

from .directory import bounded_dependency
from .enums import Messages, Reasons
from .types import BookingConflictError, EligibilityVerdict

logger = structlog.get_logger(__name__)


class CapacityAllocator:
    """Guards ``seats held <= capacity`` for one category.

    Held and checked-in reservations both occupy a seat; cancelled ones free it.
    """

    def __init__(self, category: Category) -> None:
        self.category = category

    def seats_held(self) -> int:
        with bounded_dependency("capacity_allocator"):
            return Reservation.objects.filter(category_id=self.category.pk).seat_holding().count()

    def seats_free(self) -> int:
        return max(self.category.capacity - self.seats_held(), 0)

    def try_reserve(self, member: Member) -> Reservation:
        """Atomically claim one seat for the member.

        The category row is locked for the rest of the surrounding transaction, so
        concurrent allocations on the same category run one after the other. After
        the insert the seats are counted once more; an overshoot raises and the
        transaction rolls back, leaving nothing behind.

        Raises:
            BookingConflictError: with reason capacity-exhausted.
        """
        with transaction.atomic(), bounded_dependency("capacity_allocator"):
            category = Category.objects.select_for_update().get(pk=self.category.pk)
            self.category = category

            if self.seats_held() >= category.capacity:
                raise self._exhausted()

            reservation = Reservation(member=member, event_id=category.event_id, category=category)
            reservation.save()

            held_after_insert = self.seats_held()
            if held_after_insert > category.capacity:
                logger.warning(
                    "reservation_capacity_recheck_failed",
                    category_id=str(category.pk),
                    capacity=category.capacity,
                    seats_held=held_after_insert,
                )
                raise self._exhausted()

        return reservation

    def _exhausted(self) -> BookingConflictError:
        return BookingConflictError(
            "The category is full.",
            EligibilityVerdict(
                allowed=False,
                reason=Reasons.CAPACITY_EXHAUSTED,
                detail=_(Messages.CAPACITY_EXHAUSTED),
                event_id=self.category.event_id,
                category_id=self.category.pk,
            ),
        )
