"""ReservationLifecycleManager: create, cancel and check in reservations."""

import uuid

import structlog
from django.db import transaction

from accounts.models import Member
from events.exceptions import AccessDeniedError
from events.models import Membership, Reservation
from events.models.reservation import ReservationQuerySet

from .authorization import AuthorizationEngine
from .capacity import CapacityAllocator
from .directory import Catalog, bounded_dependency
from .eligibility import EligibilityValidator, ensure_allowed
from .enums import Capability

logger = structlog.get_logger(__name__)


class ReservationLifecycleManager:
    """Orchestrates every reservation operation for one caller.

    Each operation runs the same fixed sequence: resolve the resource (not-found),
    authorize (access-denied), check eligibility (conflict), allocate capacity
    (create only), and only then mutate. Mutations run inside a transaction so a
    failure at any step leaves no partial write behind.
    """

    def __init__(
        self,
        caller: Member,
        *,
        authorization: AuthorizationEngine | None = None,
        catalog: Catalog | None = None,
    ) -> None:
        self.caller = caller
        self.authorization = authorization or AuthorizationEngine()
        self.catalog = catalog or Catalog()

    @transaction.atomic
    def create(self, event_id: uuid.UUID, category_id: uuid.UUID) -> Reservation:
        """Reserve one seat in the category for the caller.

        Raises:
            Http404: unknown category or event.
            AccessDeniedError: the caller is not a member of the category's club.
            BookingConflictError: event-not-bookable, category-mismatch, limit-reached or capacity-exhausted.
        """
        category = self.catalog.get_category(category_id)
        event = self.catalog.get_event(event_id)

        self.authorization.require(self.caller, Capability.IS_MEMBER_OF_CLUB, category.event)

        # Serializes concurrent creates by the same member so the per-member limit
        # cannot be passed twice on a stale count. Always taken before the category lock.
        with bounded_dependency("reservation_manager"):
            Membership.objects.select_for_update().filter(club_id=category.event.club_id, member=self.caller).first()

        verdict = EligibilityValidator(self.caller, event, category=category).check_booking()
        ensure_allowed(verdict, "The reservation cannot be created.")

        reservation = CapacityAllocator(category).try_reserve(self.caller)

        logger.info(
            "reservation_created",
            reservation_id=str(reservation.pk),
            event_id=str(event.pk),
            category_id=str(category.pk),
            member_id=str(self.caller.pk),
        )
        return reservation

    @transaction.atomic
    def cancel(self, reservation_id: uuid.UUID) -> Reservation:
        """Release a held seat. Allowed for the reservation's owner or a club manager, before the event starts.

        Raises:
            Http404, AccessDeniedError, BookingConflictError (not-cancellable).
        """
        reservation = self.catalog.get_reservation(reservation_id)
        self.authorization.require(self.caller, Capability.IS_RESERVATION_OWNER_OR_MANAGER, reservation)

        reservation = self._lock(reservation)
        verdict = EligibilityValidator(self.caller, reservation.event, reservation=reservation).check_cancellation()
        ensure_allowed(verdict, "The reservation cannot be cancelled.")

        reservation.transition_to(Reservation.Status.CANCELLED, by=self.caller)
        reservation.save(update_fields=["status", "cancelled_at", "cancelled_by", "updated_at"])

        logger.info(
            "reservation_cancelled",
            reservation_id=str(reservation.pk),
            event_id=str(reservation.event_id),
            cancelled_by=str(self.caller.pk),
            by_owner=reservation.member_id == self.caller.pk,
        )
        return reservation

    @transaction.atomic
    def check_in(self, token: uuid.UUID) -> Reservation:
        """Record attendance for the reservation carrying ``token``. Managers only.

        Raises:
            Http404, AccessDeniedError, BookingConflictError (outside-checkin-window, not-held).
        """
        reservation = self.catalog.get_reservation_by_token(token)
        self.authorization.require(self.caller, Capability.IS_MANAGER_OF_CLUB, reservation)

        reservation = self._lock(reservation)
        verdict = EligibilityValidator(self.caller, reservation.event, reservation=reservation).check_check_in()
        ensure_allowed(verdict, "The reservation cannot be checked in.")

        reservation.transition_to(Reservation.Status.CHECKED_IN, by=self.caller)
        reservation.save(update_fields=["status", "checked_in_at", "checked_in_by", "updated_at"])

        logger.info(
            "reservation_checked_in",
            reservation_id=str(reservation.pk),
            event_id=str(reservation.event_id),
            member_id=str(reservation.member_id),
            checked_in_by=str(self.caller.pk),
        )
        return reservation

    def get_by_id(self, reservation_id: uuid.UUID) -> Reservation:
        reservation = self.catalog.get_reservation(reservation_id)
        self.authorization.require(self.caller, Capability.IS_RESERVATION_OWNER_OR_MANAGER, reservation)
        return reservation

    def list_by_member(
        self,
        member_id: uuid.UUID,
        *,
        status: Reservation.Status | None = None,
        include_past: bool = False,
    ) -> ReservationQuerySet:
        """A member's own reservations, newest first.

        Reservations span clubs, so no club role grants access to another member's list.
        Events that have ended are left out unless ``include_past`` is set.
        """
        member = self.catalog.get_member(member_id)
        if member.pk != self.caller.pk:
            logger.info(
                "authorization_denied",
                capability="is-self",
                caller_id=str(self.caller.pk),
                reason="listing another member's reservations",
            )
            raise AccessDeniedError()
        qs = Reservation.objects.with_related().filter(member=member)
        if not include_past:
            qs = qs.upcoming()
        return self._with_status(qs, status)

    def list_by_event(self, event_id: uuid.UUID, *, status: Reservation.Status | None = None) -> ReservationQuerySet:
        event = self.catalog.get_event(event_id)
        self.authorization.require(self.caller, Capability.IS_MANAGER_OF_CLUB, event)
        return self._with_status(Reservation.objects.with_related().filter(event=event), status)

    def list_by_category(
        self, category_id: uuid.UUID, *, status: Reservation.Status | None = None
    ) -> ReservationQuerySet:
        category = self.catalog.get_category(category_id)
        self.authorization.require(self.caller, Capability.IS_MANAGER_OF_CLUB, category)
        return self._with_status(Reservation.objects.with_related().filter(category=category), status)

    def _lock(self, reservation: Reservation) -> Reservation:
        """Re-read the reservation row under lock; the status may have moved since it was resolved."""
        with bounded_dependency("reservation_manager"):
            locked = Reservation.objects.select_for_update().get(pk=reservation.pk)
        locked.event = reservation.event
        locked.category = reservation.category
        locked.member = reservation.member
        return locked

    @staticmethod
    def _with_status(qs: ReservationQuerySet, status: Reservation.Status | None) -> ReservationQuerySet:
        if status is not None:
            qs = qs.filter(status=status)
        return qs
