"""Fact providers consumed by the booking core.

``MembershipDirectory`` answers role questions per (member, club); ``Catalog``
resolves events, categories, reservations and members by id. Both translate
database availability failures into ``DependencyFailureError`` so callers see
a typed dependency error rather than a driver exception.
"""

import typing as t
import uuid
from contextlib import contextmanager

import structlog
from django.db import OperationalError
from django.shortcuts import get_object_or_404

from accounts.models import Member
from events.exceptions import DependencyFailureError
from events.models import Category, Club, Event, Membership, Reservation

logger = structlog.get_logger(__name__)


@contextmanager
def bounded_dependency(name: str) -> t.Iterator[None]:
    """Re-raise database timeouts and connection failures as a dependency failure."""
    try:
        yield
    except OperationalError as e:
        logger.error("dependency_failure", dependency=name, error=str(e))
        raise DependencyFailureError(name) from e


class MembershipDirectory:
    """Per-club role lookups. There is no such thing as a global role."""

    def role_in_club(self, member_id: uuid.UUID, club_id: uuid.UUID) -> Membership.Role | None:
        """Return the member's role in the club, or None when they hold none.

        Inactive members and inactive clubs grant no role.
        """
        with bounded_dependency("membership_directory"):
            role = (
                Membership.objects.granting()
                .filter(member_id=member_id, club_id=club_id)
                .values_list("role", flat=True)
                .first()
            )
        return Membership.Role(role) if role else None

    def is_member_of_club(self, member_id: uuid.UUID, club_id: uuid.UUID) -> bool:
        return self.role_in_club(member_id, club_id) is not None


class Catalog:
    """Existence lookups. Unknown ids raise Http404."""

    def get_club(self, club_id: uuid.UUID) -> Club:
        with bounded_dependency("catalog"):
            return get_object_or_404(Club, pk=club_id)

    def get_event(self, event_id: uuid.UUID) -> Event:
        with bounded_dependency("catalog"):
            return get_object_or_404(Event.objects.select_related("club"), pk=event_id)

    def get_category(self, category_id: uuid.UUID) -> Category:
        with bounded_dependency("catalog"):
            return get_object_or_404(Category.objects.select_related("event", "event__club"), pk=category_id)

    def get_reservation(self, reservation_id: uuid.UUID) -> Reservation:
        with bounded_dependency("catalog"):
            return get_object_or_404(
                Reservation.objects.select_related("event", "event__club", "category", "member"), pk=reservation_id
            )

    def get_reservation_by_token(self, token: uuid.UUID) -> Reservation:
        with bounded_dependency("catalog"):
            return get_object_or_404(
                Reservation.objects.select_related("event", "event__club", "category", "member"), token=token
            )

    def get_membership(self, club_id: uuid.UUID, membership_id: uuid.UUID) -> Membership:
        with bounded_dependency("catalog"):
            return get_object_or_404(
                Membership.objects.select_related("club", "member"), pk=membership_id, club_id=club_id
            )

    def get_member(self, member_id: uuid.UUID) -> Member:
        with bounded_dependency("catalog"):
            return get_object_or_404(Member, pk=member_id)
