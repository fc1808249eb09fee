from uuid import UUID

import structlog
from django.db import transaction
from django.db.models import Count, Q, QuerySet
from django.utils import timezone
from django.utils.translation import gettext as _

from accounts.models import Member
from events import schema
from events.models import Category, Club, Event, Reservation
from events.service.booking import (
    AuthorizationEngine,
    BookingConflictError,
    Capability,
    Catalog,
    EligibilityVerdict,
    Reasons,
)
from events.service.booking.enums import Messages

logger = structlog.get_logger(__name__)


def create_event(caller: Member, club: Club, payload: schema.EventCreateSchema) -> Event:
    AuthorizationEngine().require(caller, Capability.IS_MANAGER_OF_CLUB, club)
    event = Event.objects.create(club=club, **payload.model_dump())
    logger.info("event_created", event_id=str(event.pk), club_id=str(club.pk), created_by=str(caller.pk))
    return event


@transaction.atomic
def cancel_event(caller: Member, event: Event) -> Event:
    """Deactivate an event.

    Reservations keep their status; booking and check-in are refused from now on.
    """
    AuthorizationEngine().require(caller, Capability.IS_MANAGER_OF_CLUB, event)
    event = Event.objects.select_for_update().get(pk=event.pk)
    if event.is_active:
        event.is_active = False
        event.cancelled_at = timezone.now()
        event.save(update_fields=["is_active", "cancelled_at", "updated_at"])
        logger.info("event_cancelled", event_id=str(event.pk), cancelled_by=str(caller.pk))
    return event


def _ensure_editable(event: Event) -> None:
    if not event.is_active:
        detail = _(Messages.EVENT_CANCELLED)
    elif event.has_ended():
        detail = _(Messages.EVENT_FINISHED)
    else:
        return
    raise BookingConflictError(
        detail, EligibilityVerdict(allowed=False, reason=Reasons.EVENT_NOT_EDITABLE, detail=detail, event_id=event.pk)
    )


def create_category(caller: Member, event: Event, payload: schema.CategoryCreateSchema) -> Category:
    AuthorizationEngine().require(caller, Capability.IS_MANAGER_OF_CLUB, event)
    _ensure_editable(event)
    category = Category.objects.create(event=event, name=payload.name, capacity=payload.capacity)
    logger.info("category_created", category_id=str(category.pk), event_id=str(event.pk), capacity=category.capacity)
    return category


@transaction.atomic
def update_category(caller: Member, category: Category, payload: schema.CategoryUpdateSchema) -> Category:
    """Rename or resize a category.

    The row is locked like an allocation would lock it, so the seat count compared
    against the new capacity cannot change underneath.
    """
    AuthorizationEngine().require(caller, Capability.IS_MANAGER_OF_CLUB, category)
    _ensure_editable(category.event)
    event = category.event
    category = Category.objects.select_for_update().get(pk=category.pk)
    category.event = event

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "capacity" in data:
        seats_held = Reservation.objects.filter(category=category).seat_holding().count()
        if data["capacity"] < seats_held:
            detail = _(Messages.CAPACITY_BELOW_HELD)
            raise BookingConflictError(
                detail,
                EligibilityVerdict(
                    allowed=False,
                    reason=Reasons.CAPACITY_BELOW_HELD,
                    detail=detail,
                    event_id=category.event_id,
                    category_id=category.pk,
                ),
            )
    for key, value in data.items():
        setattr(category, key, value)
    category.save()
    logger.info("category_updated", category_id=str(category.pk), **data)
    return category


def category_availability(caller: Member, event: Event) -> list[schema.CategoryAvailabilitySchema]:
    """Capacity, seats held and seats free for each category of the event.

    Counts are a snapshot and may be stale by the time a reservation is attempted.
    """
    AuthorizationEngine().require(caller, Capability.IS_MEMBER_OF_CLUB, event)
    categories = Category.objects.filter(event=event).annotate(
        seats_held=Count("reservations", filter=Q(reservations__status__in=Reservation.SEAT_HOLDING_STATUSES))
    )
    return [
        schema.CategoryAvailabilitySchema(
            id=category.pk,
            event_id=category.event_id,
            name=category.name,
            capacity=category.capacity,
            seats_held=category.seats_held,  # type: ignore[attr-defined]
            seats_free=max(category.capacity - category.seats_held, 0),  # type: ignore[attr-defined]
        )
        for category in categories
    ]


def get_event(caller: Member, event_id: UUID) -> Event:
    event = Catalog().get_event(event_id)
    AuthorizationEngine().require(caller, Capability.IS_MEMBER_OF_CLUB, event)
    return event


def list_club_events(caller: Member, club: Club, include_past: bool = False) -> QuerySet[Event]:
    """A club's events, soonest first. Cancelled events are listed too so members can see them."""
    AuthorizationEngine().require(caller, Capability.IS_MEMBER_OF_CLUB, club)
    qs = Event.objects.filter(club=club)
    if not include_past:
        qs = qs.upcoming()
    return qs.order_by("start")
