import structlog
from django.db import IntegrityError, transaction
from django.db.models import Exists, OuterRef, QuerySet
from django.utils.translation import gettext as _

from accounts.models import Member
from events import schema
from events.models import Event, Rating, Reservation
from events.service.booking import (
    AuthorizationEngine,
    BookingConflictError,
    Capability,
    EligibilityValidator,
    EligibilityVerdict,
    Reasons,
)
from events.service.booking.eligibility import ensure_allowed
from events.service.booking.enums import Messages

logger = structlog.get_logger(__name__)


@transaction.atomic
def rate_event(caller: Member, event: Event, payload: schema.RatingCreateSchema) -> Rating:
    """Record the caller's rating for an event they attended and that has finished.

    Raises:
        BookingConflictError: not-ratable (not finished, not attended) or already-rated.
    """
    verdict = EligibilityValidator(caller, event).check_rating()
    ensure_allowed(verdict, "The event cannot be rated.")
    try:
        with transaction.atomic():
            rating = Rating.objects.create(event=event, member=caller, **payload.model_dump())
    except IntegrityError as e:
        # lost a race against a concurrent rating by the same member
        detail = _(Messages.ALREADY_RATED)
        raise BookingConflictError(
            detail, EligibilityVerdict(allowed=False, reason=Reasons.ALREADY_RATED, detail=detail, event_id=event.pk)
        ) from e
    logger.info("event_rated", event_id=str(event.pk), member_id=str(caller.pk), average=rating.average)
    return rating


def list_ratings(caller: Member, event: Event) -> QuerySet[Rating]:
    AuthorizationEngine().require(caller, Capability.IS_MANAGER_OF_CLUB, event)
    return Rating.objects.filter(event=event)


def unrated_attended_events(member: Member) -> QuerySet[Event]:
    """Finished events the member checked in at and has not rated yet."""
    attended = Reservation.objects.filter(
        event=OuterRef("pk"), member=member, status=Reservation.Status.CHECKED_IN
    )
    rated = Rating.objects.filter(event=OuterRef("pk"), member=member)
    return (
        Event.objects.finished()
        .filter(Exists(attended))
        .exclude(Exists(rated))
        .select_related("club")
        .order_by("-end")
    )
