import typing as t
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel
from events.exceptions import IllegalTransitionError

from .event import Category, Event

if t.TYPE_CHECKING:
    from accounts.models import Member


class ReservationQuerySet(models.QuerySet["Reservation"]):
    def seat_holding(self) -> t.Self:
        """Reservations that occupy a seat in their category."""
        return self.filter(status__in=Reservation.SEAT_HOLDING_STATUSES)

    def held(self) -> t.Self:
        return self.filter(status=Reservation.Status.HELD)

    def upcoming(self) -> t.Self:
        """Reservations whose event has not ended yet."""
        return self.filter(event__end__gt=timezone.now())

    def with_related(self) -> t.Self:
        """Select what the API serializes (not for transactional queries)."""
        return self.select_related("event", "category", "member")


class ReservationManager(models.Manager["Reservation"]):
    def get_queryset(self) -> ReservationQuerySet:
        """Return custom queryset."""
        return ReservationQuerySet(self.model, using=self._db)

    def seat_holding(self) -> ReservationQuerySet:
        """Reservations that occupy a seat in their category."""
        return self.get_queryset().seat_holding()

    def held(self) -> ReservationQuerySet:
        return self.get_queryset().held()

    def with_related(self) -> ReservationQuerySet:
        return self.get_queryset().with_related()


class Reservation(TimeStampedModel):
    """A member's claim on one seat of an event category."""

    class Status(models.TextChoices):
        HELD = "held", "Held"
        CANCELLED = "cancelled", "Cancelled"
        CHECKED_IN = "checked_in", "Checked In"

    SEAT_HOLDING_STATUSES = (Status.HELD, Status.CHECKED_IN)
    ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
        Status.HELD: frozenset({Status.CANCELLED, Status.CHECKED_IN}),
        Status.CANCELLED: frozenset(),
        Status.CHECKED_IN: frozenset(),
    }

    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reservations")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="reservations")
    category = models.ForeignKey(Category, on_delete=models.CASCADE, related_name="reservations")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.HELD, db_index=True)
    token = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    cancelled_at = models.DateTimeField(null=True, blank=True, editable=False)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cancelled_reservations",
        editable=False,
    )
    checked_in_at = models.DateTimeField(null=True, blank=True, editable=False)
    checked_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="checked_in_reservations",
        editable=False,
    )

    objects = ReservationManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["member", "event", "status"], name="reservation_member_status_idx"),
            models.Index(fields=["category", "status"], name="reservation_cat_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Reservation {self.token} ({self.status})"

    def clean(self) -> None:
        """The category must belong to the reserved event."""
        super().clean()
        if self.category_id and self.event_id and self.category.event_id != self.event_id:
            raise DjangoValidationError({"category": "The category does not belong to this event."})

    def transition_to(self, status: "Reservation.Status", *, by: "Member") -> None:
        """Move to ``status``, stamping who did it and when.

        Only the transitions in ALLOWED_TRANSITIONS are legal; cancelled and checked_in are terminal.

        Raises:
            IllegalTransitionError: if the current status does not allow the move.
        """
        if status not in self.ALLOWED_TRANSITIONS[self.status]:
            raise IllegalTransitionError(self.status, status)
        now = timezone.now()
        if status == self.Status.CANCELLED:
            self.cancelled_at = now
            self.cancelled_by = by
        elif status == self.Status.CHECKED_IN:
            self.checked_in_at = now
            self.checked_in_by = by
        self.status = status

    @property
    def qr_payload(self) -> str:
        """Data encoded in the scannable code shown at the venue."""
        return f"reservation:{self.token}|event:{self.event_id}|category:{self.category_id}|member:{self.member_id}"
