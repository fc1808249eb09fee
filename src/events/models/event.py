import typing as t
from datetime import datetime, timedelta

from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel

from .club import Club


class EventQuerySet(models.QuerySet["Event"]):
    def upcoming(self) -> t.Self:
        """Events that have not ended yet."""
        return self.filter(end__gt=timezone.now())

    def finished(self) -> t.Self:
        """Events that have already ended."""
        return self.filter(end__lt=timezone.now())


class EventManager(models.Manager["Event"]):
    def get_queryset(self) -> EventQuerySet:
        """Return custom queryset."""
        return EventQuerySet(self.model, using=self._db)

    def upcoming(self) -> EventQuerySet:
        """Events that have not ended yet."""
        return self.get_queryset().upcoming()

    def finished(self) -> EventQuerySet:
        """Events that have already ended."""
        return self.get_queryset().finished()


class Event(TimeStampedModel):
    """A scheduled club event with one or more attendance categories."""

    club = models.ForeignKey(Club, on_delete=models.CASCADE, related_name="events")
    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    start = models.DateTimeField(db_index=True)
    end = models.DateTimeField(db_index=True)
    is_active = models.BooleanField(default=True, db_index=True)
    cancelled_at = models.DateTimeField(null=True, blank=True, editable=False)
    max_reservations_per_member = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Held reservations a single member may own for this event. "
        "Falls back to the RESERVATION_MAX_PER_MEMBER setting when empty.",
    )

    objects = EventManager()

    class Meta:
        ordering = ["start"]
        indexes = [
            models.Index(fields=["club", "start"], name="event_club_start_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.name

    def clean(self) -> None:
        """Validate the schedule."""
        super().clean()
        if self.start and self.end and self.start >= self.end:
            raise DjangoValidationError({"end": "The event must end after it starts."})

    def get_max_reservations_per_member(self) -> int:
        """Per-member held reservation limit for this event."""
        if self.max_reservations_per_member is not None:
            return self.max_reservations_per_member
        return t.cast(int, settings.RESERVATION_MAX_PER_MEMBER)

    def check_in_window(self) -> tuple[datetime, datetime]:
        """Return the closed interval during which attendance can be checked in."""
        opens_at = self.start - timedelta(minutes=settings.CHECK_IN_OPENS_MINUTES_BEFORE_START)
        return opens_at, self.end

    def is_check_in_open(self, now: datetime | None = None) -> bool:
        """Check if check-in is currently open for this event."""
        now = now or timezone.now()
        opens_at, closes_at = self.check_in_window()
        return opens_at <= now <= closes_at

    def has_started(self, now: datetime | None = None) -> bool:
        return (now or timezone.now()) >= self.start

    def has_ended(self, now: datetime | None = None) -> bool:
        return (now or timezone.now()) > self.end


class Category(TimeStampedModel):
    """A capacity-limited slice of an event (e.g. a pitch, a court, a ticket class)."""

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="categories")
    name = models.CharField(max_length=100)
    capacity = models.PositiveIntegerField(help_text="Maximum number of seats held or checked in at once.")

    class Meta:
        ordering = ["event", "name"]
        constraints = [models.UniqueConstraint(fields=["event", "name"], name="unique_category_event_name")]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} ({self.capacity})"

    def clean(self) -> None:
        """Capacity can never drop below the seats already taken."""
        super().clean()
        if self._state.adding or self.capacity is None:
            return
        taken = self.reservations.seat_holding().count()
        if self.capacity < taken:
            raise DjangoValidationError(
                {"capacity": f"Capacity cannot be lower than the {taken} seats already reserved."}
            )
