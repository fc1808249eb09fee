from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from common.models import TimeStampedModel

from .event import Event

SCORE_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]


class Rating(TimeStampedModel):
    """A member's post-event feedback, allowed once per attended event."""

    SCORE_FIELDS = ("ambiance", "cleanliness", "organisation", "fair_play", "skill_level")

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="ratings")
    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="ratings")
    ambiance = models.PositiveSmallIntegerField(validators=SCORE_VALIDATORS)
    cleanliness = models.PositiveSmallIntegerField(validators=SCORE_VALIDATORS)
    organisation = models.PositiveSmallIntegerField(validators=SCORE_VALIDATORS)
    fair_play = models.PositiveSmallIntegerField(validators=SCORE_VALIDATORS)
    skill_level = models.PositiveSmallIntegerField(validators=SCORE_VALIDATORS)
    comment = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-created_at"]
        constraints = [models.UniqueConstraint(fields=["event", "member"], name="unique_rating_event_member")]

    def __str__(self) -> str:  # pragma: no cover
        return f"Rating {self.average:.1f} for {self.event_id}"

    @property
    def average(self) -> float:
        return sum(getattr(self, field) for field in self.SCORE_FIELDS) / len(self.SCORE_FIELDS)
