import re
import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models


class MemberQueryset(models.QuerySet["Member"]):
    """Queryset for Member."""

    def active(self) -> "MemberQueryset":
        """Members allowed to act in any club."""
        return self.filter(is_active=True)


class MemberManager(UserManager["Member"]):
    def get_queryset(self) -> MemberQueryset:
        """Get queryset for Member."""
        return MemberQueryset(self.model)


class Member(AbstractUser):
    """An authenticated identity.

    A member holds no global authority: every role is scoped to a club through
    ``events.Membership``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    preferred_name = models.CharField(db_index=True, max_length=255, blank=True, help_text="Preferred name")

    objects = MemberManager()  # type: ignore[misc]

    class Meta:
        ordering = ["username"]

    @property
    def display_name(self) -> str:
        """Display name."""
        return self.get_display_name()

    def get_display_name(self) -> str:
        """Returns the member's preferred name, or their full name as a fallback."""
        return (
            self.preferred_name or self.get_full_name() or re.sub(r"(\W|_)+", " ", self.username.split("@")[0]).title()
        )
