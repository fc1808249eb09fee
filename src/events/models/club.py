import typing as t

from django.conf import settings
from django.db import models
from django.utils.text import slugify

from common.models import TimeStampedModel

if t.TYPE_CHECKING:
    from accounts.models import Member


class ClubQuerySet(models.QuerySet["Club"]):
    def for_member(self, member: "Member") -> t.Self:
        """Clubs the member belongs to, in any role."""
        return self.filter(memberships__member=member).distinct()


class ClubManager(models.Manager["Club"]):
    def get_queryset(self) -> ClubQuerySet:
        """Return custom queryset."""
        return ClubQuerySet(self.model, using=self._db)

    def for_member(self, member: "Member") -> ClubQuerySet:
        """Clubs the member belongs to, in any role."""
        return self.get_queryset().for_member(member)


class Club(TimeStampedModel):
    """A membership organization running events."""

    name = models.CharField(max_length=255, unique=True)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True, db_index=True)
    members = models.ManyToManyField(
        settings.AUTH_USER_MODEL, through="events.Membership", related_name="clubs", blank=True
    )

    objects = ClubManager()

    class Meta:
        ordering = ["name"]

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Derive the slug from the name on first save."""
        if not self.slug:
            self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class MembershipQuerySet(models.QuerySet["Membership"]):
    def granting(self) -> t.Self:
        """Memberships that currently grant a role: active member in an active club."""
        return self.filter(member__is_active=True, club__is_active=True)


class MembershipManager(models.Manager["Membership"]):
    def get_queryset(self) -> MembershipQuerySet:
        """Return custom queryset."""
        return MembershipQuerySet(self.model, using=self._db)

    def granting(self) -> MembershipQuerySet:
        """Memberships that currently grant a role."""
        return self.get_queryset().granting()


class Membership(TimeStampedModel):
    """The role a member holds in one club."""

    class Role(models.TextChoices):
        ORDINARY = "ordinary", "Ordinary member"
        MANAGER = "manager", "Manager"
        OWNER = "owner", "Owner"

    MANAGING_ROLES = (Role.MANAGER, Role.OWNER)

    club = models.ForeignKey(Club, on_delete=models.CASCADE, related_name="memberships")
    member = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="club_memberships")
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.ORDINARY, db_index=True)

    objects = MembershipManager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["member", "role"], name="membership_member_role_idx"),
        ]
        constraints = [
            models.UniqueConstraint(fields=["club", "member"], name="unique_club_member"),
            models.UniqueConstraint(fields=["club"], condition=models.Q(role="owner"), name="unique_club_owner"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.member_id} is {self.role} of {self.club_id}"

    @property
    def is_manager(self) -> bool:
        """Owners manage their club too."""
        return self.role in self.MANAGING_ROLES
