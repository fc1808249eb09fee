import structlog
from django.db import IntegrityError, transaction
from django.utils.translation import gettext as _

from accounts.models import Member
from events import schema
from events.models import Club, Membership
from events.service.booking import AuthorizationEngine, BookingConflictError, Capability, EligibilityVerdict, Reasons
from events.service.booking.enums import Messages

logger = structlog.get_logger(__name__)


def _conflict(reason: Reasons, detail: str) -> BookingConflictError:
    return BookingConflictError(detail, EligibilityVerdict(allowed=False, reason=reason, detail=detail))


@transaction.atomic
def create_club(owner: Member, payload: schema.ClubCreateSchema) -> Club:
    """Create a club and make the creator its owner."""
    club = Club.objects.create(name=payload.name, description=payload.description)
    Membership.objects.create(club=club, member=owner, role=Membership.Role.OWNER)
    logger.info("club_created", club_id=str(club.pk), owner_id=str(owner.pk))
    return club


def join_club(member: Member, club: Club) -> Membership:
    """Join a club as an ordinary member.

    Raises:
        BookingConflictError: the club is inactive, or the member already belongs to it.
    """
    if not club.is_active:
        raise _conflict(Reasons.CLUB_INACTIVE, _(Messages.CLUB_INACTIVE))
    if Membership.objects.filter(club=club, member=member).exists():
        raise _conflict(Reasons.ALREADY_MEMBER, _(Messages.ALREADY_MEMBER))
    try:
        with transaction.atomic():
            membership = Membership.objects.create(club=club, member=member, role=Membership.Role.ORDINARY)
    except IntegrityError as e:
        # lost a race against a concurrent join
        raise _conflict(Reasons.ALREADY_MEMBER, _(Messages.ALREADY_MEMBER)) from e
    logger.info("club_joined", club_id=str(club.pk), member_id=str(member.pk))
    return membership


def list_memberships(caller: Member, club: Club) -> list[Membership]:
    """Club roster, for managers."""
    AuthorizationEngine().require(caller, Capability.IS_MANAGER_OF_CLUB, club)
    return list(Membership.objects.filter(club=club).select_related("member").order_by("created_at"))


@transaction.atomic
def change_role(caller: Member, membership: Membership, role: Membership.Role) -> Membership:
    """Promote or demote a member. Owner only; ownership itself is not transferable here."""
    AuthorizationEngine().require(caller, Capability.IS_OWNER_OF_CLUB, membership.club)
    membership = Membership.objects.select_for_update().get(pk=membership.pk)
    if membership.role == Membership.Role.OWNER or role == Membership.Role.OWNER:
        raise _conflict(Reasons.MEMBERSHIP_PROTECTED, _(Messages.OWNER_MEMBERSHIP))
    if membership.role == Membership.Role.MANAGER and role != Membership.Role.MANAGER:
        _ensure_not_last_manager(membership)
    membership.role = role
    membership.save(update_fields=["role", "updated_at"])
    logger.info("membership_role_changed", membership_id=str(membership.pk), role=str(role))
    return membership


@transaction.atomic
def remove_membership(caller: Member, membership: Membership) -> None:
    """Leave a club, or remove someone from it as a manager.

    The owner can never be removed, nor can the only manager of record.
    """
    if membership.member_id != caller.pk:
        AuthorizationEngine().require(caller, Capability.IS_MANAGER_OF_CLUB, membership.club)
    membership = Membership.objects.select_for_update().get(pk=membership.pk)
    if membership.role == Membership.Role.OWNER:
        raise _conflict(Reasons.MEMBERSHIP_PROTECTED, _(Messages.OWNER_MEMBERSHIP))
    if membership.role == Membership.Role.MANAGER:
        _ensure_not_last_manager(membership)
    membership.delete()
    logger.info(
        "membership_removed",
        club_id=str(membership.club_id),
        member_id=str(membership.member_id),
        removed_by=str(caller.pk),
    )


def _ensure_not_last_manager(membership: Membership) -> None:
    """The owner is not a manager of record: a club with managers keeps at least one."""
    managers = list(
        Membership.objects.select_for_update().filter(club_id=membership.club_id, role=Membership.Role.MANAGER)
    )
    if len(managers) <= 1:
        raise _conflict(Reasons.MEMBERSHIP_PROTECTED, _(Messages.LAST_MANAGER))
