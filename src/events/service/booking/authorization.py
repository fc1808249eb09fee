"""The single authorization engine every booking operation goes through.

Capabilities are always evaluated against the club that owns the resource, so
a manager of one club has no authority in any other. The engine is a pure
predicate: it reads from the membership directory and never mutates state.
"""

import uuid

import structlog

from accounts.models import Member
from events.exceptions import AccessDeniedError
from events.models import Category, Club, Event, Membership, Reservation

from .directory import MembershipDirectory
from .enums import Capability
from .types import AuthorizationDecision

logger = structlog.get_logger(__name__)

ClubScopedResource = Club | Event | Category | Reservation


def club_id_for(resource: ClubScopedResource) -> uuid.UUID:
    """Derive the owning club's id from any club-scoped resource."""
    if isinstance(resource, Club):
        return resource.pk
    if isinstance(resource, Event):
        return resource.club_id
    if isinstance(resource, Category | Reservation):
        return resource.event.club_id
    raise TypeError(f"{type(resource).__name__} is not scoped to a club.")


class AuthorizationEngine:
    """Answers "may this caller do X to this resource?"."""

    def __init__(self, directory: MembershipDirectory | None = None) -> None:
        self.directory = directory or MembershipDirectory()

    def authorize(self, caller: Member, capability: Capability, resource: ClubScopedResource) -> AuthorizationDecision:
        """Evaluate one capability for the caller on the resource's club."""
        club_id = club_id_for(resource)
        if not caller.is_active:
            return AuthorizationDecision.deny(capability, club_id, "caller is inactive")

        if capability == Capability.IS_RESERVATION_OWNER_OR_MANAGER:
            if not isinstance(resource, Reservation):
                raise TypeError(f"{capability} applies to reservations only.")
            if resource.member_id == caller.pk:
                return AuthorizationDecision.allow(capability, club_id)
            return self._check_role(caller, capability, club_id, Membership.MANAGING_ROLES)

        match capability:
            case Capability.IS_MEMBER_OF_CLUB:
                if self.directory.is_member_of_club(caller.pk, club_id):
                    return AuthorizationDecision.allow(capability, club_id)
                return AuthorizationDecision.deny(capability, club_id, "caller holds no role in the club")
            case Capability.IS_MANAGER_OF_CLUB:
                return self._check_role(caller, capability, club_id, Membership.MANAGING_ROLES)
            case Capability.IS_OWNER_OF_CLUB:
                return self._check_role(caller, capability, club_id, (Membership.Role.OWNER,))
        raise ValueError(f"Unknown capability {capability!r}.")

    def require(self, caller: Member, capability: Capability, resource: ClubScopedResource) -> AuthorizationDecision:
        """Like authorize, but raise AccessDeniedError on deny.

        The failing reason is logged; the raised error carries only a generic message.
        """
        decision = self.authorize(caller, capability, resource)
        if not decision.allowed:
            logger.info(
                "authorization_denied",
                capability=str(capability),
                club_id=str(decision.club_id),
                caller_id=str(caller.pk),
                reason=decision.reason,
            )
            raise AccessDeniedError(decision)
        return decision

    def _check_role(
        self,
        caller: Member,
        capability: Capability,
        club_id: uuid.UUID,
        accepted_roles: tuple[Membership.Role, ...],
    ) -> AuthorizationDecision:
        role = self.directory.role_in_club(caller.pk, club_id)
        if role is None:
            return AuthorizationDecision.deny(capability, club_id, "caller holds no role in the club")
        if role not in accepted_roles:
            return AuthorizationDecision.deny(capability, club_id, f"role {role} is insufficient")
        return AuthorizationDecision.allow(capability, club_id)
