from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate

from common.authentication import ContextJWTAuth
from events import models, schema
from events.service import club_service, event_service
from events.service.booking import Catalog

from .user_aware_controller import UserAwareController


@api_controller("/clubs", auth=ContextJWTAuth(), tags=["Clubs"])
class ClubController(UserAwareController):
    """Clubs, their rosters and their events."""

    def get_club(self, club_id: UUID) -> models.Club:
        return Catalog().get_club(club_id)

    def get_membership(self, club_id: UUID, membership_id: UUID) -> models.Membership:
        return Catalog().get_membership(club_id, membership_id)

    @route.get("/", url_name="list_my_clubs", response=list[schema.ClubSchema])
    def list_my_clubs(self) -> QuerySet[models.Club]:
        """List the clubs the caller belongs to."""
        return models.Club.objects.for_member(self.user())

    @route.post("/", url_name="create_club", response={201: schema.ClubSchema})
    def create_club(self, payload: schema.ClubCreateSchema) -> tuple[int, models.Club]:
        """Create a club. The caller becomes its owner."""
        return 201, club_service.create_club(self.user(), payload)

    @route.get("/{club_id}", url_name="get_club", response=schema.ClubSchema)
    def get_club_detail(self, club_id: UUID) -> models.Club:
        return self.get_club(club_id)

    @route.post(
        "/{club_id}/join",
        url_name="join_club",
        response={201: schema.MembershipSchema, 409: schema.ConflictResponseSchema},
    )
    def join_club(self, club_id: UUID) -> tuple[int, models.Membership]:
        """Join a club as an ordinary member."""
        return 201, club_service.join_club(self.user(), self.get_club(club_id))

    @route.get(
        "/{club_id}/members", url_name="list_club_members", response=PaginatedResponseSchema[schema.MembershipSchema]
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_club_members(self, club_id: UUID) -> list[models.Membership]:
        """List the club's members and their roles. Managers only."""
        return club_service.list_memberships(self.user(), self.get_club(club_id))

    @route.put(
        "/{club_id}/members/{membership_id}/role",
        url_name="change_member_role",
        response={200: schema.MembershipSchema, 409: schema.ConflictResponseSchema},
    )
    def change_member_role(
        self, club_id: UUID, membership_id: UUID, payload: schema.MembershipRoleUpdateSchema
    ) -> models.Membership:
        """Promote a member to manager or demote a manager. Owner only."""
        membership = self.get_membership(club_id, membership_id)
        return club_service.change_role(self.user(), membership, models.Membership.Role(payload.role))

    @route.delete(
        "/{club_id}/members/{membership_id}",
        url_name="remove_member",
        response={204: None, 409: schema.ConflictResponseSchema},
    )
    def remove_member(self, club_id: UUID, membership_id: UUID) -> tuple[int, None]:
        """Leave the club, or remove a member as a manager.

        The owner cannot be removed, nor can the club's only manager.
        """
        club_service.remove_membership(self.user(), self.get_membership(club_id, membership_id))
        return 204, None

    @route.get("/{club_id}/events", url_name="list_club_events", response=PaginatedResponseSchema[schema.EventSchema])
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_club_events(self, club_id: UUID, include_past: bool = False) -> QuerySet[models.Event]:
        """List the club's events, soonest first. Members only."""
        return event_service.list_club_events(self.user(), self.get_club(club_id), include_past=include_past)

    @route.post("/{club_id}/events", url_name="create_event", response={201: schema.EventSchema})
    def create_event(self, club_id: UUID, payload: schema.EventCreateSchema) -> tuple[int, models.Event]:
        """Schedule a new event. Managers only."""
        return 201, event_service.create_event(self.user(), self.get_club(club_id), payload)
