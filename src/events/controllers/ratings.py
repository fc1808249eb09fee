from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate

from common.authentication import ContextJWTAuth
from events import models, schema
from events.service import rating_service
from events.service.booking import Catalog

from .user_aware_controller import UserAwareController


@api_controller("/ratings", auth=ContextJWTAuth(), tags=["Ratings"])
class RatingController(UserAwareController):
    """Post-event feedback from attendees."""

    @route.get("/pending", url_name="list_pending_ratings", response=list[schema.EventSchema])
    def list_pending_ratings(self) -> QuerySet[models.Event]:
        """Finished events the caller attended and has not rated yet."""
        return rating_service.unrated_attended_events(self.user())

    @route.post(
        "/events/{event_id}",
        url_name="rate_event",
        response={201: schema.RatingSchema, 409: schema.ConflictResponseSchema},
    )
    def rate_event(self, event_id: UUID, payload: schema.RatingCreateSchema) -> tuple[int, models.Rating]:
        """Rate a finished event the caller was checked in at. Once per event."""
        event = Catalog().get_event(event_id)
        return 201, rating_service.rate_event(self.user(), event, payload)

    @route.get(
        "/events/{event_id}", url_name="list_event_ratings", response=PaginatedResponseSchema[schema.RatingSchema]
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_event_ratings(self, event_id: UUID) -> QuerySet[models.Rating]:
        """List an event's ratings. Club managers only."""
        return rating_service.list_ratings(self.user(), Catalog().get_event(event_id))
