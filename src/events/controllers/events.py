from uuid import UUID

from ninja_extra import api_controller, route

from common.authentication import ContextJWTAuth
from events import models, schema
from events.service import event_service

from .user_aware_controller import UserAwareController


@api_controller("/events", auth=ContextJWTAuth(), tags=["Events"])
class EventController(UserAwareController):
    """Read-only views for club members."""

    @route.get("/{event_id}", url_name="get_event", response=schema.EventSchema)
    def get_event(self, event_id: UUID) -> models.Event:
        return event_service.get_event(self.user(), event_id)

    @route.get(
        "/{event_id}/categories",
        url_name="list_event_categories",
        response=list[schema.CategoryAvailabilitySchema],
    )
    def list_event_categories(self, event_id: UUID) -> list[schema.CategoryAvailabilitySchema]:
        """List the event's categories with their current availability.

        Seat counts are a snapshot; a reservation attempt is the only authoritative check.
        """
        event = event_service.get_event(self.user(), event_id)
        return event_service.category_availability(self.user(), event)
