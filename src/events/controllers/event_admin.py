from uuid import UUID

from django.shortcuts import get_object_or_404
from ninja_extra import api_controller, route

from common.authentication import ContextJWTAuth
from common.schema import ValidationErrorResponse
from events import models, schema
from events.service import event_service
from events.service.booking import Catalog

from .user_aware_controller import UserAwareController


@api_controller("/event-admin/{event_id}", auth=ContextJWTAuth(), tags=["Event Admin"])
class EventAdminController(UserAwareController):
    """Event and category management. Every route requires a manager of the event's club."""

    def get_one(self, event_id: UUID) -> models.Event:
        return Catalog().get_event(event_id)

    @route.post("/cancel", url_name="cancel_event", response=schema.EventSchema)
    def cancel_event(self, event_id: UUID) -> models.Event:
        """Cancel the event. Existing reservations are kept but can no longer be checked in."""
        return event_service.cancel_event(self.user(), self.get_one(event_id))

    @route.post(
        "/categories",
        url_name="create_category",
        response={201: schema.CategorySchema, 400: ValidationErrorResponse, 409: schema.ConflictResponseSchema},
    )
    def create_category(self, event_id: UUID, payload: schema.CategoryCreateSchema) -> tuple[int, models.Category]:
        """Add a capacity-limited category to the event."""
        return 201, event_service.create_category(self.user(), self.get_one(event_id), payload)

    @route.patch(
        "/categories/{category_id}",
        url_name="update_category",
        response={200: schema.CategorySchema, 400: ValidationErrorResponse, 409: schema.ConflictResponseSchema},
    )
    def update_category(
        self, event_id: UUID, category_id: UUID, payload: schema.CategoryUpdateSchema
    ) -> models.Category:
        """Rename or resize a category. Capacity cannot drop below the seats already reserved."""
        category = get_object_or_404(models.Category.objects.select_related("event"), pk=category_id, event_id=event_id)
        return event_service.update_category(self.user(), category, payload)
