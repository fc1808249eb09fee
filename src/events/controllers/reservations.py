from uuid import UUID

from django.db.models import QuerySet
from ninja_extra import api_controller, route
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate

from common.authentication import ContextJWTAuth
from events import models, schema
from events.service.booking import ReservationLifecycleManager

from .user_aware_controller import UserAwareController


@api_controller("/reservations", auth=ContextJWTAuth(), tags=["Reservations"])
class ReservationController(UserAwareController):
    """Reserve seats, cancel them and check attendees in."""

    def manager(self) -> ReservationLifecycleManager:
        return ReservationLifecycleManager(self.user())

    @route.post(
        "/",
        url_name="create_reservation",
        response={201: schema.ReservationSchema, 409: schema.ConflictResponseSchema},
    )
    def create_reservation(self, payload: schema.ReservationCreateSchema) -> tuple[int, models.Reservation]:
        """Reserve one seat in an event category.

        Fails with 409 and a machine-readable `reason` when the event is not bookable, the category
        belongs to another event, the per-member limit is reached, or the category is full.
        """
        reservation = self.manager().create(payload.event_id, payload.category_id)
        return 201, models.Reservation.objects.with_related().get(pk=reservation.pk)

    @route.get("/me", url_name="list_my_reservations", response=PaginatedResponseSchema[schema.ReservationSchema])
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_my_reservations(
        self, status: models.Reservation.Status | None = None, include_past: bool = False
    ) -> QuerySet[models.Reservation]:
        """List the caller's reservations. Events that already ended are hidden unless `include_past` is set."""
        return self.manager().list_by_member(self.user().pk, status=status, include_past=include_past)

    @route.get(
        "/members/{member_id}",
        url_name="list_member_reservations",
        response=PaginatedResponseSchema[schema.ReservationSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_member_reservations(
        self, member_id: UUID, status: models.Reservation.Status | None = None, include_past: bool = False
    ) -> QuerySet[models.Reservation]:
        """List a member's reservations. Only the member themselves may do this."""
        return self.manager().list_by_member(member_id, status=status, include_past=include_past)

    @route.get(
        "/events/{event_id}",
        url_name="list_event_reservations",
        response=PaginatedResponseSchema[schema.ReservationSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_event_reservations(
        self, event_id: UUID, status: models.Reservation.Status | None = None
    ) -> QuerySet[models.Reservation]:
        """List every reservation of an event. Club managers only."""
        return self.manager().list_by_event(event_id, status=status)

    @route.get(
        "/categories/{category_id}",
        url_name="list_category_reservations",
        response=PaginatedResponseSchema[schema.ReservationSchema],
    )
    @paginate(PageNumberPaginationExtra, page_size=50)
    def list_category_reservations(
        self, category_id: UUID, status: models.Reservation.Status | None = None
    ) -> QuerySet[models.Reservation]:
        """List every reservation of a category. Club managers only."""
        return self.manager().list_by_category(category_id, status=status)

    @route.post(
        "/check-in/{token}",
        url_name="check_in_reservation",
        response={200: schema.ReservationSchema, 409: schema.ConflictResponseSchema},
    )
    def check_in_reservation(self, token: UUID) -> models.Reservation:
        """Check in the holder of a scanned reservation token.

        Club managers only, from one hour before the event starts until it ends.
        """
        reservation = self.manager().check_in(token)
        return models.Reservation.objects.with_related().get(pk=reservation.pk)

    @route.get("/{reservation_id}", url_name="get_reservation", response=schema.ReservationSchema)
    def get_reservation(self, reservation_id: UUID) -> models.Reservation:
        """Retrieve a reservation. Visible to its owner and to the club's managers."""
        return self.manager().get_by_id(reservation_id)

    @route.post(
        "/{reservation_id}/cancel",
        url_name="cancel_reservation",
        response={204: None, 409: schema.ConflictResponseSchema},
    )
    def cancel_reservation(self, reservation_id: UUID) -> tuple[int, None]:
        """Cancel a held reservation before the event starts, freeing its seat."""
        self.manager().cancel(reservation_id)
        return 204, None
