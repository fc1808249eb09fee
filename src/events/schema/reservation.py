from uuid import UUID

from ninja import ModelSchema, Schema

from accounts.schema import MinimalMemberSchema
from events.models import Reservation
from events.service.booking.enums import Reasons


class ReservationCreateSchema(Schema):
    event_id: UUID
    category_id: UUID


class ReservationSchema(ModelSchema):
    event_id: UUID
    category_id: UUID
    member: MinimalMemberSchema
    status: Reservation.Status
    qr_payload: str

    class Meta:
        model = Reservation
        fields = ["id", "token", "status", "created_at", "cancelled_at", "checked_in_at"]


class ConflictResponseSchema(Schema):
    """Body of a 409: the action is well-formed but the current state forbids it."""

    allowed: bool = False
    reason: Reasons
    detail: str | None = None
