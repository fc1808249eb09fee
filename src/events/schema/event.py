import typing as t
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import AwareDatetime, Field, model_validator

from common.schema import OneToOneHundredString, OneToTwoFiftyFiveString, StrippedString
from events.models import Category, Event


class EventSchema(ModelSchema):
    club_id: UUID
    max_reservations_per_member: int | None = None

    class Meta:
        model = Event
        fields = [
            "id",
            "name",
            "description",
            "location",
            "start",
            "end",
            "is_active",
            "cancelled_at",
            "max_reservations_per_member",
        ]


class EventCreateSchema(Schema):
    name: OneToTwoFiftyFiveString
    description: StrippedString = ""
    location: StrippedString = ""
    start: AwareDatetime
    end: AwareDatetime
    max_reservations_per_member: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def validate_schedule(self) -> t.Self:
        """Ensure the event ends after it starts."""
        if self.end <= self.start:
            raise ValueError("The event must end after it starts.")
        return self


class CategorySchema(ModelSchema):
    event_id: UUID

    class Meta:
        model = Category
        fields = ["id", "name", "capacity"]


class CategoryCreateSchema(Schema):
    name: OneToOneHundredString
    capacity: int = Field(..., ge=0)


class CategoryUpdateSchema(Schema):
    name: OneToOneHundredString | None = None
    capacity: int | None = Field(None, ge=0)


class CategoryAvailabilitySchema(Schema):
    id: UUID
    event_id: UUID
    name: str
    capacity: int
    seats_held: int
    seats_free: int
