import typing as t
from uuid import UUID

from ninja import ModelSchema, Schema
from pydantic import Field

from common.schema import StrippedString
from events.models import Rating

Score = t.Annotated[int, Field(ge=1, le=5)]


class RatingCreateSchema(Schema):
    ambiance: Score
    cleanliness: Score
    organisation: Score
    fair_play: Score
    skill_level: Score
    comment: StrippedString = ""


class RatingSchema(ModelSchema):
    event_id: UUID
    member_id: UUID
    average: float

    class Meta:
        model = Rating
        fields = [
            "id",
            "ambiance",
            "cleanliness",
            "organisation",
            "fair_play",
            "skill_level",
            "comment",
            "created_at",
        ]
