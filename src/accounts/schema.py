"""Schema for accounts module."""

from ninja import ModelSchema
from pydantic import UUID4

from .models import Member


class MinimalMemberSchema(ModelSchema):
    id: UUID4
    display_name: str

    class Meta:
        model = Member
        fields = ["username"]
