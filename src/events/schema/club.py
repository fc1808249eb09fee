import typing as t
from uuid import UUID

from ninja import ModelSchema, Schema

from accounts.schema import MinimalMemberSchema
from common.schema import OneToTwoFiftyFiveString, StrippedString
from events.models import Club, Membership


class ClubSchema(ModelSchema):
    class Meta:
        model = Club
        fields = ["id", "name", "slug", "description", "is_active", "created_at"]


class ClubCreateSchema(Schema):
    name: OneToTwoFiftyFiveString
    description: StrippedString = ""


class MembershipSchema(ModelSchema):
    club_id: UUID
    member: MinimalMemberSchema
    role: Membership.Role

    class Meta:
        model = Membership
        fields = ["id", "role", "created_at"]


class MembershipRoleUpdateSchema(Schema):
    role: t.Literal["ordinary", "manager"]
