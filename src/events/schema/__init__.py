"""Events schema package.

Organized into modules that mirror the models package structure; everything
is re-exported here.
"""

from .club import ClubCreateSchema, ClubSchema, MembershipRoleUpdateSchema, MembershipSchema
from .event import (
    CategoryAvailabilitySchema,
    CategoryCreateSchema,
    CategorySchema,
    CategoryUpdateSchema,
    EventCreateSchema,
    EventSchema,
)
from .rating import RatingCreateSchema, RatingSchema
from .reservation import ConflictResponseSchema, ReservationCreateSchema, ReservationSchema

__all__ = [
    "CategoryAvailabilitySchema",
    "CategoryCreateSchema",
    "CategorySchema",
    "CategoryUpdateSchema",
    "ClubCreateSchema",
    "ClubSchema",
    "ConflictResponseSchema",
    "EventCreateSchema",
    "EventSchema",
    "MembershipRoleUpdateSchema",
    "MembershipSchema",
    "RatingCreateSchema",
    "RatingSchema",
    "ReservationCreateSchema",
    "ReservationSchema",
]
