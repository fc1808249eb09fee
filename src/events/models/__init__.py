from .club import Club, Membership
from .event import Category, Event
from .rating import Rating
from .reservation import Reservation

__all__ = [
    "Category",
    "Club",
    "Event",
    "Membership",
    "Rating",
    "Reservation",
]
