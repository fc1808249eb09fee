from .clubs import ClubController
from .event_admin import EventAdminController
from .events import EventController
from .ratings import RatingController
from .reservations import ReservationController

# Registration order is the order routes appear in the API docs.
EVENTS_CONTROLLERS: list[type] = [
    ClubController,
    EventController,
    EventAdminController,
    ReservationController,
    RatingController,
]

__all__ = [
    "ClubController",
    "EventAdminController",
    "EventController",
    "RatingController",
    "ReservationController",
    "EVENTS_CONTROLLERS",
]
