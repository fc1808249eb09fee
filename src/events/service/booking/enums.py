"""Enums for the booking core."""

from enum import StrEnum

from django.utils.translation import gettext_noop


class Capability(StrEnum):
    """Club-scoped capabilities checked by the authorization engine."""

    IS_MEMBER_OF_CLUB = "is-member-of-club"
    IS_MANAGER_OF_CLUB = "is-manager-of-club"
    IS_OWNER_OF_CLUB = "is-owner-of-club"
    IS_RESERVATION_OWNER_OR_MANAGER = "is-reservation-owner-or-manager"


class Reasons(StrEnum):
    """Machine-readable conflict codes returned to clients."""

    EVENT_NOT_BOOKABLE = "event-not-bookable"
    CATEGORY_MISMATCH = "category-mismatch"
    LIMIT_REACHED = "limit-reached"
    CAPACITY_EXHAUSTED = "capacity-exhausted"
    NOT_CANCELLABLE = "not-cancellable"
    OUTSIDE_CHECKIN_WINDOW = "outside-checkin-window"
    NOT_HELD = "not-held"
    NOT_RATABLE = "not-ratable"
    ALREADY_RATED = "already-rated"
    CAPACITY_BELOW_HELD = "capacity-below-held"
    EVENT_NOT_EDITABLE = "event-not-editable"
    CLUB_INACTIVE = "club-inactive"
    ALREADY_MEMBER = "already-member"
    MEMBERSHIP_PROTECTED = "membership-protected"
    ILLEGAL_TRANSITION = "illegal-transition"


class Messages(StrEnum):
    """Human-readable explanations.

    Note: Strings are marked with gettext_noop() for translation extraction.
    The actual translation happens where the verdict is built, via _(Messages.XXX).
    """

    EVENT_CANCELLED = gettext_noop("This event has been cancelled.")
    EVENT_STARTED = gettext_noop("This event has already started.")
    EVENT_FINISHED = gettext_noop("This event has already finished.")
    CATEGORY_MISMATCH = gettext_noop("This category does not belong to the requested event.")
    LIMIT_REACHED = gettext_noop("You already hold the maximum number of reservations for this event.")
    CAPACITY_EXHAUSTED = gettext_noop("This category is full.")
    NOT_HELD = gettext_noop("Only held reservations can be changed.")
    CHECK_IN_CLOSED = gettext_noop("Check-in is not open for this event.")
    EVENT_NOT_FINISHED = gettext_noop("This event has not finished yet.")
    NOT_ATTENDED = gettext_noop("Only checked-in attendees can rate an event.")
    ALREADY_RATED = gettext_noop("You have already rated this event.")
    CAPACITY_BELOW_HELD = gettext_noop("Capacity cannot be lower than the seats already reserved.")
    CLUB_INACTIVE = gettext_noop("This club is no longer active.")
    ALREADY_MEMBER = gettext_noop("You are already a member of this club.")
    OWNER_MEMBERSHIP = gettext_noop("The owner's membership cannot be changed this way.")
    LAST_MANAGER = gettext_noop("The club's only manager cannot be removed.")
