"""Booking core.

Seat allocation, per-member limits, time-windowed eligibility, the reservation
lifecycle and the club-scoped authorization engine.
"""

from .authorization import AuthorizationEngine
from .capacity import CapacityAllocator
from .directory import Catalog, MembershipDirectory
from .eligibility import EligibilityValidator
from .enums import Capability, Reasons
from .manager import ReservationLifecycleManager
from .types import AuthorizationDecision, BookingConflictError, EligibilityVerdict

__all__ = [
    "AuthorizationDecision",
    "AuthorizationEngine",
    "BookingConflictError",
    "CapacityAllocator",
    "Capability",
    "Catalog",
    "EligibilityValidator",
    "EligibilityVerdict",
    "MembershipDirectory",
    "Reasons",
    "ReservationLifecycleManager",
]
