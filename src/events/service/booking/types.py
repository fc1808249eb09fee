"""Types and exceptions for the booking core."""

import datetime
import uuid

from pydantic import BaseModel, ConfigDict

from .enums import Capability, Reasons


class EligibilityVerdict(BaseModel):
    """Result of an eligibility check for a member on an event action."""

    allowed: bool
    reason: Reasons | None = None
    detail: str | None = None  # translated, for humans
    event_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    reservation_id: uuid.UUID | None = None
    limit: int | None = None
    opens_at: datetime.datetime | None = None
    closes_at: datetime.datetime | None = None


class AuthorizationDecision(BaseModel):
    """Allow, or deny with the reason that is logged but never shown to the caller."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    capability: Capability
    club_id: uuid.UUID | None = None
    reason: str | None = None

    @classmethod
    def allow(cls, capability: Capability, club_id: uuid.UUID | None) -> "AuthorizationDecision":
        return cls(allowed=True, capability=capability, club_id=club_id)

    @classmethod
    def deny(cls, capability: Capability, club_id: uuid.UUID | None, reason: str) -> "AuthorizationDecision":
        return cls(allowed=False, capability=capability, club_id=club_id, reason=reason)


class BookingConflictError(Exception):
    """Exception raised when the current state forbids the requested action."""

    def __init__(self, message: str, verdict: EligibilityVerdict) -> None:
        """Initialize the exception with the failing verdict."""
        super().__init__(message)
        self.verdict = verdict
