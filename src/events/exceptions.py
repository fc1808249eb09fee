import typing as t

if t.TYPE_CHECKING:
    from events.service.booking.types import AuthorizationDecision


class AccessDeniedError(Exception):
    """Raised when the caller lacks the capability an operation requires.

    The public message is deliberately generic; the failing check travels on ``decision``.
    """

    def __init__(self, decision: "AuthorizationDecision | None" = None) -> None:
        super().__init__("You do not have permission to perform this action.")
        self.decision = decision


class IllegalTransitionError(Exception):
    """Raised when a reservation is moved to a status its current status does not allow."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move a reservation from {current!r} to {target!r}.")
        self.current = current
        self.target = target


class DependencyFailureError(Exception):
    """Raised when a backing store cannot answer within its configured bounds."""

    def __init__(self, dependency: str) -> None:
        super().__init__(f"{dependency} is temporarily unavailable.")
        self.dependency = dependency
