"""Exception handlers for the API."""

import traceback
import typing as t
from copy import deepcopy

import orjson
import structlog
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import OperationalError
from django.http import HttpRequest
from ninja.responses import Response

from events.exceptions import AccessDeniedError, DependencyFailureError, IllegalTransitionError
from events.service.booking import BookingConflictError, Reasons

logger = structlog.get_logger(__name__)


def handle_general_exception(request: HttpRequest, exc: Exception | t.Type[Exception]) -> Response:
    """Handle a general exception.

    Logs the request metadata (with secrets masked) next to the traceback.
    """
    data = {"detail": "Internal Server Error."}
    tb_str = traceback.format_exc()
    is_staff = getattr(request, "user", None) and request.user.is_staff
    json_payload = None
    if request.method in ("POST", "PUT", "PATCH") and request.headers.get("Content-Type") == "application/json":
        try:
            json_payload = obfuscate(orjson.loads(request.body))
        except orjson.JSONDecodeError:  # pragma: no cover
            json_payload = None
    logger.exception(
        "internal_server_error",
        headers=obfuscate(dict(request.headers)),
        query=obfuscate(request.GET.dict()),
        json_payload=json_payload,
    )
    if settings.DEBUG or is_staff:  # pragma: no cover
        data["traceback"] = tb_str
    return Response(status=500, data=data)


def handle_django_validation_error(request: HttpRequest, exc: ValidationError | t.Type[ValidationError]) -> Response:
    """Handle a model validation error raised by full_clean."""
    logger.warning("validation_error", error=str(exc))
    if hasattr(exc, "error_dict"):
        error_dict = {k: [ee for e in v for ee in e] for k, v in exc.error_dict.items()}
    else:
        error_dict = {"__all__": list(exc.messages)}  # type: ignore[union-attr]
    return Response(status=400, data={"errors": error_dict})


def handle_booking_conflict_error(
    request: HttpRequest, exc: BookingConflictError | t.Type[BookingConflictError]
) -> Response:
    """The request was well-formed but the current state forbids it."""
    return Response(status=409, data=exc.verdict.model_dump(mode="json", exclude_none=True))  # type: ignore[union-attr]


def handle_illegal_transition_error(
    request: HttpRequest, exc: IllegalTransitionError | t.Type[IllegalTransitionError]
) -> Response:
    logger.warning("illegal_transition", current=exc.current, target=exc.target)  # type: ignore[union-attr]
    return Response(status=409, data={"allowed": False, "reason": Reasons.ILLEGAL_TRANSITION, "detail": str(exc)})


def handle_access_denied_error(request: HttpRequest, exc: AccessDeniedError | t.Type[AccessDeniedError]) -> Response:
    """Never says which check failed; the reason is already in the logs."""
    return Response(status=403, data={"detail": str(exc)})


def handle_dependency_failure_error(
    request: HttpRequest, exc: DependencyFailureError | t.Type[DependencyFailureError]
) -> Response:
    response = Response(status=503, data={"detail": "Service temporarily unavailable. Please retry."})
    response["Retry-After"] = str(settings.DEPENDENCY_RETRY_AFTER_SECONDS)
    return response


def handle_database_operational_error(
    request: HttpRequest, exc: OperationalError | t.Type[OperationalError]
) -> Response:
    """Lock timeouts and lost connections outside a bounded lookup are still a transient store failure."""
    logger.error("dependency_failure", dependency="database", path=request.path, error=str(exc))
    return handle_dependency_failure_error(request, DependencyFailureError("database"))


SENSITIVE_KEYS = {"password", "token", "x-api-key", "authorization", "authentication", "cookie"}


def obfuscate(data: dict[str, t.Any]) -> dict[str, t.Any]:
    """Obfuscate sensitive data in payloads and headers."""
    new_data = deepcopy(data)
    for key in data.keys():
        if key.lower() in SENSITIVE_KEYS:
            new_data[key] = "********"
    return new_data
