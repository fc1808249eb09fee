from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import OperationalError
from django.http import HttpRequest
from ninja_extra import NinjaExtraAPI

from common.schema import ResponseOk, VersionResponse
from events.controllers import EVENTS_CONTROLLERS
from events.exceptions import AccessDeniedError, DependencyFailureError, IllegalTransitionError
from events.service.booking import BookingConflictError

from .exception_handlers import (
    handle_access_denied_error,
    handle_booking_conflict_error,
    handle_database_operational_error,
    handle_dependency_failure_error,
    handle_django_validation_error,
    handle_general_exception,
    handle_illegal_transition_error,
)

api = NinjaExtraAPI(
    title="ClubPlus Booking API",
    docs_url="/docs",
    version=settings.VERSION,
    description=f"ClubPlus API {settings.VERSION}",
    app_name=f"clubplus-api-{settings.VERSION}",
    urls_namespace="api",
)


@api.get("/version", tags=["Version"], response={200: VersionResponse})
def version(request: HttpRequest) -> tuple[int, VersionResponse]:
    """Get the API version."""
    return 200, VersionResponse(version=settings.VERSION)


@api.get("/healthcheck", tags=["Healthcheck"], response={200: ResponseOk})
def healthcheck(request: HttpRequest) -> tuple[int, ResponseOk]:
    """Check the health of the API."""
    return 200, ResponseOk()


api.register_controllers(*EVENTS_CONTROLLERS)

EXCEPTION_HANDLERS = {
    Exception: handle_general_exception,
    ValidationError: handle_django_validation_error,
    BookingConflictError: handle_booking_conflict_error,
    IllegalTransitionError: handle_illegal_transition_error,
    AccessDeniedError: handle_access_denied_error,
    DependencyFailureError: handle_dependency_failure_error,
    OperationalError: handle_database_operational_error,
}

for exc, handler in EXCEPTION_HANDLERS.items():
    api.add_exception_handler(exc, handler)
