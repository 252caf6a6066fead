"""Error taxonomy shared by every service and its translation to HTTP.

Services raise these where a failure is detected; the handlers registered by
:func:`register_exception_handlers` turn them into ``{"detail": ...}``
responses. Anything else is logged with its traceback and answered with a
generic 500 so no internal detail reaches the client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("hospital.errors")


@dataclass
class FieldError:
    field: str
    message: str
    location: str = "body"

    def as_dict(self) -> Dict[str, str]:
        return {"location": self.location, "field": self.field, "message": self.message}


class HospitalError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"detail": self.message}


class ValidationError(HospitalError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"

    def __init__(self, errors: List[FieldError], message: Optional[str] = None) -> None:
        self.errors = errors
        super().__init__(message)

    def to_body(self) -> Dict[str, Any]:
        return {"detail": self.message, "errors": [e.as_dict() for e in self.errors]}


class AuthenticationError(HospitalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidCredentialsError(AuthenticationError):
    default_message = "Invalid credentials"


class MissingTokenError(AuthenticationError):
    default_message = "Access token required"


class InvalidTokenError(AuthenticationError):
    default_message = "Invalid token"


class UnregisteredUserError(AuthenticationError):
    """A third-party identity was verified but matches no local user.

    The asserted name and email are echoed back for display only.
    """

    default_message = "User is not registered in the system"

    def __init__(self, *, email: str, name: Optional[str] = None) -> None:
        self.email = email
        self.name = name
        super().__init__()

    def to_body(self) -> Dict[str, Any]:
        return {"detail": self.message, "user_info": {"name": self.name, "email": self.email}}


class AuthorizationError(HospitalError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(HospitalError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(HospitalError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class UpstreamUnavailableError(HospitalError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, service: str, message: Optional[str] = None) -> None:
        self.service = service
        super().__init__(message or f"Service {service} unavailable")

    def to_body(self) -> Dict[str, Any]:
        return {
            "detail": self.message,
            "service": self.service,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class UpstreamTimeoutError(UpstreamUnavailableError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT

    def __init__(self, service: str) -> None:
        super().__init__(service, f"Service {service} did not respond in time")


class InternalError(HospitalError):
    pass


def _field_errors_from_request(exc: RequestValidationError) -> List[FieldError]:
    errors: List[FieldError] = []
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        location = str(loc[0]) if loc else "body"
        field = ".".join(str(part) for part in loc[1:]) or location
        errors.append(FieldError(field=field, message=err.get("msg", "Invalid value"), location=location))
    return errors


async def _handle_hospital_error(request: Request, exc: HospitalError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(_field_errors_from_request(exc))
    return JSONResponse(status_code=error.status_code, content=error.to_body())


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": InternalError.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HospitalError, _handle_hospital_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_request_validation)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _handle_unexpected)
