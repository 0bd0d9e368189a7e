"""Global exception handlers — map SDK exceptions to HTTP status codes.

Routes only handle the happy path; the SDK's ``IntakeError`` subclasses are
translated here.  Full details are logged server-side, the client receives
a generic description (session ids and gateway output never leave the
server).
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from symptom_intake.errors import (
    AssessmentUnavailableError,
    IntakeError,
    InvalidResponseError,
    SessionBoundsExceededError,
    SessionConflictError,
    SessionNotFoundError,
)

logger = logging.getLogger(__name__)

# --- SDK exception types and their HTTP status codes ---
# Checked in order; first isinstance match wins.
_STATUS_BY_ERROR: list[tuple[type[IntakeError], int]] = [
    (SessionNotFoundError, 404),
    (SessionConflictError, 409),
    (SessionBoundsExceededError, 409),
    (InvalidResponseError, 422),
    (AssessmentUnavailableError, 503),
]


# --- Client-safe messages keyed by HTTP status code ---
_SAFE_MESSAGES: dict[int, str] = {
    404: "Resource not found",
    409: "Request conflicts with the session state",
    422: "Answer does not fit the question",
    503: "Service temporarily unavailable",
}


async def intake_error_handler(request: Request, exc: IntakeError) -> JSONResponse:
    """Map an SDK ``IntakeError`` to a contextual HTTP error response.

    ``AssessmentUnavailableError`` carries a patient-facing message in the
    session language; that message is returned as-is.  Every other error
    gets a generic description.
    """
    status = 500
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status = code
            break

    logger.warning("%s [%d] at %s: %s", type(exc).__name__, status, request.url, exc)
    if isinstance(exc, AssessmentUnavailableError):
        detail = exc.user_message
    else:
        detail = _SAFE_MESSAGES.get(status, "Internal server error")
    return JSONResponse(status_code=status, content={"detail": detail})


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
