# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the web app.
# Every failure resolves to an HTTP status plus an HTML or plaintext body;
# nothing is allowed to escape to the server process.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lib.templates import render_template

logger = logging.getLogger(__name__)


class ConcertException(Exception):
    """
    Base exception for Concert With Friends.

    All custom exceptions inherit from this class.
    Carries the HTTP status used when it reaches an exception handler.
    """

    def __init__(
        self,
        message: str,
        code: str = "CONCERT_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to a plain dict.

        Passed to internal_error.j2 as `error`; the suggestion is shown in
        every environment, code and details only in debug.
        """
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Ticketmaster Exceptions
# =============================================================================

DEFAULT_TICKETMASTER_MESSAGE = "Encountered an error with the ticketmaster api"
EVENT_PARSE_ERROR = "Failed to parse response from TicketMaster API"


class TicketmasterError(ConcertException):
    """Raised for any failure talking to, or understanding, the Ticketmaster API."""

    def __init__(
        self,
        message: str | None = None,
        code: str = "TICKETMASTER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message or DEFAULT_TICKETMASTER_MESSAGE,
            code=code,
            status_code=status_code,
            suggestion=suggestion,
            details=details,
        )


class NoSearchCriteriaError(TicketmasterError):
    """Raised when an event search has neither a search term nor a location."""

    def __init__(self):
        super().__init__(
            message="No search criteria provided",
            code="NO_SEARCH_CRITERIA",
            status_code=400,
            suggestion="Provide a keyword, a location, or both",
        )


class TicketmasterParseError(TicketmasterError):
    """Raised when the API response lacks structure the adapter requires."""

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(
            message=message or EVENT_PARSE_ERROR,
            code="TICKETMASTER_PARSE_ERROR",
            status_code=500,
            details=details,
        )


class TicketmasterRequestError(TicketmasterError):
    """Raised when the API cannot be reached or answers with an error status."""

    def __init__(self, error: str, status: int | None = None):
        details: dict[str, Any] = {"error": error}
        if status is not None:
            details["upstream_status"] = status
        super().__init__(
            message=f"Ticketmaster request failed: {error}",
            code="TICKETMASTER_REQUEST_FAILED",
            status_code=502,
            suggestion="The event service is unavailable right now. Try again later",
            details=details,
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def _reloader(request: Request):
    return request.app.state.template_reloader


async def concert_exception_handler(
    request: Request,
    exc: ConcertException
) -> HTMLResponse:
    """
    Render a ConcertException as an HTML error page with its status code.
    """
    error = exc.to_dict()
    logger.error(f"{exc.code} on {request.url.path}: {error}")
    reloader = _reloader(request)
    status, text = render_template(
        reloader,
        "internal_error.j2",
        {
            "debug": reloader.debug,
            "error_message": exc.message,
            "error": error,
            "status_code": exc.status_code,
            "reason": "Bad Gateway" if exc.status_code == 502 else "Internal Server Error",
        },
    )
    # A failed render already produced a 500 page
    return HTMLResponse(text, status_code=exc.status_code if status == 200 else status)


async def page_not_found(request: Request) -> HTMLResponse:
    """Render the not-found page; a render failure keeps its 500 status."""
    status, text = render_template(_reloader(request), "page_not_found.j2")
    return HTMLResponse(text, status_code=404 if status == 200 else status)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
):
    """
    Handle framework HTTP errors.

    Unmatched routes get the not-found page; anything else (405, ...) is
    answered in plaintext.
    """
    if exc.status_code == 404:
        return await page_not_found(request)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def unexpected_exception_handler(
    request: Request,
    exc: Exception
) -> HTMLResponse:
    """Log an unexpected exception and render a 500 page."""
    logger.exception(f"Unexpected error on {request.url.path}: {exc}")
    reloader = _reloader(request)
    _, text = render_template(
        reloader,
        "internal_error.j2",
        {"debug": reloader.debug, "error_message": str(exc)},
    )
    return HTMLResponse(text, status_code=500)
