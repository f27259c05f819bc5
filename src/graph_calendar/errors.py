"""
Calendar Error Handling

Exceptions raised while talking to the identity platform or Microsoft Graph,
and the single place where a handler failure becomes an HTTP response.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from fastapi import status
from fastapi.responses import PlainTextResponse

from graph_calendar.constants import RESPONSE_MARKERS

logger = logging.getLogger(__name__)


class ConsentRequiredError(Exception):
    """The user or an administrator must consent before Graph can be called."""


class TokenAcquisitionError(Exception):
    """The on-behalf-of token exchange failed for a reason other than consent."""


class GraphServiceError(Exception):
    """Microsoft Graph returned an error response."""

    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"Code: {self.code}\nMessage: {self.message}"


class ErrorKind(str, Enum):
    CONSENT_REQUIRED = "consent_required"
    REMOTE_SERVICE = "remote_service"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CalendarError:
    kind: ErrorKind
    status_code: int
    detail: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> "CalendarError":
        if isinstance(exc, ConsentRequiredError):
            return cls(
                kind=ErrorKind.CONSENT_REQUIRED,
                status_code=status.HTTP_403_FORBIDDEN,
                detail=RESPONSE_MARKERS.CONSENT_REQUIRED,
            )
        if isinstance(exc, GraphServiceError):
            return cls(
                kind=ErrorKind.REMOTE_SERVICE,
                status_code=exc.status_code,
                detail=str(exc),
            )
        return cls(
            kind=ErrorKind.UNKNOWN,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{type(exc).__name__}: {exc}",
        )

    def to_response(self) -> PlainTextResponse:
        return PlainTextResponse(content=self.detail, status_code=self.status_code)


def handle_graph_exception(exc: BaseException) -> PlainTextResponse:
    """
    Log a handler failure and build the plain-text response for it.

    Args:
        exc: Exception caught at the handler boundary

    Returns:
        PlainTextResponse with the mapped status code and body
    """
    error = CalendarError.from_exception(exc)

    if error.kind is ErrorKind.CONSENT_REQUIRED:
        logger.error("Consent required", exc_info=exc)
    elif error.kind is ErrorKind.REMOTE_SERVICE:
        logger.error("Graph service error occurred", exc_info=exc)
    else:
        logger.error("Error occurred", exc_info=exc)

    return error.to_response()
