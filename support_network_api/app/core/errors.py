"""
Named error conditions raised by the concept services.

Services never build HTTP responses themselves.  They raise one of the
exceptions below and the handler registered by ``register_error_handlers``
turns it into a JSON response with the matching status code.  Messages
are ``str.format`` templates so that the offending values appear in the
response, e.g. ``NotAllowedError("{0} is already opted in!", user_id)``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


logger = logging.getLogger(__name__)


class ConceptError(Exception):
    """Base class for errors raised by concept services."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *args: Any) -> None:
        self.message = message.format(*args)
        super().__init__(self.message)


class BadValuesError(ConceptError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthenticatedError(ConceptError):
    status_code = status.HTTP_401_UNAUTHORIZED


class NotAllowedError(ConceptError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ConceptError):
    status_code = status.HTTP_404_NOT_FOUND


async def concept_error_handler(request: Request, exc: ConceptError) -> JSONResponse:
    """Render a ``ConceptError`` as ``{"detail": message}``."""
    logger.warning(
        "%s on %s %s: %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc.message,
    )
    headers = None
    if isinstance(exc, UnauthenticatedError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the concept error handler to ``app``."""
    app.add_exception_handler(ConceptError, concept_error_handler)
