"""Centralized error transformation for API callers.

Maps teamgate errors (domain and infrastructure) to HTTPException responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from teamgate.domain.shared.error import (
    AuthorizationError,
    DomainError,
    InfrastructureError,
    NotFoundError,
    TeamgateError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    ValidationError: 422,
    AuthorizationError: 403,
}


def map_teamgate_error(error: TeamgateError) -> HTTPException:
    """Map a teamgate error to an HTTPException.

    Domain errors without an explicit entry (InvalidInputError,
    InvalidUserError, BadRequestError) become 400.
    """
    detail: dict[str, Any] = {
        "code": error.code,
        "message": error.message,
    }

    if isinstance(error, InfrastructureError):
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, DomainError):
        status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), 400)
        if isinstance(error, ValidationError) and error.field is not None:
            detail["field"] = error.field
        # No identified user is 401, an identified user lacking a role is 403
        if isinstance(error, AuthorizationError) and error.code == "missing_user":
            return HTTPException(status_code=401, detail=detail)
        return HTTPException(status_code=status_code, detail=detail)

    # Fallback for unknown TeamgateError subclasses
    return HTTPException(status_code=500, detail=detail)


def register_error_handlers(app: FastAPI) -> None:
    """Install the teamgate error handler on a FastAPI application."""

    @app.exception_handler(TeamgateError)
    async def teamgate_error_handler(request: Request, exc: TeamgateError):
        http_exc = map_teamgate_error(exc)
        if http_exc.status_code >= 500:
            logger.error("%s on %s %s: %s", exc.code, request.method, request.url.path, exc)
        return JSONResponse(status_code=http_exc.status_code, content=http_exc.detail)
