# helpdesk/utils/errors.py
"""
Domain errors raised by the services and converted into the response
envelope at the request boundary.

Every error carries a machine-readable ``code``, a list of human-readable
``details`` and the HTTP status the router should answer with.
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class HelpdeskError(Exception):
    code = "INTERNAL_SERVER_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "There has been an internal server error"

    def __init__(self, *details: str, code: Optional[str] = None):
        self.details: List[str] = list(details) or [self.default_detail]
        if code is not None:
            self.code = code
        super().__init__("; ".join(self.details))


class Unauthenticated(HelpdeskError):
    code = "UNAUTHENTICATED"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Invalid or expired token"


class Forbidden(HelpdeskError):
    code = "FORBIDDEN"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this operation"


class NotFound(HelpdeskError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class Conflict(HelpdeskError):
    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class InvalidStatus(HelpdeskError):
    code = "INVALID_TICKET_STATUS"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Ticket is not in a valid status for this action"


class InvalidAction(HelpdeskError):
    code = "INVALID_ACTION"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Action is not allowed"


class InvalidUserType(HelpdeskError):
    code = "INVALID_USER_TYPE"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "User type is not authorized to perform actions on tickets"


class RatingRequired(HelpdeskError):
    code = "RATING_REQUIRED"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Rating (1-5) is required when closing a resolved ticket"


class InvalidTarget(HelpdeskError):
    code = "INVALID_TARGET_USER"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Feedback can only be given to HR or IT personnel"


class NoMatchingTickets(HelpdeskError):
    code = "NO_MATCHING_TICKETS"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "No resolved tickets of the matching type"


class ValidationError(HelpdeskError):
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class InternalError(HelpdeskError):
    pass


def error_body(code: str, details: List[str]) -> dict:
    return {
        "success": False,
        "data": None,
        "error": {"code": code, "details": details},
    }


async def helpdesk_error_handler(request: Request, exc: HelpdeskError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.details}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.code} {exc.details}")
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.details),
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        details.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    logger.warning(f"{request.method} {request.url.path} validation error: {details}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(ValidationError.code, details),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"{request.method} {request.url.path} database error")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(InternalError.code, [InternalError.default_detail]),
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(HelpdeskError, helpdesk_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
