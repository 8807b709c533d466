"""
Exception handlers for the TicketDesk API.

Maps the error taxonomy to HTTP responses with one body shape:
``{"error": true, "message": ..., "status_code": ...}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError

from ..errors import (
    AuthenticationRequiredError,
    BackendUnavailableError,
    LabelAssignmentError,
    LabelPermissionError,
    TicketDeskError,
    is_not_found,
)

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, **extra) -> JSONResponse:
    content = {"error": True, "message": message, "status_code": status_code}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


async def ticketdesk_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle errors raised by TicketDesk itself."""
    if isinstance(exc, AuthenticationRequiredError):
        return _error_response(status.HTTP_401_UNAUTHORIZED, str(exc))
    if is_not_found(exc):
        return _error_response(status.HTTP_404_NOT_FOUND, str(exc))
    if isinstance(exc, LabelPermissionError):
        return _error_response(status.HTTP_403_FORBIDDEN, str(exc), ticket_id=exc.ticket_id)
    if isinstance(exc, LabelAssignmentError):
        return _error_response(status.HTTP_502_BAD_GATEWAY, str(exc), ticket_id=exc.ticket_id)
    if isinstance(exc, BackendUnavailableError):
        logger.error(f"❌ Backend unavailable on {request.url.path}: {exc}")
        return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc))

    logger.error(f"❌ Unhandled TicketDesk error on {request.url.path}: {exc}")
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def postgrest_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Surface remote failures with the message Supabase returned."""
    if not isinstance(exc, APIError):
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

    if is_not_found(exc):
        return _error_response(status.HTTP_404_NOT_FOUND, "Not found", code=exc.code)

    logger.error(f"❌ Supabase error on {request.url.path}: [{exc.code}] {exc.message}")
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message or str(exc), code=exc.code)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TicketDeskError, ticketdesk_exception_handler)
    app.add_exception_handler(APIError, postgrest_exception_handler)
