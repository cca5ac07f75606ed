# app/core/errors.py
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A call to the data backend failed.

    ``message`` is safe to show to the user; the original exception is kept
    as ``__cause__`` and has already been logged.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TicketConflictError(Exception):
    def __init__(self, ticket_id: int):
        super().__init__(f"Ticket {ticket_id} already exists")
        self.ticket_id = ticket_id


async def backend_error_handler(request: Request, exc: BackendError):
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=502, content={"detail": exc.message})


async def ticket_conflict_handler(request: Request, exc: TicketConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


__all__ = [
    "BackendError",
    "TicketConflictError",
    "backend_error_handler",
    "ticket_conflict_handler",
]
