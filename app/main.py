# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.analytics.routes import router as analytics_router
from app.core.config import get_settings
from app.core.database import init_db
from app.core.errors import (
    BackendError,
    TicketConflictError,
    backend_error_handler,
    ticket_conflict_handler,
)
from app.feedback.routes import router as feedback_router
from app.settings.routes import router as settings_router
from app.ticket.routes import router as ticket_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)

init_db()

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESC,
    version=settings.APP_VERSION,
)
app.state.data_source = settings.DATA_SOURCE

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(BackendError, backend_error_handler)
app.add_exception_handler(TicketConflictError, ticket_conflict_handler)

# Routers
app.include_router(ticket_router)
app.include_router(feedback_router)
app.include_router(analytics_router)
app.include_router(settings_router)

logger.info(f"{settings.APP_NAME} ready, ticket data source: {settings.DATA_SOURCE}")


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
