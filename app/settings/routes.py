# app/settings/routes.py
import logging

from fastapi import APIRouter, Depends, Request
from app.core.config import Settings, get_settings
from app.settings.schemas import DataSourceUpdate, SettingsOut
from app.ticket.backends import active_data_source

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


def _describe(request: Request, settings: Settings) -> SettingsOut:
    source = active_data_source(request, settings)
    return SettingsOut(
        data_source=source,
        is_configured=settings.is_configured(source),
        notion_configured=settings.is_configured("notion"),
        sql_configured=settings.is_configured("sql"),
    )


@router.get("/", response_model=SettingsOut)
def read(request: Request, settings: Settings = Depends(get_settings)):
    return _describe(request, settings)


@router.put("/data-source", response_model=SettingsOut)
def set_data_source(body: DataSourceUpdate, request: Request, settings: Settings = Depends(get_settings)):
    # process wide; restarts fall back to DATA_SOURCE
    request.app.state.data_source = body.data_source
    logger.info(f"Ticket data source switched to {body.data_source}")
    return _describe(request, settings)
