# app/settings/schemas.py
from pydantic import BaseModel

from app.core.config import DataSource


class DataSourceUpdate(BaseModel):
    data_source: DataSource


class SettingsOut(BaseModel):
    data_source: DataSource
    is_configured: bool
    notion_configured: bool
    sql_configured: bool
