# app/feedback/schemas.py
from datetime import date, datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from app.ticket.identifiers import BIGINT_MAX, BIGINT_MIN
from app.ticket.schemas import DateRange

Platform = Literal["Intercom", "Discord", "X", "Zoom (Analyst Call)"]

DEFAULT_PLATFORM: Platform = "Intercom"


def check_intercom_ticket(platform: str | None, ticket_id: int | None) -> None:
    if platform == "Intercom" and ticket_id is None:
        raise ValueError("Ticket ID is required for Intercom platform")


class FeedbackCreate(BaseModel):
    ticket_id: int | None = Field(default=None, ge=BIGINT_MIN, le=BIGINT_MAX)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    platform: Platform
    product: str | None = None
    description: str | None = None
    core_team_acknowledgement: bool | None = None
    shipped: bool | None = None
    shipping_date: date | None = None

    @model_validator(mode="after")
    def intercom_needs_ticket(self):
        check_intercom_ticket(self.platform, self.ticket_id)
        return self


class FeedbackUpdate(BaseModel):
    ticket_id: int | None = Field(default=None, ge=BIGINT_MIN, le=BIGINT_MAX)
    platform: Platform | None = None
    product: str | None = None
    description: str | None = None
    core_team_acknowledgement: bool | None = None
    shipped: bool | None = None
    shipping_date: date | None = None


class FeedbackOut(BaseModel):
    id: str
    ticket_id: int | None = None
    created_at: datetime
    platform: str
    product: str
    description: str
    core_team_acknowledgement: bool | None = None
    shipped: bool | None = None
    shipping_date: date | None = None


class FeedbackFilters(BaseModel):
    search_query: str | None = None
    platform: list[Platform] = Field(default_factory=list)
    product: list[str] = Field(default_factory=list)
    core_team_acknowledgement: bool | None = None
    shipped: bool | None = None
    date_range: DateRange | None = None


class FeedbackBulkIds(BaseModel):
    ids: list[str] = Field(..., min_length=1)
