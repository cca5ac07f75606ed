# app/ticket/schemas.py
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

TicketStatus = Literal[
    "Not Started",
    "Reviewed by Dev",
    "Waiting on Mod",
    "Under Review",
    "In Dev",
    "In QA",
    "Waiting on User",
    "Under Review - Sumsub",
    "Under Review - Provenance",
    "Under Review - Rain",
    "Under Review - Core Team",
    "Resolved",
]

Severity = Literal["SEV-1", "SEV-2", "SEV-3", "SEV-4", "SEV-5"]

RESOLVED: TicketStatus = "Resolved"
DEFAULT_STATUS: TicketStatus = "Not Started"
DEFAULT_SEVERITY: Severity = "SEV-3"


class TicketBase(BaseModel):
    status: TicketStatus = DEFAULT_STATUS
    core_team_comments: str = ""
    issue_description: str = Field(..., min_length=1)
    contact_info: str = Field(..., min_length=1)
    product_tags: list[str] = Field(default_factory=list)
    category_tags: list[str] = Field(default_factory=list)
    severity: Severity = DEFAULT_SEVERITY

    @field_validator("issue_description", "contact_info")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class TicketCreate(TicketBase):
    # required by the relational backend, generated by Notion when missing
    ticket_id: str | None = None

    @field_validator("ticket_id")
    @classmethod
    def strip_ticket_id(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class TicketUpdate(BaseModel):
    ticket_id: str | None = None
    status: TicketStatus | None = None
    core_team_comments: str | None = None
    issue_description: str | None = None
    contact_info: str | None = None
    product_tags: list[str] | None = None
    category_tags: list[str] | None = None
    severity: Severity | None = None


class TicketOut(BaseModel):
    id: str
    ticket_id: str
    status: str
    date_created: datetime
    date_resolved: date | None = None
    core_team_comments: str
    issue_description: str
    contact_info: str
    product_tags: list[str]
    category_tags: list[str]
    severity: str
    created_at: datetime
    updated_at: datetime


class DateRange(BaseModel):
    start: date | None = None
    end: date | None = None


class TicketFilters(BaseModel):
    search_query: str | None = None
    status: list[TicketStatus] = Field(default_factory=list)
    severity: list[Severity] = Field(default_factory=list)
    product_tags: list[str] = Field(default_factory=list)
    category_tags: list[str] = Field(default_factory=list)
    date_range: DateRange | None = None


class BulkIds(BaseModel):
    ids: list[str] = Field(..., min_length=1)


class BulkStatusUpdate(BulkIds):
    status: TicketStatus


class BulkResult(BaseModel):
    affected: int
