# app/ticket/notion.py
"""Ticket backend storing each ticket as a page in a Notion database."""
import logging
import secrets
import string
import time
from datetime import datetime, timezone

import httpx
from notion_client import APIErrorCode, APIResponseError, Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError
from notion_client.helpers import collect_paginated_api

from app.core.config import Settings
from app.core.errors import BackendError
from app.ticket.filters import apply_filters
from app.ticket.lifecycle import resolution_date
from app.ticket.schemas import (
    DEFAULT_SEVERITY,
    DEFAULT_STATUS,
    TicketCreate,
    TicketFilters,
    TicketOut,
    TicketUpdate,
)

logger = logging.getLogger(__name__)

NOTION_ERRORS = (APIResponseError, HTTPResponseError, RequestTimeoutError, httpx.HTTPError)

TICKET_ID = "Ticket ID"
STATUS = "Status"
SEVERITY = "Severity"
DATE_CREATED = "Date Created"
DATE_RESOLVED = "Date Resolved"
COMMENTS = "Core Team Comments"
DESCRIPTION = "Issue Description"
CONTACT = "Wallet Address/Safe/Cash ID/Email"
LEGACY_CONTACT = "Contact Info"
PRODUCT_TAGS = "Product Tags"
CATEGORY_TAGS = "Category Tags"

TEXT_PROPERTIES = {
    "core_team_comments": COMMENTS,
    "issue_description": DESCRIPTION,
    "contact_info": CONTACT,
}
SELECT_PROPERTIES = {"status": STATUS, "severity": SEVERITY}
TAG_PROPERTIES = {"product_tags": PRODUCT_TAGS, "category_tags": CATEGORY_TAGS}

SORT_NEWEST = [{"property": DATE_CREATED, "direction": "descending"}]


def generate_ticket_id() -> str:
    suffix = "".join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(4))
    return f"TKT-{int(time.time() * 1000)}-{suffix}"


def _plain_text(prop: dict | None, kind: str = "rich_text") -> str:
    items = (prop or {}).get(kind) or []
    return items[0].get("plain_text", "") if items else ""


def _rich_text(content: str) -> dict:
    return {"rich_text": [{"text": {"content": content or ""}}]}


def _parse_time(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def page_to_ticket(page: dict) -> TicketOut:
    props = page.get("properties", {})
    date_created = ((props.get(DATE_CREATED) or {}).get("date") or {}).get("start")
    date_resolved = ((props.get(DATE_RESOLVED) or {}).get("date") or {}).get("start")
    created = _parse_time(date_created)

    return TicketOut(
        id=page["id"],
        ticket_id=_plain_text(props.get(TICKET_ID), "title"),
        status=((props.get(STATUS) or {}).get("select") or {}).get("name") or DEFAULT_STATUS,
        date_created=created,
        date_resolved=_parse_time(date_resolved).date() if date_resolved else None,
        core_team_comments=_plain_text(props.get(COMMENTS)),
        issue_description=_plain_text(props.get(DESCRIPTION)),
        contact_info=_plain_text(props.get(CONTACT)) or _plain_text(props.get(LEGACY_CONTACT)),
        product_tags=[t["name"] for t in (props.get(PRODUCT_TAGS) or {}).get("multi_select") or []],
        category_tags=[t["name"] for t in (props.get(CATEGORY_TAGS) or {}).get("multi_select") or []],
        severity=((props.get(SEVERITY) or {}).get("select") or {}).get("name") or DEFAULT_SEVERITY,
        created_at=_parse_time(page.get("created_time")) if page.get("created_time") else created,
        updated_at=_parse_time(page.get("last_edited_time")) if page.get("last_edited_time") else created,
    )


def ticket_properties(fields: dict) -> dict:
    """Notion page properties for the supplied ticket fields only."""
    properties = {}
    for name, prop in TEXT_PROPERTIES.items():
        if name in fields:
            properties[prop] = _rich_text(fields[name])
    for name, prop in SELECT_PROPERTIES.items():
        if name in fields:
            properties[prop] = {"select": {"name": fields[name]}}
    for name, prop in TAG_PROPERTIES.items():
        if name in fields:
            properties[prop] = {"multi_select": [{"name": tag} for tag in fields[name] or []]}
    if fields.get("ticket_id"):
        properties[TICKET_ID] = {"title": [{"text": {"content": fields["ticket_id"]}}]}
    if "status" in fields:
        resolved = resolution_date(fields["status"])
        properties[DATE_RESOLVED] = {"date": {"start": resolved.isoformat()} if resolved else None}
    return properties


def search_filter(filters: TicketFilters) -> dict | None:
    """The part of the filters Notion can evaluate server side."""
    clauses = []
    if filters.status:
        clauses.append({"or": [{"property": STATUS, "select": {"equals": s}} for s in filters.status]})
    if filters.severity:
        clauses.append({"or": [{"property": SEVERITY, "select": {"equals": s}} for s in filters.severity]})
    if filters.date_range and filters.date_range.start:
        clauses.append({"property": DATE_CREATED, "date": {"on_or_after": filters.date_range.start.isoformat()}})
    if filters.date_range and filters.date_range.end:
        clauses.append({"property": DATE_CREATED, "date": {"on_or_before": filters.date_range.end.isoformat()}})
    return {"and": clauses} if clauses else None


class NotionTicketBackend:
    def __init__(self, client, database_id: str | None):
        self.client = client
        self.database_id = database_id

    @classmethod
    def from_settings(cls, settings: Settings) -> "NotionTicketBackend":
        if not settings.NOTION_TOKEN:
            raise BackendError("Notion token not configured. Set NOTION_TOKEN to use the Notion backend.")
        return cls(Client(auth=settings.NOTION_TOKEN), settings.NOTION_DATABASE_ID)

    def _database(self) -> str:
        if not self.database_id:
            raise BackendError("Notion database ID not configured. Set NOTION_DATABASE_ID to use the Notion backend.")
        return self.database_id

    def _query(self, message: str, **kwargs) -> list[TicketOut]:
        database_id = self._database()
        kwargs = {k: v for k, v in kwargs.items() if v is not None}
        try:
            pages = collect_paginated_api(
                self.client.databases.query, database_id=database_id, sorts=SORT_NEWEST, **kwargs
            )
        except NOTION_ERRORS as exc:
            logger.exception(message)
            raise BackendError(message) from exc
        return [page_to_ticket(p) for p in pages]

    def _retrieve(self, page_id: str) -> dict | None:
        try:
            page = self.client.pages.retrieve(page_id=page_id)
        except APIResponseError as exc:
            if exc.code in (APIErrorCode.ObjectNotFound, APIErrorCode.ValidationError):
                return None
            logger.exception("Failed to fetch ticket from Notion")
            raise BackendError("Failed to fetch ticket from Notion") from exc
        except NOTION_ERRORS as exc:
            logger.exception("Failed to fetch ticket from Notion")
            raise BackendError("Failed to fetch ticket from Notion") from exc
        if page.get("archived") or page.get("in_trash"):
            return None
        return page

    def _update(self, page_id: str, message: str, **kwargs) -> dict:
        try:
            return self.client.pages.update(page_id=page_id, **kwargs)
        except NOTION_ERRORS as exc:
            logger.exception(message)
            raise BackendError(message) from exc

    def list_tickets(self) -> list[TicketOut]:
        return self._query("Failed to fetch tickets from Notion")

    def get_ticket(self, ticket_id: str) -> TicketOut | None:
        page = self._retrieve(ticket_id)
        return page_to_ticket(page) if page else None

    def create_ticket(self, payload: TicketCreate) -> TicketOut:
        database_id = self._database()
        fields = payload.model_dump()
        # user supplied ids are kept, otherwise one is generated
        fields["ticket_id"] = fields.get("ticket_id") or generate_ticket_id()
        properties = ticket_properties(fields)
        properties[DATE_CREATED] = {"date": {"start": datetime.now(timezone.utc).isoformat()}}
        try:
            page = self.client.pages.create(parent={"database_id": database_id}, properties=properties)
        except NOTION_ERRORS as exc:
            logger.exception("Failed to create ticket in Notion")
            raise BackendError("Failed to create ticket in Notion. Please check your configuration.") from exc
        logger.info(f"Created Notion ticket {fields['ticket_id']}")
        return page_to_ticket(page)

    def update_ticket(self, ticket_id: str, payload: TicketUpdate) -> TicketOut | None:
        if self._retrieve(ticket_id) is None:
            return None
        fields = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
        page = self._update(ticket_id, "Failed to update ticket in Notion", properties=ticket_properties(fields))
        return page_to_ticket(page)

    def delete_ticket(self, ticket_id: str) -> TicketOut | None:
        page = self._retrieve(ticket_id)
        if page is None:
            return None
        self._update(ticket_id, "Failed to delete ticket in Notion", archived=True)
        logger.info(f"Archived Notion ticket {ticket_id}")
        return page_to_ticket(page)

    def bulk_delete(self, ids: list[str]) -> int:
        for page_id in ids:
            self._update(page_id, "Failed to delete tickets in Notion", archived=True)
        return len(ids)

    def bulk_update_status(self, ids: list[str], status: str) -> int:
        properties = ticket_properties({"status": status})
        for page_id in ids:
            self._update(page_id, "Failed to update ticket status in Notion", properties=properties)
        return len(ids)

    def search(self, filters: TicketFilters) -> list[TicketOut]:
        tickets = self._query("Failed to search tickets in Notion", filter=search_filter(filters))
        # text and tag criteria are not expressible in the Notion query
        return apply_filters(tickets, filters)

    def unique_tags(self, kind: str) -> list[str]:
        if not self.database_id:
            logger.warning(f"Missing Notion credentials for {kind} tags")
            return []
        prop = PRODUCT_TAGS if kind == "product" else CATEGORY_TAGS
        try:
            database = self.client.databases.retrieve(database_id=self.database_id)
        except NOTION_ERRORS:
            logger.warning(f"Error fetching {kind} tags from Notion", exc_info=True)
            return []
        options = ((database.get("properties", {}).get(prop) or {}).get("multi_select") or {}).get("options") or []
        return sorted(o["name"] for o in options)


__all__ = [
    "NotionTicketBackend",
    "generate_ticket_id",
    "page_to_ticket",
    "ticket_properties",
    "search_filter",
]
