# app/ticket/backends.py
from typing import Protocol

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import DataSource, Settings, get_settings
from app.core.database import get_db
from app.ticket import services as ticket_service
from app.ticket.notion import NotionTicketBackend
from app.ticket.schemas import TicketCreate, TicketFilters, TicketOut, TicketUpdate


class TicketBackend(Protocol):
    def list_tickets(self) -> list[TicketOut]: ...
    def get_ticket(self, ticket_id: str) -> TicketOut | None: ...
    def create_ticket(self, payload: TicketCreate) -> TicketOut: ...
    def update_ticket(self, ticket_id: str, payload: TicketUpdate) -> TicketOut | None: ...
    def delete_ticket(self, ticket_id: str) -> TicketOut | None: ...
    def bulk_delete(self, ids: list[str]) -> int: ...
    def bulk_update_status(self, ids: list[str], status: str) -> int: ...
    def search(self, filters: TicketFilters) -> list[TicketOut]: ...
    def unique_tags(self, kind: str) -> list[str]: ...


class SqlTicketBackend:
    """Tickets in the ``Active Issues`` table."""

    def __init__(self, db: Session):
        self.db = db

    def list_tickets(self):
        return ticket_service.get_all_tickets(self.db)

    def get_ticket(self, ticket_id):
        return ticket_service.get_ticket(self.db, ticket_id)

    def create_ticket(self, payload):
        return ticket_service.create_ticket(self.db, payload)

    def update_ticket(self, ticket_id, payload):
        return ticket_service.update_ticket(self.db, ticket_id, payload)

    def delete_ticket(self, ticket_id):
        return ticket_service.delete_ticket(self.db, ticket_id)

    def bulk_delete(self, ids):
        return ticket_service.bulk_delete_tickets(self.db, ids)

    def bulk_update_status(self, ids, status):
        return ticket_service.bulk_update_status(self.db, ids, status)

    def search(self, filters):
        return ticket_service.search_tickets(self.db, filters)

    def unique_tags(self, kind):
        return ticket_service.get_unique_tags(self.db, kind)


def active_data_source(request: Request, settings: Settings) -> DataSource:
    return getattr(request.app.state, "data_source", None) or settings.DATA_SOURCE


def get_ticket_backend(
    request: Request,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> TicketBackend:
    if active_data_source(request, settings) == "notion":
        return NotionTicketBackend.from_settings(settings)
    return SqlTicketBackend(db)


__all__ = ["TicketBackend", "SqlTicketBackend", "active_data_source", "get_ticket_backend"]
