# app/ticket/routes.py
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from app.ticket.backends import TicketBackend, get_ticket_backend
from app.ticket.lifecycle import most_recent
from app.ticket.schemas import (
    BulkIds,
    BulkResult,
    BulkStatusUpdate,
    TicketCreate,
    TicketFilters,
    TicketOut,
    TicketUpdate,
)

router = APIRouter(prefix="/tickets", tags=["Tickets"])


@router.post("/", response_model=TicketOut, status_code=201)
def create(ticket: TicketCreate, backend: TicketBackend = Depends(get_ticket_backend)):
    try:
        return backend.create_ticket(ticket)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.get("/", response_model=list[TicketOut])
def list_all(backend: TicketBackend = Depends(get_ticket_backend)):
    return backend.list_tickets()


@router.post("/search", response_model=list[TicketOut])
def search(filters: TicketFilters, backend: TicketBackend = Depends(get_ticket_backend)):
    return backend.search(filters)


@router.get("/recent", response_model=list[TicketOut])
def recent(
    limit: int = Query(default=5, ge=1, le=100),
    backend: TicketBackend = Depends(get_ticket_backend),
):
    return most_recent(backend.list_tickets(), limit)


@router.get("/tags/{kind}", response_model=list[str])
def tags(kind: Literal["product", "category"], backend: TicketBackend = Depends(get_ticket_backend)):
    return backend.unique_tags(kind)


@router.post("/bulk-delete", response_model=BulkResult)
def bulk_delete(body: BulkIds, backend: TicketBackend = Depends(get_ticket_backend)):
    return BulkResult(affected=backend.bulk_delete(body.ids))


@router.post("/bulk-status", response_model=BulkResult)
def bulk_status(body: BulkStatusUpdate, backend: TicketBackend = Depends(get_ticket_backend)):
    return BulkResult(affected=backend.bulk_update_status(body.ids, body.status))


@router.get("/{ticket_id}", response_model=TicketOut)
def get(ticket_id: str, backend: TicketBackend = Depends(get_ticket_backend)):
    ticket = backend.get_ticket(ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


@router.put("/{ticket_id}", response_model=TicketOut)
def update(ticket_id: str, ticket: TicketUpdate, backend: TicketBackend = Depends(get_ticket_backend)):
    try:
        updated = backend.update_ticket(ticket_id, ticket)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    if not updated:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return updated


@router.delete("/{ticket_id}", response_model=TicketOut)
def delete(ticket_id: str, backend: TicketBackend = Depends(get_ticket_backend)):
    deleted = backend.delete_ticket(ticket_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return deleted
