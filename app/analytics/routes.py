# app/analytics/routes.py
from datetime import date

from fastapi import APIRouter, Depends, Query
from app.analytics import services as analytics_service
from app.analytics.schemas import TicketSummary
from app.ticket.backends import TicketBackend, get_ticket_backend

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/tickets", response_model=TicketSummary)
def ticket_summary(
    start: date | None = Query(default=None, description="First creation day included"),
    end: date | None = Query(default=None, description="Last creation day included"),
    backend: TicketBackend = Depends(get_ticket_backend),
):
    return analytics_service.summarize(backend.list_tickets(), start, end)
