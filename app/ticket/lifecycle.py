# app/ticket/lifecycle.py
from datetime import date, datetime, timezone

from app.ticket.schemas import RESOLVED


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def resolution_date(status: str | None, today: date | None = None) -> date | None:
    """A ticket carries a resolution date exactly while it is Resolved."""
    if status == RESOLVED:
        return today or utc_today()
    return None


def most_recent(tickets, limit: int = 5):
    """Highest numeric ticket id first, newest creation time breaking ties."""

    def key(ticket):
        try:
            number = int(ticket.ticket_id)
        except (TypeError, ValueError):
            number = 0
        return number, ticket.date_created.timestamp()

    return sorted(tickets, key=key, reverse=True)[:limit]


__all__ = ["utc_today", "resolution_date", "most_recent"]
