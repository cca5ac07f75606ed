# app/analytics/services.py
"""Summary statistics over tickets, computed in memory after fetching."""
from collections import Counter
from datetime import date
from typing import Iterable

from app.analytics.schemas import CountItem, MonthlyTrend, TicketSummary
from app.ticket.filters import in_date_range
from app.ticket.schemas import RESOLVED, DateRange, TicketOut


def _counts(values: Iterable[str]) -> list[CountItem]:
    return [CountItem(name=name, value=count) for name, count in Counter(values).most_common()]


def resolution_days(ticket: TicketOut) -> int | None:
    if ticket.status != RESOLVED or ticket.date_resolved is None:
        return None
    return (ticket.date_resolved - ticket.date_created.date()).days


def monthly_trend(tickets: Iterable[TicketOut]) -> list[MonthlyTrend]:
    months: dict[str, MonthlyTrend] = {}
    for ticket in tickets:
        created = ticket.date_created
        key = created.strftime("%Y-%m")
        if key not in months:
            months[key] = MonthlyTrend(month=key, label=created.strftime("%b %Y"), created=0, resolved=0)
        months[key].created += 1
        if ticket.status == RESOLVED:
            months[key].resolved += 1
    return [months[k] for k in sorted(months)]


def summarize(tickets: Iterable[TicketOut], start: date | None = None, end: date | None = None) -> TicketSummary:
    """Summary over tickets created within ``start``..``end`` (inclusive).

    The average resolution time is taken over resolved tickets that carry a
    resolution date; resolved tickets without one still count as resolved.
    """
    date_range = DateRange(start=start, end=end)
    tickets = [t for t in tickets if in_date_range(t.date_created, date_range)]

    total = len(tickets)
    resolved = sum(1 for t in tickets if t.status == RESOLVED)
    durations = [d for d in (resolution_days(t) for t in tickets) if d is not None]

    return TicketSummary(
        total_tickets=total,
        resolved_tickets=resolved,
        resolution_rate=(resolved / total) * 100 if total else 0.0,
        avg_resolution_days=sum(durations) / len(durations) if durations else 0.0,
        status=_counts(t.status for t in tickets),
        severity=_counts(t.severity for t in tickets),
        monthly_trend=monthly_trend(tickets),
    )
