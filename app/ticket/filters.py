# app/ticket/filters.py
"""In-memory evaluation of ticket search filters.

Every criterion is optional; a ticket matches when it satisfies all of the
ones that are set.
"""
from datetime import date, datetime, time, timedelta
from typing import Iterable

from app.ticket.schemas import DateRange, TicketFilters, TicketOut


def day_bounds(date_range: DateRange | None) -> tuple[datetime | None, datetime | None]:
    """Half-open datetime bounds ``[start, end)`` covering whole days inclusively."""
    if date_range is None:
        return None, None
    lower = datetime.combine(date_range.start, time.min) if date_range.start else None
    upper = datetime.combine(date_range.end + timedelta(days=1), time.min) if date_range.end else None
    return lower, upper


def in_date_range(value: datetime | date, date_range: DateRange | None) -> bool:
    if date_range is None:
        return True
    day = value.date() if isinstance(value, datetime) else value
    if date_range.start and day < date_range.start:
        return False
    if date_range.end and day > date_range.end:
        return False
    return True


def any_tag(wanted: Iterable[str], tags: Iterable[str]) -> bool:
    wanted = set(wanted)
    return not wanted or bool(wanted.intersection(tags))


def matches_search(ticket: TicketOut, query: str | None) -> bool:
    query = (query or "").strip().lower()
    if not query:
        return True
    fields = (
        ticket.issue_description,
        ticket.core_team_comments,
        ticket.contact_info,
        ticket.ticket_id,
    )
    return any(query in (value or "").lower() for value in fields)


def matches(ticket: TicketOut, filters: TicketFilters) -> bool:
    if filters.status and ticket.status not in filters.status:
        return False
    if filters.severity and ticket.severity not in filters.severity:
        return False
    if not any_tag(filters.product_tags, ticket.product_tags):
        return False
    if not any_tag(filters.category_tags, ticket.category_tags):
        return False
    if not matches_search(ticket, filters.search_query):
        return False
    return in_date_range(ticket.date_created, filters.date_range)


def filter_by_tags(tickets: Iterable[TicketOut], filters: TicketFilters) -> list[TicketOut]:
    """Tag criteria only; used after the scalar criteria ran in the database."""
    return [
        t for t in tickets
        if any_tag(filters.product_tags, t.product_tags)
        and any_tag(filters.category_tags, t.category_tags)
    ]


def apply_filters(tickets: Iterable[TicketOut], filters: TicketFilters) -> list[TicketOut]:
    return [t for t in tickets if matches(t, filters)]


__all__ = [
    "day_bounds",
    "in_date_range",
    "any_tag",
    "matches_search",
    "matches",
    "filter_by_tags",
    "apply_filters",
]
