# tests/test_filters.py
from datetime import date, datetime

from app.ticket.filters import apply_filters, day_bounds, in_date_range, matches
from app.ticket.lifecycle import most_recent, resolution_date
from app.ticket.schemas import DateRange, TicketFilters, TicketOut


def make_ticket(ticket_id="1", **overrides):
    created = overrides.pop("date_created", datetime(2024, 2, 10, 12, 0))
    data = dict(
        id=ticket_id,
        ticket_id=ticket_id,
        status="Not Started",
        date_created=created,
        core_team_comments="",
        issue_description="Swap failed",
        contact_info="0xabc",
        product_tags=[],
        category_tags=[],
        severity="SEV-3",
        created_at=created,
        updated_at=created,
    )
    data.update(overrides)
    return TicketOut(**data)


def test_empty_filters_match_everything():
    assert matches(make_ticket(), TicketFilters())


def test_criteria_are_combined_with_and():
    ticket = make_ticket(status="In QA", severity="SEV-1", product_tags=["Cash"])
    assert matches(ticket, TicketFilters(status=["In QA"], severity=["SEV-1"], product_tags=["Cash", "Earn"]))
    assert not matches(ticket, TicketFilters(status=["In QA"], severity=["SEV-2"]))
    assert not matches(ticket, TicketFilters(status=["In QA"], product_tags=["Earn"]))


def test_search_covers_text_fields_and_ticket_id():
    ticket = make_ticket("TKT-9", core_team_comments="Escalated", contact_info="Alice@Mail")
    assert matches(ticket, TicketFilters(search_query="swap"))
    assert matches(ticket, TicketFilters(search_query="ESCALATED"))
    assert matches(ticket, TicketFilters(search_query="alice@"))
    assert matches(ticket, TicketFilters(search_query="tkt-9"))
    assert not matches(ticket, TicketFilters(search_query="refund"))


def test_date_range_bounds_are_inclusive_days():
    date_range = DateRange(start=date(2024, 2, 10), end=date(2024, 2, 10))
    assert in_date_range(datetime(2024, 2, 10, 0, 0), date_range)
    assert in_date_range(datetime(2024, 2, 10, 23, 59), date_range)
    assert not in_date_range(datetime(2024, 2, 11, 0, 0), date_range)
    assert in_date_range(datetime(2020, 1, 1), None)

    lower, upper = day_bounds(date_range)
    assert lower == datetime(2024, 2, 10)
    assert upper == datetime(2024, 2, 11)
    assert day_bounds(None) == (None, None)


def test_apply_filters_keeps_order():
    tickets = [make_ticket("3", category_tags=["KYC"]), make_ticket("1"), make_ticket("2", category_tags=["KYC"])]
    result = apply_filters(tickets, TicketFilters(category_tags=["KYC"]))
    assert [t.id for t in result] == ["3", "2"]


def test_resolution_date_only_for_resolved():
    assert resolution_date("Resolved", today=date(2024, 1, 5)) == date(2024, 1, 5)
    assert resolution_date("In Dev", today=date(2024, 1, 5)) is None
    assert resolution_date(None) is None


def test_most_recent_prefers_ticket_number_then_date():
    tickets = [
        make_ticket("5", date_created=datetime(2024, 1, 1)),
        make_ticket("TKT-a", date_created=datetime(2024, 6, 1)),
        make_ticket("TKT-b", date_created=datetime(2024, 7, 1)),
        make_ticket("9", date_created=datetime(2023, 1, 1)),
    ]
    assert [t.id for t in most_recent(tickets, 3)] == ["9", "5", "TKT-b"]
