# app/ticket/services.py
import logging
from contextlib import contextmanager
from datetime import datetime, timezone

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import BackendError, TicketConflictError
from app.core.tags import decode_tags, encode_tags, unique_tags
from app.ticket.filters import day_bounds, filter_by_tags
from app.ticket.identifiers import fits_bigint, parse_ticket_id
from app.ticket.lifecycle import resolution_date
from app.ticket.models import Ticket
from app.ticket.schemas import (
    DEFAULT_SEVERITY,
    DEFAULT_STATUS,
    TicketCreate,
    TicketFilters,
    TicketOut,
    TicketUpdate,
)

logger = logging.getLogger(__name__)

# API field -> "Active Issues" column
COLUMNS = {
    "status": "status",
    "issue_description": "issue_description",
    "core_team_comments": "core_team_comment",
    "contact_info": "wallet_address_safe_email",
    "severity": "severity",
}
TAG_COLUMNS = {"product_tags": "product", "category_tags": "category"}


@contextmanager
def _guard(db: Session, message: str):
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(message)
        raise BackendError(message) from exc


def _key(ticket_id: str) -> int | None:
    try:
        key = int(ticket_id)
    except (TypeError, ValueError):
        return None
    # a key the column cannot hold matches no row
    return key if fits_bigint(key) else None


def _keys(ids: list[str]) -> list[int]:
    return [k for k in (_key(i) for i in ids) if k is not None]


def to_ticket(row: Ticket) -> TicketOut:
    created = row.created_at or datetime.now(timezone.utc)
    return TicketOut(
        id=str(row.ticket_id),
        ticket_id=str(row.ticket_id),
        status=row.status or DEFAULT_STATUS,
        date_created=created,
        date_resolved=row.date_of_resolved,
        core_team_comments=row.core_team_comment or "",
        issue_description=row.issue_description or "",
        contact_info=row.wallet_address_safe_email or "",
        product_tags=decode_tags(row.product),
        category_tags=decode_tags(row.category),
        severity=row.severity or DEFAULT_SEVERITY,
        created_at=created,
        updated_at=created,
    )


def to_columns(fields: dict) -> dict:
    """Translate API field names to column values, encoding tag lists."""
    values = {COLUMNS[name]: value for name, value in fields.items() if name in COLUMNS}
    for name, column in TAG_COLUMNS.items():
        if name in fields:
            values[column] = encode_tags(fields[name])
    return values


def _get_row(db: Session, ticket_id: str) -> Ticket | None:
    key = _key(ticket_id)
    if key is None:
        return None
    return db.query(Ticket).filter(Ticket.ticket_id == key).first()


def get_all_tickets(db: Session) -> list[TicketOut]:
    with _guard(db, "Failed to fetch tickets"):
        rows = db.query(Ticket).order_by(Ticket.created_at.desc()).all()
    return [to_ticket(r) for r in rows]


def get_ticket(db: Session, ticket_id: str) -> TicketOut | None:
    with _guard(db, "Failed to fetch ticket"):
        row = _get_row(db, ticket_id)
    return to_ticket(row) if row else None


def create_ticket(db: Session, payload: TicketCreate) -> TicketOut:
    key = parse_ticket_id(payload.ticket_id)
    with _guard(db, "Failed to create ticket"):
        if db.get(Ticket, key) is not None:
            raise TicketConflictError(key)
        db_ticket = Ticket(
            ticket_id=key,
            date_of_resolved=resolution_date(payload.status),
            created_at=datetime.now(timezone.utc),
            **to_columns(payload.model_dump(exclude={"ticket_id"})),
        )
        db.add(db_ticket)
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise TicketConflictError(key) from exc
        db.refresh(db_ticket)
    logger.info(f"Created ticket {key}")
    return to_ticket(db_ticket)


def update_ticket(db: Session, ticket_id: str, payload: TicketUpdate) -> TicketOut | None:
    fields = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    with _guard(db, "Failed to update ticket"):
        db_ticket = _get_row(db, ticket_id)
        if not db_ticket:
            return None

        new_id = fields.pop("ticket_id", None)
        if new_id and new_id.strip():
            new_key = parse_ticket_id(new_id)
            if new_key != db_ticket.ticket_id:
                if db.get(Ticket, new_key) is not None:
                    raise TicketConflictError(new_key)
                db_ticket.ticket_id = new_key

        for column, value in to_columns(fields).items():
            setattr(db_ticket, column, value)
        if fields.get("status"):
            db_ticket.date_of_resolved = resolution_date(fields["status"])

        db.commit()
        db.refresh(db_ticket)
    return to_ticket(db_ticket)


def delete_ticket(db: Session, ticket_id: str) -> TicketOut | None:
    with _guard(db, "Failed to delete ticket"):
        db_ticket = _get_row(db, ticket_id)
        if not db_ticket:
            return None
        deleted = to_ticket(db_ticket)
        db.delete(db_ticket)
        db.commit()
    logger.info(f"Deleted ticket {ticket_id}")
    return deleted


def bulk_delete_tickets(db: Session, ids: list[str]) -> int:
    with _guard(db, "Failed to delete tickets"):
        count = (
            db.query(Ticket)
            .filter(Ticket.ticket_id.in_(_keys(ids)))
            .delete(synchronize_session=False)
        )
        db.commit()
    logger.info(f"Bulk deleted {count} tickets")
    return count


def bulk_update_status(db: Session, ids: list[str], status: str) -> int:
    with _guard(db, "Failed to update ticket status"):
        count = (
            db.query(Ticket)
            .filter(Ticket.ticket_id.in_(_keys(ids)))
            .update(
                {Ticket.status: status, Ticket.date_of_resolved: resolution_date(status)},
                synchronize_session=False,
            )
        )
        db.commit()
    logger.info(f"Set status {status!r} on {count} tickets")
    return count


def search_tickets(db: Session, filters: TicketFilters) -> list[TicketOut]:
    query = db.query(Ticket)

    if filters.status:
        query = query.filter(Ticket.status.in_(filters.status))
    if filters.severity:
        query = query.filter(Ticket.severity.in_(filters.severity))

    text = (filters.search_query or "").strip()
    if text:
        conditions = [
            Ticket.issue_description.icontains(text, autoescape=True),
            Ticket.core_team_comment.icontains(text, autoescape=True),
            Ticket.wallet_address_safe_email.icontains(text, autoescape=True),
        ]
        if text.isdigit() and fits_bigint(int(text)):
            conditions.append(Ticket.ticket_id == int(text))
        query = query.filter(or_(*conditions))

    lower, upper = day_bounds(filters.date_range)
    if lower is not None:
        query = query.filter(Ticket.created_at >= lower)
    if upper is not None:
        query = query.filter(Ticket.created_at < upper)

    with _guard(db, "Failed to search tickets"):
        rows = query.order_by(Ticket.created_at.desc()).all()

    # tags live in JSON text columns, so they are matched after decoding
    return filter_by_tags((to_ticket(r) for r in rows), filters)


def get_unique_tags(db: Session, kind: str) -> list[str]:
    column = Ticket.product if kind == "product" else Ticket.category
    try:
        rows = db.query(column).filter(column.isnot(None)).all()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error fetching unique {kind} tags")
        return []
    return unique_tags(value for (value,) in rows)
