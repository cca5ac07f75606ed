# app/feedback/services.py
import logging
from contextlib import contextmanager
from datetime import date, datetime, timezone

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import BackendError
from app.feedback.models import Feedback
from app.feedback.schemas import (
    DEFAULT_PLATFORM,
    check_intercom_ticket,
    FeedbackCreate,
    FeedbackFilters,
    FeedbackOut,
    FeedbackUpdate,
)
from app.ticket.filters import day_bounds
from app.ticket.identifiers import fits_bigint
from app.ticket.lifecycle import utc_today

logger = logging.getLogger(__name__)

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1


@contextmanager
def _guard(db: Session, message: str):
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(message)
        raise BackendError(message) from exc


def _key(feedback_id: str) -> int | None:
    try:
        key = int(feedback_id)
    except (TypeError, ValueError):
        return None
    # ids are 32-bit integer keys
    return key if INT_MIN <= key <= INT_MAX else None


def shipping_date_for(shipped: bool | None, supplied: date | None, today: date | None = None) -> date | None:
    """Shipped feedback always has a date; anything else has none."""
    if shipped:
        return supplied or today or utc_today()
    return None


def to_feedback(row: Feedback) -> FeedbackOut:
    return FeedbackOut(
        id=str(row.id),
        ticket_id=row.ticket_id,
        created_at=row.created_at or datetime.now(timezone.utc),
        platform=row.platform or DEFAULT_PLATFORM,
        product=row.product or "",
        description=row.description or "",
        core_team_acknowledgement=row.core_team_acknowledgement,
        shipped=row.shipped,
        shipping_date=row.shipping_date,
    )


def _get_row(db: Session, feedback_id: str) -> Feedback | None:
    key = _key(feedback_id)
    if key is None:
        return None
    return db.query(Feedback).filter(Feedback.id == key).first()


def get_all_feedback(db: Session) -> list[FeedbackOut]:
    with _guard(db, "Failed to fetch feedback"):
        rows = db.query(Feedback).order_by(Feedback.created_at.desc()).all()
    return [to_feedback(r) for r in rows]


def get_feedback(db: Session, feedback_id: str) -> FeedbackOut | None:
    with _guard(db, "Failed to fetch feedback"):
        row = _get_row(db, feedback_id)
    return to_feedback(row) if row else None


def create_feedback(db: Session, payload: FeedbackCreate) -> FeedbackOut:
    data = payload.model_dump()
    data["product"] = data["product"] or None
    data["description"] = data["description"] or None
    data["shipping_date"] = shipping_date_for(payload.shipped, payload.shipping_date)
    with _guard(db, "Failed to create feedback"):
        db_feedback = Feedback(**data)
        db.add(db_feedback)
        db.commit()
        db.refresh(db_feedback)
    logger.info(f"Created feedback {db_feedback.id} from {db_feedback.platform}")
    return to_feedback(db_feedback)


def update_feedback(db: Session, feedback_id: str, payload: FeedbackUpdate) -> FeedbackOut | None:
    fields = payload.model_dump(exclude_unset=True)
    if fields.get("platform") is None:
        fields.pop("platform", None)
    with _guard(db, "Failed to update feedback"):
        db_feedback = _get_row(db, feedback_id)
        if not db_feedback:
            return None

        check_intercom_ticket(
            fields.get("platform", db_feedback.platform),
            fields["ticket_id"] if "ticket_id" in fields else db_feedback.ticket_id,
        )

        supplied_date = fields.pop("shipping_date", None)
        shipped = fields["shipped"] if "shipped" in fields else db_feedback.shipped
        for field, value in fields.items():
            if field in ("product", "description"):
                value = value or None
            setattr(db_feedback, field, value)
        db_feedback.shipping_date = shipping_date_for(shipped, supplied_date or db_feedback.shipping_date)

        db.commit()
        db.refresh(db_feedback)
    return to_feedback(db_feedback)


def delete_feedback(db: Session, feedback_id: str) -> FeedbackOut | None:
    with _guard(db, "Failed to delete feedback"):
        db_feedback = _get_row(db, feedback_id)
        if not db_feedback:
            return None
        deleted = to_feedback(db_feedback)
        db.delete(db_feedback)
        db.commit()
    return deleted


def bulk_delete_feedback(db: Session, ids: list[str]) -> int:
    keys = [k for k in (_key(i) for i in ids) if k is not None]
    with _guard(db, "Failed to delete feedback"):
        count = db.query(Feedback).filter(Feedback.id.in_(keys)).delete(synchronize_session=False)
        db.commit()
    logger.info(f"Bulk deleted {count} feedback items")
    return count


def search_feedback(db: Session, filters: FeedbackFilters) -> list[FeedbackOut]:
    query = db.query(Feedback)

    if filters.platform:
        query = query.filter(Feedback.platform.in_(filters.platform))
    if filters.core_team_acknowledgement is not None:
        query = query.filter(Feedback.core_team_acknowledgement == filters.core_team_acknowledgement)
    if filters.shipped is not None:
        query = query.filter(Feedback.shipped == filters.shipped)

    text = (filters.search_query or "").strip()
    if text:
        condition = Feedback.description.icontains(text, autoescape=True)
        if text.isdigit() and fits_bigint(int(text)):
            condition = or_(condition, Feedback.ticket_id == int(text))
        query = query.filter(condition)

    lower, upper = day_bounds(filters.date_range)
    if lower is not None:
        query = query.filter(Feedback.created_at >= lower)
    if upper is not None:
        query = query.filter(Feedback.created_at < upper)

    with _guard(db, "Failed to search feedback"):
        rows = query.order_by(Feedback.created_at.desc()).all()

    items = [to_feedback(r) for r in rows]
    if filters.product:
        wanted = set(filters.product)
        items = [i for i in items if i.product in wanted]
    return items


def get_unique_products(db: Session) -> list[str]:
    with _guard(db, "Failed to fetch feedback products"):
        rows = db.query(Feedback.product).filter(Feedback.product.isnot(None)).distinct().all()
    return sorted({p.strip() for (p,) in rows if p and p.strip()})
