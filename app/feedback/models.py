# app/feedback/models.py
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, Column, Date, DateTime, Integer, String, Text
from app.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Feedback(Base):
    __tablename__ = "feedback_requests"

    id = Column(Integer, primary_key=True, index=True)
    ticket_id = Column(BigInteger, nullable=True, index=True)
    platform = Column(String, nullable=False, default="Intercom", index=True)
    product = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    core_team_acknowledgement = Column(Boolean, nullable=True)
    shipped = Column(Boolean, nullable=True)
    shipping_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
