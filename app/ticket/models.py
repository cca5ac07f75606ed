# app/ticket/models.py
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, Date, DateTime, String, Text
from app.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Ticket(Base):
    # legacy table and column names shared with the hosted Postgres instance
    __tablename__ = "Active Issues"

    ticket_id = Column(BigInteger, primary_key=True, autoincrement=False)
    status = Column(String, default="Not Started", index=True)
    issue_description = Column(Text)
    core_team_comment = Column(Text)
    wallet_address_safe_email = Column(Text)
    product = Column(Text)
    category = Column(Text)
    severity = Column(String, default="SEV-3", index=True)
    date_of_resolved = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
