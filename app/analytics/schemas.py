# app/analytics/schemas.py
from pydantic import BaseModel


class CountItem(BaseModel):
    name: str
    value: int


class MonthlyTrend(BaseModel):
    month: str
    label: str
    created: int
    resolved: int


class TicketSummary(BaseModel):
    total_tickets: int
    resolved_tickets: int
    resolution_rate: float
    avg_resolution_days: float
    status: list[CountItem]
    severity: list[CountItem]
    monthly_trend: list[MonthlyTrend]
