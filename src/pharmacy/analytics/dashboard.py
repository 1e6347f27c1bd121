"""Dashboard summary: headline counts plus the latest requests."""

from datetime import datetime

from pydantic import BaseModel

from pharmacy.alerts.alerts import AlertType
from pharmacy.requisition.request import RequestStatus
from pharmacy.shared.timeutils import as_utc

RECENT_REQUESTS_LIMIT = 5


class RecentRequest(BaseModel):
    id: str
    medicine_name: str
    doctor_name: str
    quantity_requested: int
    priority: str
    status: str
    requested_date: datetime


class DashboardSummary(BaseModel):
    total_medicines: int
    total_requests: int
    pending_requests: int
    approved_requests: int
    low_stock_items: int
    expiring_items: int
    total_usage: int
    recent_requests: list[RecentRequest]


def summarize_dashboard(medicines, requests, usage_records, alerts) -> DashboardSummary:
    """Summarize the current state. ``alerts`` is the live alert set."""
    newest_first = sorted(requests, key=lambda r: as_utc(r.requested_date), reverse=True)

    return DashboardSummary(
        total_medicines=len(medicines),
        total_requests=len(requests),
        pending_requests=sum(1 for r in requests if r.status == RequestStatus.PENDING.value),
        approved_requests=sum(1 for r in requests if r.status == RequestStatus.APPROVED.value),
        low_stock_items=sum(1 for m in medicines if m.quantity_in_stock <= m.minimum_stock_level),
        expiring_items=sum(1 for a in alerts if a.type == AlertType.EXPIRY),
        total_usage=sum(u.quantity_used for u in usage_records),
        recent_requests=[
            RecentRequest(
                id=str(r.id),
                medicine_name=r.medicine_name,
                doctor_name=r.doctor_name,
                quantity_requested=r.quantity_requested,
                priority=r.priority,
                status=r.status,
                requested_date=as_utc(r.requested_date),
            )
            for r in newest_first[:RECENT_REQUESTS_LIMIT]
        ],
    )
