"""Derived alerts — expiry, low stock and stale pending requests.

Alerts are never stored. ``derive_alerts`` rebuilds the whole set from the
current medicines and requests, so the same inputs always give the same
alerts, and an alert disappears as soon as its trigger condition stops holding.
Alert ids are keyed by trigger (``expiry-<medicine>``, ``stock-<medicine>``,
``request-<request>``) so a recomputation replaces the previous alert for the
same trigger instead of duplicating it.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from pharmacy.requisition.request import RequestStatus
from pharmacy.shared.timeutils import as_utc, utcnow

SECONDS_PER_DAY = 24 * 60 * 60
# Expiry alerts use a flat 30-day month
DAYS_PER_MONTH = 30

EXPIRY_ALERT_MONTHS = 3
EXPIRY_HIGH_SEVERITY_MONTHS = 1
STALE_REQUEST_DAYS = 1
STALE_REQUEST_HIGH_SEVERITY_DAYS = 3


class AlertType(Enum):
    EXPIRY = "expiry"
    STOCK = "stock"
    REQUEST = "request"


class AlertSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AlertItem(BaseModel):
    id: str
    type: AlertType
    message: str
    severity: AlertSeverity
    date: datetime
    medicine_id: str | None = None
    request_id: str | None = None


def months_until_expiry(medicine, now) -> float:
    delta = as_utc(medicine.expiry_date) - as_utc(now)
    return delta.total_seconds() / (SECONDS_PER_DAY * DAYS_PER_MONTH)


def days_since_requested(request, now) -> float:
    delta = as_utc(now) - as_utc(request.requested_date)
    return delta.total_seconds() / SECONDS_PER_DAY


def _expiry_alert(medicine, now):
    months = months_until_expiry(medicine, now)
    # Already-expired stock raises no alert here; the expiry monitor shows it as "expired"
    if not 0 < months <= EXPIRY_ALERT_MONTHS:
        return None

    expiry = as_utc(medicine.expiry_date).date().isoformat()
    return AlertItem(
        id=f"expiry-{medicine.id}",
        type=AlertType.EXPIRY,
        message=f"{medicine.name} expires on {expiry}",
        severity=AlertSeverity.HIGH if months <= EXPIRY_HIGH_SEVERITY_MONTHS else AlertSeverity.MEDIUM,
        date=now,
        medicine_id=str(medicine.id),
    )


def _stock_alert(medicine, now):
    if medicine.quantity_in_stock > medicine.minimum_stock_level:
        return None

    return AlertItem(
        id=f"stock-{medicine.id}",
        type=AlertType.STOCK,
        message=f"{medicine.name} is running low ({medicine.quantity_in_stock} remaining)",
        severity=AlertSeverity.HIGH if medicine.quantity_in_stock == 0 else AlertSeverity.MEDIUM,
        date=now,
        medicine_id=str(medicine.id),
    )


def _request_alert(request, now):
    if request.status != RequestStatus.PENDING.value:
        return None

    days = days_since_requested(request, now)
    if days <= STALE_REQUEST_DAYS:
        return None

    return AlertItem(
        id=f"request-{request.id}",
        type=AlertType.REQUEST,
        message=f"Pending request from {request.doctor_name} for {request.medicine_name}",
        severity=AlertSeverity.HIGH if days > STALE_REQUEST_HIGH_SEVERITY_DAYS else AlertSeverity.MEDIUM,
        date=now,
        request_id=str(request.id),
    )


def derive_alerts(medicines, requests, now=None) -> list[AlertItem]:
    """Build the full alert set for the given medicines and requests at ``now``.

    Per medicine the expiry alert comes before the stock alert; request alerts
    follow all medicine alerts.
    """
    now = as_utc(now or utcnow())

    alerts = []
    for medicine in medicines:
        for alert in (_expiry_alert(medicine, now), _stock_alert(medicine, now)):
            if alert is not None:
                alerts.append(alert)

    for request in requests:
        alert = _request_alert(request, now)
        if alert is not None:
            alerts.append(alert)

    return alerts
