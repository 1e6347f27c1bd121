"""Stock and expiry classification for medicines.

Pure functions over Medicine records; nothing here touches a repository.
"""

import calendar
from datetime import date, datetime
from enum import Enum


class StockStatus(Enum):
    OUT_OF_STOCK = "Out of Stock"
    LOW_STOCK = "Low Stock"
    IN_STOCK = "In Stock"


class ExpiryStatus(Enum):
    EXPIRED = "expired"
    CRITICAL = "critical"
    WARNING = "warning"
    CAUTION = "caution"
    GOOD = "good"


# Upper bound (inclusive, in days) of each non-expired bucket, nearest first
_EXPIRY_BUCKETS = (
    (30, ExpiryStatus.CRITICAL),
    (90, ExpiryStatus.WARNING),
    (180, ExpiryStatus.CAUTION),
)

EXPIRING_SOON_MONTHS = 3


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


def classify_stock(medicine) -> StockStatus:
    # Overdrawn stock (negative) counts as out of stock
    if medicine.quantity_in_stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if medicine.quantity_in_stock <= medicine.minimum_stock_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def days_until_expiry(medicine, today) -> int:
    return (_as_date(medicine.expiry_date) - _as_date(today)).days


def classify_expiry(medicine, today) -> tuple[ExpiryStatus, int]:
    """Bucket a medicine by whole days left before it expires.

    Returns the status and the day count shown next to it: days remaining, or
    days since expiry for expired stock.
    """
    days = days_until_expiry(medicine, today)
    if days < 0:
        return ExpiryStatus.EXPIRED, abs(days)

    for upper_bound, status in _EXPIRY_BUCKETS:
        if days <= upper_bound:
            return status, days
    return ExpiryStatus.GOOD, days


def expiry_status_text(status: ExpiryStatus, days: int) -> str:
    if status == ExpiryStatus.EXPIRED:
        return f"Expired {days} days ago"
    return f"Expires in {days} days"


def add_months(day, months):
    """Shift ``day`` by calendar months, clamping to the end of shorter months."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def is_expiring_soon(medicine, today) -> bool:
    """True when the medicine expires within the next three calendar months (or already has)."""
    today = _as_date(today)
    return _as_date(medicine.expiry_date) <= add_months(today, EXPIRING_SOON_MONTHS)


def filter_by_expiry(medicines, status, today):
    """Keep medicines in the given expiry bucket. ``None`` or "all" keeps everything."""
    if status is None or status == "all":
        return list(medicines)
    wanted = ExpiryStatus(status)
    return [m for m in medicines if classify_expiry(m, today)[0] == wanted]


def expiry_counts(medicines, today) -> dict[str, int]:
    """Number of medicines in each expiry bucket, every bucket present."""
    counts = {status.value: 0 for status in ExpiryStatus}
    for medicine in medicines:
        counts[classify_expiry(medicine, today)[0].value] += 1
    return counts
