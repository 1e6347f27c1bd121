"""Usage analytics over a lookback window.

Everything here is read-only: the report is rebuilt from the current
medicines, requests and usage records every time it is asked for.
"""

from collections import Counter, defaultdict
from datetime import UTC, datetime, timedelta

from protean.exceptions import ValidationError
from pydantic import BaseModel

from pharmacy.requisition.request import RequestStatus
from pharmacy.shared.timeutils import as_utc, utcnow

LOOKBACK_WINDOWS = (7, 30, 90, 365)
TOP_REQUESTED_LIMIT = 10
TREND_MONTHS = 6


class RankedTotal(BaseModel):
    name: str
    total: int


class MonthlyTrend(BaseModel):
    label: str  # e.g. "Oct"
    year: int
    month: int
    requests: int
    usage: int
    # Percent change in request count against the previous month; None when there is no base
    trend_percent: float | None = None


class UsageReport(BaseModel):
    window_days: int
    generated_at: datetime
    total_requests: int
    total_usage: int
    top_requested: list[RankedTotal]
    department_usage: list[RankedTotal]
    category_usage: list[RankedTotal]
    status_counts: dict[str, int]
    monthly_trend: list[MonthlyTrend]


def _ranked(totals, limit=None):
    # Stable sort keeps first-seen order between equal totals
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return [RankedTotal(name=name, total=total) for name, total in ranked]


def _month_start(year, month):
    return datetime(year, month, 1, tzinfo=UTC)


def _shift_month(year, month, delta):
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def trailing_months(now, count=TREND_MONTHS):
    """(start, end) pairs for the last ``count`` calendar months, oldest first; end is exclusive."""
    months = []
    for offset in range(count - 1, -1, -1):
        year, month = _shift_month(now.year, now.month, -offset)
        next_year, next_month = _shift_month(year, month, 1)
        months.append((_month_start(year, month), _month_start(next_year, next_month)))
    return months


def trend_percent(current, previous):
    if not previous:
        return None
    return round((current - previous) / previous * 100, 1)


def monthly_trend(requests, usage_records, now):
    trend = []
    previous_requests = None
    for start, end in trailing_months(now):
        month_requests = sum(1 for r in requests if start <= as_utc(r.requested_date) < end)
        month_usage = sum(u.quantity_used for u in usage_records if start <= as_utc(u.date) < end)
        trend.append(
            MonthlyTrend(
                label=start.strftime("%b"),
                year=start.year,
                month=start.month,
                requests=month_requests,
                usage=month_usage,
                trend_percent=trend_percent(month_requests, previous_requests),
            )
        )
        previous_requests = month_requests
    return trend


def build_usage_report(medicines, requests, usage_records, window_days=30, now=None):
    """Aggregate requests and usage over the trailing ``window_days``.

    The status distribution and the monthly trend ignore the window: they
    always cover every request on record.
    """
    if window_days not in LOOKBACK_WINDOWS:
        raise ValidationError({"window_days": [f"Window must be one of {', '.join(map(str, LOOKBACK_WINDOWS))} days"]})

    now = as_utc(now or utcnow())
    start = now - timedelta(days=window_days)

    recent_requests = [r for r in requests if as_utc(r.requested_date) >= start]
    recent_usage = [u for u in usage_records if as_utc(u.date) >= start]

    requested = defaultdict(int)
    for request in recent_requests:
        requested[request.medicine_name] += request.quantity_requested

    by_department = defaultdict(int)
    for usage in recent_usage:
        by_department[usage.department or "Unassigned"] += usage.quantity_used

    category_of = {str(m.id): m.category for m in medicines}
    by_category = defaultdict(int)
    for usage in recent_usage:
        category = category_of.get(str(usage.medicine_id))
        # Usage of medicines no longer in the catalogue is left out
        if category is not None:
            by_category[category] += usage.quantity_used

    status_counts = {status.value: 0 for status in RequestStatus}
    status_counts.update(Counter(r.status for r in requests))

    return UsageReport(
        window_days=window_days,
        generated_at=now,
        total_requests=len(recent_requests),
        total_usage=sum(u.quantity_used for u in recent_usage),
        top_requested=_ranked(requested, limit=TOP_REQUESTED_LIMIT),
        department_usage=_ranked(by_department),
        category_usage=_ranked(by_category),
        status_counts=status_counts,
        monthly_trend=monthly_trend(requests, usage_records, now),
    )
