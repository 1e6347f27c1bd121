"""Tests for alert derivation — expiry, low stock and stale pending requests."""

from datetime import UTC, datetime, timedelta

from pharmacy.alerts.alerts import AlertSeverity, AlertType, derive_alerts, months_until_expiry
from pharmacy.medicine.medicine import Medicine
from pharmacy.requisition.request import MedicineRequest, RequestStatus

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def _make_medicine(**overrides):
    defaults = {
        "name": "Paracetamol 500mg",
        "generic_name": "Acetaminophen",
        "category": "Analgesic",
        "manufacturer": "Cipla Uganda",
        "batch_number": "PAR2024001",
        "expiry_date": (NOW + timedelta(days=400)).date(),
        "quantity_in_stock": 500,
        "minimum_stock_level": 100,
        "unit_price": 150.0,
        "location": "Shelf A1",
    }
    defaults.update(overrides)
    return Medicine(**defaults)


def _make_request(days_ago, **overrides):
    defaults = {
        "doctor_id": "doc-001",
        "doctor_name": "Dr. James Musoke",
        "department": "Internal Medicine",
        "medicine_id": "med-001",
        "medicine_name": "Insulin Glargine",
        "quantity_requested": 5,
        "reason": "Diabetic ward",
        "status": RequestStatus.PENDING.value,
        "requested_date": NOW - timedelta(days=days_ago),
    }
    defaults.update(overrides)
    return MedicineRequest(**defaults)


def _only(alerts, alert_type):
    matching = [a for a in alerts if a.type == alert_type]
    assert len(matching) == 1
    return matching[0]


class TestStockAlerts:
    def test_empty_shelf_is_high_severity(self):
        medicine = _make_medicine(quantity_in_stock=0, minimum_stock_level=50)
        alert = _only(derive_alerts([medicine], [], NOW), AlertType.STOCK)

        assert alert.severity == AlertSeverity.HIGH
        assert alert.id == f"stock-{medicine.id}"
        assert alert.medicine_id == str(medicine.id)
        assert alert.message == "Paracetamol 500mg is running low (0 remaining)"

    def test_below_minimum_is_medium_severity(self):
        medicine = _make_medicine(quantity_in_stock=30, minimum_stock_level=50)
        alert = _only(derive_alerts([medicine], [], NOW), AlertType.STOCK)
        assert alert.severity == AlertSeverity.MEDIUM

    def test_at_minimum_raises_alert(self):
        medicine = _make_medicine(quantity_in_stock=50, minimum_stock_level=50)
        assert len(derive_alerts([medicine], [], NOW)) == 1

    def test_above_minimum_raises_nothing(self):
        medicine = _make_medicine(quantity_in_stock=51, minimum_stock_level=50)
        assert derive_alerts([medicine], [], NOW) == []


class TestExpiryAlerts:
    def test_months_use_thirty_day_months(self):
        midnight = datetime(2025, 1, 1, tzinfo=UTC)
        medicine = _make_medicine(expiry_date=(midnight + timedelta(days=45)).date())
        assert months_until_expiry(medicine, midnight) == 1.5

    def test_expiring_within_a_month_is_high(self):
        medicine = _make_medicine(expiry_date=(NOW + timedelta(days=20)).date())
        alert = _only(derive_alerts([medicine], [], NOW), AlertType.EXPIRY)

        assert alert.severity == AlertSeverity.HIGH
        assert alert.id == f"expiry-{medicine.id}"
        assert alert.message == "Paracetamol 500mg expires on 2025-01-21"

    def test_expiring_within_three_months_is_medium(self):
        medicine = _make_medicine(expiry_date=(NOW + timedelta(days=60)).date())
        alert = _only(derive_alerts([medicine], [], NOW), AlertType.EXPIRY)
        assert alert.severity == AlertSeverity.MEDIUM

    def test_expiring_later_raises_nothing(self):
        medicine = _make_medicine(expiry_date=(NOW + timedelta(days=100)).date())
        assert derive_alerts([medicine], [], NOW) == []

    def test_already_expired_raises_nothing(self):
        medicine = _make_medicine(expiry_date=(NOW - timedelta(days=3)).date())
        assert derive_alerts([medicine], [], NOW) == []

    def test_expiry_alert_comes_before_stock_alert(self):
        medicine = _make_medicine(
            expiry_date=(NOW + timedelta(days=10)).date(),
            quantity_in_stock=0,
        )
        alerts = derive_alerts([medicine], [], NOW)
        assert [a.type for a in alerts] == [AlertType.EXPIRY, AlertType.STOCK]


class TestRequestAlerts:
    def test_two_day_old_pending_request_is_medium(self):
        request = _make_request(days_ago=2)
        alert = _only(derive_alerts([], [request], NOW), AlertType.REQUEST)

        assert alert.severity == AlertSeverity.MEDIUM
        assert alert.id == f"request-{request.id}"
        assert alert.request_id == str(request.id)
        assert alert.message == "Pending request from Dr. James Musoke for Insulin Glargine"

    def test_exactly_three_days_is_still_medium(self):
        alert = _only(derive_alerts([], [_make_request(days_ago=3)], NOW), AlertType.REQUEST)
        assert alert.severity == AlertSeverity.MEDIUM

    def test_just_over_three_days_is_high(self):
        alert = _only(derive_alerts([], [_make_request(days_ago=3 + 1 / 1440)], NOW), AlertType.REQUEST)
        assert alert.severity == AlertSeverity.HIGH

    def test_four_day_old_pending_request_is_high(self):
        alert = _only(derive_alerts([], [_make_request(days_ago=4)], NOW), AlertType.REQUEST)
        assert alert.severity == AlertSeverity.HIGH

    def test_fresh_request_raises_nothing(self):
        assert derive_alerts([], [_make_request(days_ago=0.5)], NOW) == []

    def test_exactly_one_day_raises_nothing(self):
        assert derive_alerts([], [_make_request(days_ago=1)], NOW) == []

    def test_reviewed_request_raises_nothing(self):
        request = _make_request(days_ago=10, status=RequestStatus.APPROVED.value)
        assert derive_alerts([], [request], NOW) == []


class TestDerivation:
    def test_request_alerts_follow_medicine_alerts(self):
        medicine = _make_medicine(quantity_in_stock=0)
        request = _make_request(days_ago=5)

        alerts = derive_alerts([medicine], [request], NOW)

        assert [a.type for a in alerts] == [AlertType.STOCK, AlertType.REQUEST]

    def test_alerts_are_stamped_with_now(self):
        medicine = _make_medicine(quantity_in_stock=0)
        alert = derive_alerts([medicine], [], NOW)[0]
        assert alert.date == NOW

    def test_derivation_is_deterministic(self):
        medicines = [
            _make_medicine(quantity_in_stock=0),
            _make_medicine(name="Insulin Glargine", expiry_date=(NOW + timedelta(days=15)).date()),
        ]
        requests = [_make_request(days_ago=2), _make_request(days_ago=6)]

        first = derive_alerts(medicines, requests, NOW)
        second = derive_alerts(medicines, requests, NOW)

        assert [a.model_dump() for a in first] == [a.model_dump() for a in second]
        assert len(first) == 4

    def test_naive_now_is_treated_as_utc(self):
        medicine = _make_medicine(quantity_in_stock=0)
        alert = derive_alerts([medicine], [], NOW.replace(tzinfo=None))[0]
        assert alert.date == NOW
