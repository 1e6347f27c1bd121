"""Tests for the dashboard summary."""

from datetime import UTC, datetime, timedelta

from pharmacy.alerts.alerts import derive_alerts
from pharmacy.analytics.dashboard import summarize_dashboard
from pharmacy.medicine.medicine import Medicine
from pharmacy.requisition.request import MedicineRequest, RequestStatus
from pharmacy.usage.usage import UsageRecord

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def _make_medicine(name, quantity, minimum, expires_in_days=400):
    return Medicine(
        name=name,
        generic_name=name,
        category="Analgesic",
        manufacturer="GSK",
        batch_number="PAN2023015",
        expiry_date=(NOW + timedelta(days=expires_in_days)).date(),
        quantity_in_stock=quantity,
        minimum_stock_level=minimum,
        unit_price=250.0,
        location="Shelf A2",
    )


def _make_request(name, hours_ago, status=RequestStatus.PENDING.value):
    return MedicineRequest(
        doctor_id="doc-002",
        doctor_name="Dr. James Musoke",
        department="Internal Medicine",
        medicine_id="med-001",
        medicine_name=name,
        quantity_requested=5,
        reason="Ward restock",
        status=status,
        requested_date=NOW - timedelta(hours=hours_ago),
    )


def _make_usage(quantity):
    return UsageRecord(
        medicine_id="med-001",
        medicine_name="Panadol Extra",
        quantity_used=quantity,
        used_by="Dr. James Musoke",
        department="Internal Medicine",
        date=NOW,
    )


class TestDashboardTotals:
    def test_totals(self):
        medicines = [
            _make_medicine("Panadol Extra", 200, 75),
            _make_medicine("Amoxicillin 250mg", 40, 50),
            _make_medicine("Insulin Glargine", 25, 20, expires_in_days=20),
        ]
        requests = [
            _make_request("Panadol Extra", 1),
            _make_request("Panadol Extra", 2, status=RequestStatus.APPROVED.value),
            _make_request("Amoxicillin 250mg", 3, status=RequestStatus.DISPENSED.value),
        ]
        usage = [_make_usage(5), _make_usage(7)]
        alerts = derive_alerts(medicines, requests, NOW)

        summary = summarize_dashboard(medicines, requests, usage, alerts)

        assert summary.total_medicines == 3
        assert summary.total_requests == 3
        assert summary.pending_requests == 1
        assert summary.approved_requests == 1
        assert summary.low_stock_items == 1
        assert summary.expiring_items == 1
        assert summary.total_usage == 12

    def test_empty_state(self):
        summary = summarize_dashboard([], [], [], [])
        assert summary.total_medicines == 0
        assert summary.recent_requests == []


class TestRecentRequests:
    def test_five_newest_first(self):
        requests = [_make_request(f"Medicine {hours}", hours) for hours in (5, 1, 7, 3, 2, 6, 4)]

        summary = summarize_dashboard([], requests, [], [])

        assert [r.medicine_name for r in summary.recent_requests] == [
            "Medicine 1",
            "Medicine 2",
            "Medicine 3",
            "Medicine 4",
            "Medicine 5",
        ]

    def test_recent_request_fields(self):
        request = _make_request("Panadol Extra", 1)
        recent = summarize_dashboard([], [request], [], []).recent_requests[0]

        assert recent.id == str(request.id)
        assert recent.doctor_name == "Dr. James Musoke"
        assert recent.status == "pending"
        assert recent.requested_date == NOW - timedelta(hours=1)
