"""Shared BDD fixtures and step definitions for the request lifecycle."""

import pytest
from pharmacy.medicine.medicine import Medicine
from pharmacy.medicine.registration import AddMedicine
from pharmacy.requisition.request import MedicineRequest
from pharmacy.requisition.submission import SubmitRequest
from pharmacy.shared.errors import InvalidTransitionError
from pharmacy.usage.usage import UsageRecord
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for the exception raised by the last When step."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a medicine "{name}" with {quantity:d} units in stock'),
    target_fixture="medicine_id",
)
def medicine_in_stock(name, quantity):
    return current_domain.process(
        AddMedicine(
            name=name,
            generic_name=name.split()[0],
            category="Antibiotic",
            manufacturer="Quality Chemicals",
            batch_number="AMX2024002",
            expiry_date="2027-06-30",
            quantity_in_stock=quantity,
            minimum_stock_level=50,
            unit_price=800.0,
            location="Shelf B2",
        ),
        asynchronous=False,
    )


@given(
    parsers.cfparse("a pending request for {quantity:d} units of the medicine"),
    target_fixture="request_id",
)
def pending_request(medicine_id, quantity):
    return current_domain.process(
        SubmitRequest(
            doctor_id="doc-001",
            doctor_name="Dr. Sarah Nakimuli",
            department="Pediatrics",
            medicine_id=medicine_id,
            quantity_requested=quantity,
            reason="Ward restock",
            actor_role="doctor",
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request status is "{status}"'))
def request_status_is(request_id, status):
    assert current_domain.repository_for(MedicineRequest).get(request_id).status == status


@then(parsers.cfparse("the medicine has {quantity:d} units in stock"))
def medicine_stock_is(medicine_id, quantity):
    assert current_domain.repository_for(Medicine).get(medicine_id).quantity_in_stock == quantity


@then(parsers.cfparse("the medicine is overdrawn by {quantity:d} units"))
def medicine_overdrawn(medicine_id, quantity):
    assert current_domain.repository_for(Medicine).get(medicine_id).quantity_in_stock == -quantity


@then("the action fails with an invalid transition")
def fails_with_invalid_transition(error):
    assert isinstance(error["exc"], InvalidTransitionError)


@then("the action fails with a validation error")
def fails_with_validation_error(error):
    assert isinstance(error["exc"], ValidationError)


@then("no usage has been recorded")
def no_usage(medicine_id):
    assert current_domain.repository_for(UsageRecord).for_medicine(medicine_id) == []
