"""MedicineRequest aggregate — a doctor's request for stock from the pharmacy.

State Machine (4 states):
    PENDING → APPROVED | REJECTED
    APPROVED → DISPENSED
    REJECTED, DISPENSED → (terminal)

Dispensing only moves the request itself; the stock decrement and the usage
record are applied alongside it by the DispenseRequest handler.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from pharmacy.domain import pharmacy
from pharmacy.requisition.events import (
    RequestApproved,
    RequestDispensed,
    RequestRejected,
    RequestSubmitted,
)
from pharmacy.shared.errors import InvalidTransitionError

# Recorded as the approver when nobody is acting on behalf of a staff member
SYSTEM_ACTOR = "System"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class RequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DISPENSED = "dispensed"


class RequestPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    RequestStatus.PENDING: {RequestStatus.APPROVED, RequestStatus.REJECTED},
    RequestStatus.APPROVED: {RequestStatus.DISPENSED},
    RequestStatus.REJECTED: set(),  # Terminal state
    RequestStatus.DISPENSED: set(),  # Terminal state
}


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@pharmacy.aggregate
class MedicineRequest:
    """A request for a quantity of one medicine, raised by a doctor for a department."""

    # Requester
    doctor_id = Identifier(required=True)
    doctor_name = String(required=True, max_length=150)
    department = String(max_length=100)

    # What is being asked for
    medicine_id = Identifier(required=True)
    medicine_name = String(required=True, max_length=200)
    quantity_requested = Integer(required=True, min_value=1)
    reason = Text(required=True)
    priority = String(choices=RequestPriority, default=RequestPriority.MEDIUM.value)

    # Lifecycle
    status = String(choices=RequestStatus, default=RequestStatus.PENDING.value)
    requested_date = DateTime(required=True)
    approved_date = DateTime()
    dispensed_date = DateTime()
    approved_by = String(max_length=150)
    notes = Text()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        doctor_id,
        doctor_name,
        medicine_id,
        medicine_name,
        quantity_requested,
        reason,
        priority=RequestPriority.MEDIUM.value,
        department=None,
    ):
        """Raise a new request. It always starts out pending."""
        if quantity_requested is None or quantity_requested <= 0:
            raise ValidationError({"quantity_requested": ["Quantity must be positive"]})

        now = datetime.now(UTC)
        request = cls(
            doctor_id=doctor_id,
            doctor_name=doctor_name,
            department=department,
            medicine_id=medicine_id,
            medicine_name=medicine_name,
            quantity_requested=quantity_requested,
            reason=reason,
            priority=priority or RequestPriority.MEDIUM.value,
            status=RequestStatus.PENDING.value,
            requested_date=now,
        )

        request.raise_(
            RequestSubmitted(
                request_id=str(request.id),
                doctor_id=str(doctor_id),
                doctor_name=doctor_name,
                department=department,
                medicine_id=str(medicine_id),
                medicine_name=medicine_name,
                quantity_requested=quantity_requested,
                priority=request.priority,
                reason=reason,
                requested_at=now,
            )
        )
        return request

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate state machine transition."""
        current = RequestStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransitionError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]}
            )

    def approve(self, approved_by=None, notes=None):
        """Approve a pending request."""
        self._assert_can_transition(RequestStatus.APPROVED)

        now = datetime.now(UTC)
        self.status = RequestStatus.APPROVED.value
        self.approved_date = now
        self.approved_by = approved_by or SYSTEM_ACTOR
        self.notes = notes

        self.raise_(
            RequestApproved(
                request_id=str(self.id),
                medicine_id=str(self.medicine_id),
                approved_by=self.approved_by,
                notes=notes,
                approved_at=now,
            )
        )

    def reject(self, notes):
        """Reject a pending request. A reason is mandatory."""
        self._assert_can_transition(RequestStatus.REJECTED)
        if not notes or not notes.strip():
            raise ValidationError({"notes": ["A reason is required when rejecting a request"]})

        now = datetime.now(UTC)
        self.status = RequestStatus.REJECTED.value
        self.notes = notes

        self.raise_(
            RequestRejected(
                request_id=str(self.id),
                medicine_id=str(self.medicine_id),
                notes=notes,
                rejected_at=now,
            )
        )

    def dispense(self):
        """Mark an approved request as handed over."""
        self._assert_can_transition(RequestStatus.DISPENSED)

        now = datetime.now(UTC)
        self.status = RequestStatus.DISPENSED.value
        self.dispensed_date = now

        self.raise_(
            RequestDispensed(
                request_id=str(self.id),
                medicine_id=str(self.medicine_id),
                quantity=self.quantity_requested,
                dispensed_at=now,
            )
        )


@pharmacy.repository(part_of=MedicineRequest)
class MedicineRequestRepository:
    def all_requests(self):
        return self._dao.query.limit(None).all().items
