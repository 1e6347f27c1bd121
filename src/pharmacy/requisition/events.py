"""Domain events for the MedicineRequest aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from pharmacy.domain import pharmacy


@pharmacy.event(part_of="MedicineRequest")
class RequestSubmitted:
    """A doctor asked the pharmacy for a medicine."""

    __version__ = 1

    request_id = Identifier(required=True)
    doctor_id = Identifier(required=True)
    doctor_name = String(required=True)
    department = String()
    medicine_id = Identifier(required=True)
    medicine_name = String(required=True)
    quantity_requested = Integer(required=True)
    priority = String(required=True)
    reason = Text(required=True)
    requested_at = DateTime(required=True)


@pharmacy.event(part_of="MedicineRequest")
class RequestApproved:
    """A pharmacist approved a pending request."""

    __version__ = 1

    request_id = Identifier(required=True)
    medicine_id = Identifier(required=True)
    approved_by = String(required=True)
    notes = Text()
    approved_at = DateTime(required=True)


@pharmacy.event(part_of="MedicineRequest")
class RequestRejected:
    """A pharmacist turned down a pending request."""

    __version__ = 1

    request_id = Identifier(required=True)
    medicine_id = Identifier(required=True)
    notes = Text(required=True)
    rejected_at = DateTime(required=True)


@pharmacy.event(part_of="MedicineRequest")
class RequestDispensed:
    """An approved request was handed over; stock and usage follow."""

    __version__ = 1

    request_id = Identifier(required=True)
    medicine_id = Identifier(required=True)
    quantity = Integer(required=True)
    dispensed_at = DateTime(required=True)
