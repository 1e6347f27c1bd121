"""SubmitRequest — a doctor asks the pharmacy for a medicine.

The referenced medicine must exist; its catalogue name is used when the
command does not carry one.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from pharmacy.domain import pharmacy
from pharmacy.medicine.medicine import Medicine
from pharmacy.requisition.request import MedicineRequest, RequestPriority
from pharmacy.staff.permissions import Capability, authorize

logger = structlog.get_logger(__name__)


@pharmacy.command(part_of="MedicineRequest")
class SubmitRequest:
    doctor_id = Identifier(required=True)
    doctor_name = String(required=True, max_length=150)
    department = String(max_length=100)
    medicine_id = Identifier(required=True)
    medicine_name = String(max_length=200)
    quantity_requested = Integer(required=True)
    reason = Text(required=True)
    priority = String(max_length=10, default=RequestPriority.MEDIUM.value)
    actor_role = String(max_length=20)


@pharmacy.command_handler(part_of=MedicineRequest)
class SubmitRequestHandler:
    @handle(SubmitRequest)
    def submit_request(self, command):
        authorize(command.actor_role, Capability.SUBMIT_REQUESTS)

        # Raises ObjectNotFoundError for an unknown medicine
        medicine = current_domain.repository_for(Medicine).get(command.medicine_id)

        request = MedicineRequest.submit(
            doctor_id=command.doctor_id,
            doctor_name=command.doctor_name,
            department=command.department,
            medicine_id=str(medicine.id),
            medicine_name=command.medicine_name or medicine.name,
            quantity_requested=command.quantity_requested,
            reason=command.reason,
            priority=command.priority,
        )
        current_domain.repository_for(MedicineRequest).add(request)

        logger.info(
            "Medicine request submitted",
            request_id=str(request.id),
            medicine_id=str(medicine.id),
            quantity_requested=request.quantity_requested,
            priority=request.priority,
        )
        return str(request.id)
