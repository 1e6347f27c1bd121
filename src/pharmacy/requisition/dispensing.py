"""DispenseRequest — hand over an approved request.

Dispensing cascades within one unit of work:
    1. the request moves to ``dispensed``
    2. the medicine's stock drops by the requested quantity (no availability check)
    3. one UsageRecord is written for the requesting doctor and department

If the medicine cannot be found the whole command fails and nothing is applied.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from pharmacy.domain import pharmacy
from pharmacy.medicine.medicine import Medicine
from pharmacy.requisition.request import MedicineRequest
from pharmacy.staff.permissions import Capability, authorize
from pharmacy.usage.usage import UsageRecord

logger = structlog.get_logger(__name__)


@pharmacy.command(part_of="MedicineRequest")
class DispenseRequest:
    request_id = Identifier(required=True)
    actor_role = String(max_length=20)


@pharmacy.command_handler(part_of=MedicineRequest)
class DispenseRequestHandler:
    @handle(DispenseRequest)
    def dispense_request(self, command):
        authorize(command.actor_role, Capability.REVIEW_REQUESTS)

        request_repo = current_domain.repository_for(MedicineRequest)
        medicine_repo = current_domain.repository_for(Medicine)

        request = request_repo.get(command.request_id)
        request.dispense()

        # Raises ObjectNotFoundError, rolling back the transition above
        medicine = medicine_repo.get(request.medicine_id)
        medicine.dispense_stock(request.quantity_requested, request_id=request.id)

        usage = UsageRecord.record(
            medicine_id=request.medicine_id,
            medicine_name=request.medicine_name,
            quantity_used=request.quantity_requested,
            used_by=request.doctor_name,
            department=request.department,
            purpose=request.reason,
        )

        request_repo.add(request)
        medicine_repo.add(medicine)
        current_domain.repository_for(UsageRecord).add(usage)

        if medicine.quantity_in_stock < 0:
            logger.warning(
                "Dispense overdrew stock",
                medicine_id=str(medicine.id),
                quantity_in_stock=medicine.quantity_in_stock,
            )

        logger.info(
            "Medicine request dispensed",
            request_id=str(request.id),
            medicine_id=str(medicine.id),
            quantity=request.quantity_requested,
            usage_id=str(usage.id),
        )
        return str(usage.id)
