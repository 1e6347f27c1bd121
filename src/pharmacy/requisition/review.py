"""ApproveRequest / RejectRequest — a pharmacist decides on a pending request."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from pharmacy.domain import pharmacy
from pharmacy.requisition.request import MedicineRequest
from pharmacy.staff.permissions import Capability, authorize

logger = structlog.get_logger(__name__)


@pharmacy.command(part_of="MedicineRequest")
class ApproveRequest:
    request_id = Identifier(required=True)
    approved_by = String(max_length=150)  # Falls back to "System"
    notes = Text()
    actor_role = String(max_length=20)


@pharmacy.command(part_of="MedicineRequest")
class RejectRequest:
    request_id = Identifier(required=True)
    notes = Text()
    actor_role = String(max_length=20)


@pharmacy.command_handler(part_of=MedicineRequest)
class ReviewRequestHandler:
    @handle(ApproveRequest)
    def approve_request(self, command):
        authorize(command.actor_role, Capability.REVIEW_REQUESTS)

        repo = current_domain.repository_for(MedicineRequest)
        request = repo.get(command.request_id)
        request.approve(approved_by=command.approved_by, notes=command.notes)
        repo.add(request)

        logger.info(
            "Medicine request approved",
            request_id=str(request.id),
            approved_by=request.approved_by,
        )

    @handle(RejectRequest)
    def reject_request(self, command):
        authorize(command.actor_role, Capability.REVIEW_REQUESTS)

        repo = current_domain.repository_for(MedicineRequest)
        request = repo.get(command.request_id)
        request.reject(notes=command.notes)
        repo.add(request)

        logger.info("Medicine request rejected", request_id=str(request.id))
