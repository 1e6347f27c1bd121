"""RecordUsage — log consumption of a medicine directly, outside a dispense."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from pharmacy.domain import pharmacy
from pharmacy.staff.permissions import Capability, authorize
from pharmacy.usage.usage import UsageRecord

logger = structlog.get_logger(__name__)


@pharmacy.command(part_of="UsageRecord")
class RecordUsage:
    medicine_id = Identifier(required=True)
    medicine_name = String(required=True, max_length=200)
    quantity_used = Integer(required=True)
    used_by = String(required=True, max_length=150)
    department = String(max_length=100)
    purpose = Text()
    actor_role = String(max_length=20)


@pharmacy.command_handler(part_of=UsageRecord)
class RecordUsageHandler:
    @handle(RecordUsage)
    def record_usage(self, command):
        authorize(command.actor_role, Capability.MANAGE_STOCK)

        usage = UsageRecord.record(
            medicine_id=command.medicine_id,
            medicine_name=command.medicine_name,
            quantity_used=command.quantity_used,
            used_by=command.used_by,
            department=command.department,
            purpose=command.purpose,
        )
        current_domain.repository_for(UsageRecord).add(usage)

        logger.info(
            "Usage recorded",
            usage_id=str(usage.id),
            medicine_id=str(usage.medicine_id),
            quantity_used=usage.quantity_used,
        )
        return str(usage.id)
