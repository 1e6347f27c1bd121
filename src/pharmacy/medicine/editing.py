"""UpdateMedicine — partial edit of catalogue details and stock count.

An update aimed at an unknown medicine is ignored: nothing changes and the
handler returns ``None`` instead of raising.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from pharmacy.domain import pharmacy
from pharmacy.medicine.medicine import EDITABLE_FIELDS, Medicine
from pharmacy.shared.timeutils import parse_iso_date
from pharmacy.staff.permissions import Capability, authorize

logger = structlog.get_logger(__name__)


@pharmacy.command(part_of="Medicine")
class UpdateMedicine:
    """Only the fields that are set are applied."""

    medicine_id: Identifier(required=True)
    name: String(max_length=200)
    generic_name: String(max_length=200)
    category: String(max_length=100)
    manufacturer: String(max_length=200)
    batch_number: String(max_length=50)
    expiry_date: String(max_length=10)  # ISO date
    quantity_in_stock: Integer()
    minimum_stock_level: Integer()
    unit_price: Float()
    location: String(max_length=100)
    description: Text()
    actor_role: String(max_length=20)


@pharmacy.command_handler(part_of=Medicine)
class UpdateMedicineHandler:
    @handle(UpdateMedicine)
    def update_medicine(self, command):
        authorize(command.actor_role, Capability.MANAGE_STOCK)

        changes = {name: getattr(command, name) for name in EDITABLE_FIELDS if getattr(command, name) is not None}
        if "expiry_date" in changes:
            changes["expiry_date"] = parse_iso_date(changes["expiry_date"])

        repo = current_domain.repository_for(Medicine)
        try:
            medicine = repo.get(command.medicine_id)
        except ObjectNotFoundError:
            logger.warning("Ignoring update for unknown medicine", medicine_id=str(command.medicine_id))
            return None

        medicine.update_details(**changes)
        repo.add(medicine)

        logger.info(
            "Medicine updated",
            medicine_id=str(medicine.id),
            fields=sorted(changes),
        )
        return str(medicine.id)
