"""AddMedicine — command and handler."""

import structlog
from protean import handle
from protean.fields import Float, Integer, String, Text
from protean.utils.globals import current_domain

from pharmacy.domain import pharmacy
from pharmacy.medicine.medicine import Medicine
from pharmacy.shared.timeutils import parse_iso_date
from pharmacy.staff.permissions import Capability, authorize

logger = structlog.get_logger(__name__)


@pharmacy.command(part_of="Medicine")
class AddMedicine:
    """Add a medicine batch to the catalogue."""

    name: String(required=True, max_length=200)
    generic_name: String(required=True, max_length=200)
    category: String(required=True, max_length=100)
    manufacturer: String(required=True, max_length=200)
    batch_number: String(required=True, max_length=50)
    expiry_date: String(required=True, max_length=10)  # ISO date
    quantity_in_stock: Integer(default=0)
    minimum_stock_level: Integer(default=0)
    unit_price: Float(default=0.0)
    location: String(required=True, max_length=100)
    description: Text()
    actor_role: String(max_length=20)


@pharmacy.command_handler(part_of=Medicine)
class AddMedicineHandler:
    @handle(AddMedicine)
    def add_medicine(self, command):
        authorize(command.actor_role, Capability.MANAGE_STOCK)

        medicine = Medicine.register(
            name=command.name,
            generic_name=command.generic_name,
            category=command.category,
            manufacturer=command.manufacturer,
            batch_number=command.batch_number,
            expiry_date=parse_iso_date(command.expiry_date),
            quantity_in_stock=command.quantity_in_stock,
            minimum_stock_level=command.minimum_stock_level,
            unit_price=command.unit_price,
            location=command.location,
            description=command.description,
        )
        current_domain.repository_for(Medicine).add(medicine)

        logger.info(
            "Medicine added",
            medicine_id=str(medicine.id),
            name=medicine.name,
            quantity_in_stock=medicine.quantity_in_stock,
        )
        return str(medicine.id)
