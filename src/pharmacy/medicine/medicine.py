"""Medicine aggregate — one batch of a medicine held by the hospital pharmacy.

Stock Model:
    quantity_in_stock:   units currently on the shelf
    minimum_stock_level: reorder threshold; at or below it the item is "low"

Stock is edited directly by pharmacists (``update_details``) and drawn down
when an approved request is dispensed (``dispense_stock``). Dispensing does not
check availability, so an overdraft shows up as negative stock.
"""

import json
from datetime import UTC, datetime

from protean import atomic_change
from protean.exceptions import ValidationError
from protean.fields import Date, Float, Integer, String, Text

from pharmacy.domain import pharmacy
from pharmacy.medicine.events import MedicineAdded, MedicineUpdated, StockDispensed

# Fields a pharmacist may edit after the medicine has been added
EDITABLE_FIELDS = (
    "name",
    "generic_name",
    "category",
    "manufacturer",
    "batch_number",
    "expiry_date",
    "quantity_in_stock",
    "minimum_stock_level",
    "unit_price",
    "location",
    "description",
)


def _ensure_not_negative(field_name, value):
    if value is not None and value < 0:
        raise ValidationError({field_name: [f"{field_name.replace('_', ' ').capitalize()} cannot be negative"]})


@pharmacy.aggregate
class Medicine:
    """A medicine batch in the catalogue, with its shelf location and stock count."""

    name = String(required=True, max_length=200)
    generic_name = String(required=True, max_length=200)
    category = String(required=True, max_length=100)
    manufacturer = String(required=True, max_length=200)
    batch_number = String(required=True, max_length=50)
    expiry_date = Date(required=True)
    quantity_in_stock = Integer(default=0)
    minimum_stock_level = Integer(default=0, min_value=0)
    unit_price = Float(default=0.0, min_value=0.0)
    location = String(required=True, max_length=100)
    description = Text()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def register(
        cls,
        name,
        generic_name,
        category,
        manufacturer,
        batch_number,
        expiry_date,
        location,
        quantity_in_stock=0,
        minimum_stock_level=0,
        unit_price=0.0,
        description=None,
    ):
        """Add a new medicine to the catalogue."""
        _ensure_not_negative("quantity_in_stock", quantity_in_stock)

        medicine = cls(
            name=name,
            generic_name=generic_name,
            category=category,
            manufacturer=manufacturer,
            batch_number=batch_number,
            expiry_date=expiry_date,
            quantity_in_stock=quantity_in_stock,
            minimum_stock_level=minimum_stock_level,
            unit_price=unit_price,
            location=location,
            description=description,
        )

        medicine.raise_(
            MedicineAdded(
                medicine_id=str(medicine.id),
                name=medicine.name,
                category=medicine.category,
                batch_number=medicine.batch_number,
                expiry_date=medicine.expiry_date,
                quantity_in_stock=medicine.quantity_in_stock,
                minimum_stock_level=medicine.minimum_stock_level,
                unit_price=medicine.unit_price,
                added_at=datetime.now(UTC),
            )
        )
        return medicine

    # -------------------------------------------------------------------
    # Editing
    # -------------------------------------------------------------------
    def update_details(self, **changes):
        """Merge the given fields into this medicine. Untouched fields keep their values."""
        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValidationError({"fields": [f"Cannot update unknown fields: {', '.join(unknown)}"]})
        if not changes:
            return

        _ensure_not_negative("quantity_in_stock", changes.get("quantity_in_stock"))

        previous_quantity = self.quantity_in_stock
        with atomic_change(self):
            for field_name, value in changes.items():
                setattr(self, field_name, value)

        self.raise_(
            MedicineUpdated(
                medicine_id=str(self.id),
                changed_fields=json.dumps(sorted(changes)),
                previous_quantity=previous_quantity,
                new_quantity=self.quantity_in_stock,
                updated_at=datetime.now(UTC),
            )
        )

    # -------------------------------------------------------------------
    # Dispensing
    # -------------------------------------------------------------------
    def dispense_stock(self, quantity, request_id):
        """Take ``quantity`` units off the shelf for a dispensed request."""
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous_quantity = self.quantity_in_stock
        self.quantity_in_stock = previous_quantity - quantity

        self.raise_(
            StockDispensed(
                medicine_id=str(self.id),
                request_id=str(request_id),
                quantity=quantity,
                previous_quantity=previous_quantity,
                new_quantity=self.quantity_in_stock,
                dispensed_at=datetime.now(UTC),
            )
        )


@pharmacy.repository(part_of=Medicine)
class MedicineRepository:
    """Catalogue listings."""

    def catalogue(self):
        return self._dao.query.limit(None).all().items
