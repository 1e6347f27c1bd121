"""Domain events for the Medicine aggregate."""

from protean.fields import Date, DateTime, Float, Identifier, Integer, String, Text

from pharmacy.domain import pharmacy


@pharmacy.event(part_of="Medicine")
class MedicineAdded:
    """A new medicine batch was added to the catalogue."""

    __version__ = 1

    medicine_id = Identifier(required=True)
    name = String(required=True)
    category = String(required=True)
    batch_number = String(required=True)
    expiry_date = Date(required=True)
    quantity_in_stock = Integer(required=True)
    minimum_stock_level = Integer(required=True)
    unit_price = Float()
    added_at = DateTime(required=True)


@pharmacy.event(part_of="Medicine")
class MedicineUpdated:
    """Catalogue details or the stock count of a medicine were edited."""

    __version__ = 1

    medicine_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON array of field names
    previous_quantity = Integer()
    new_quantity = Integer()
    updated_at = DateTime(required=True)


@pharmacy.event(part_of="Medicine")
class StockDispensed:
    """Stock left the pharmacy to fulfil an approved request."""

    __version__ = 1

    medicine_id = Identifier(required=True)
    request_id = Identifier(required=True)
    quantity = Integer(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    dispensed_at = DateTime(required=True)
