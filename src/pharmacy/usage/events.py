"""Domain events for the UsageRecord aggregate."""

from protean.fields import DateTime, Identifier, Integer, String, Text

from pharmacy.domain import pharmacy


@pharmacy.event(part_of="UsageRecord")
class UsageRecorded:
    """Units of a medicine were used by a department."""

    __version__ = 1

    usage_id = Identifier(required=True)
    medicine_id = Identifier(required=True)
    medicine_name = String(required=True)
    quantity_used = Integer(required=True)
    used_by = String(required=True)
    department = String()
    purpose = Text()
    recorded_at = DateTime(required=True)
