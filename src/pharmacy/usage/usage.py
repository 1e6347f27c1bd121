"""UsageRecord aggregate — an immutable log line of medicine consumption.

Records are written once, normally by the dispense cascade, and never edited.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String, Text

from pharmacy.domain import pharmacy
from pharmacy.usage.events import UsageRecorded


@pharmacy.aggregate
class UsageRecord:
    medicine_id = Identifier(required=True)
    medicine_name = String(required=True, max_length=200)
    quantity_used = Integer(required=True, min_value=1)
    used_by = String(required=True, max_length=150)
    department = String(max_length=100)
    date = DateTime(required=True)
    purpose = Text()

    @classmethod
    def record(cls, medicine_id, medicine_name, quantity_used, used_by, department=None, purpose=None):
        if quantity_used is None or quantity_used <= 0:
            raise ValidationError({"quantity_used": ["Quantity must be positive"]})

        now = datetime.now(UTC)
        usage = cls(
            medicine_id=medicine_id,
            medicine_name=medicine_name,
            quantity_used=quantity_used,
            used_by=used_by,
            department=department,
            date=now,
            purpose=purpose,
        )
        usage.raise_(
            UsageRecorded(
                usage_id=str(usage.id),
                medicine_id=str(medicine_id),
                medicine_name=medicine_name,
                quantity_used=quantity_used,
                used_by=used_by,
                department=department,
                purpose=purpose,
                recorded_at=now,
            )
        )
        return usage


@pharmacy.repository(part_of=UsageRecord)
class UsageRecordRepository:
    def all_records(self):
        return self._dao.query.limit(None).all().items

    def for_medicine(self, medicine_id):
        return self._dao.query.filter(medicine_id=str(medicine_id)).limit(None).all().items
