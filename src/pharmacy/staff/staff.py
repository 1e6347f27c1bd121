"""StaffMember aggregate — the people who can log in to the pharmacy tracker.

The roster is fixed: members are enrolled once when the store is seeded and
never change afterwards. A member is selected (not created) at login.
"""

from enum import Enum

from protean.fields import String

from pharmacy.domain import pharmacy


class StaffRole(Enum):
    DOCTOR = "doctor"
    PHARMACIST = "pharmacist"
    ADMIN = "admin"


@pharmacy.aggregate
class StaffMember:
    """A doctor, pharmacist or administrator on the hospital roster."""

    name: String(required=True, max_length=150)
    email: String(required=True, max_length=254)
    role: String(required=True, choices=StaffRole)
    department: String(max_length=100)

    @classmethod
    def enrol(cls, name, email, role, department=None):
        return cls(
            name=name,
            email=email.strip().lower(),
            role=role,
            department=department,
        )

    @property
    def is_doctor(self):
        return StaffRole(self.role) == StaffRole.DOCTOR


@pharmacy.repository(part_of=StaffMember)
class StaffRepository:
    """Roster lookups."""

    def find_by_email(self, email):
        results = self._dao.query.filter(email=email.strip().lower()).all().items
        return results[0] if results else None

    def roster(self):
        return self._dao.query.limit(None).all().items
