"""Role capabilities.

Each mutating operation names the capability it needs; ``authorize`` raises
``ForbiddenError`` when the acting role does not hold it.
"""

from enum import Enum

from pharmacy.shared.errors import ForbiddenError
from pharmacy.staff.staff import StaffRole


class Capability(Enum):
    SUBMIT_REQUESTS = "submit_requests"
    REVIEW_REQUESTS = "review_requests"
    MANAGE_STOCK = "manage_stock"


_ROLE_CAPABILITIES = {
    StaffRole.DOCTOR: {Capability.SUBMIT_REQUESTS},
    StaffRole.PHARMACIST: {Capability.REVIEW_REQUESTS, Capability.MANAGE_STOCK},
    StaffRole.ADMIN: {
        Capability.SUBMIT_REQUESTS,
        Capability.REVIEW_REQUESTS,
        Capability.MANAGE_STOCK,
    },
}


def can(role, capability: Capability) -> bool:
    """True when ``role`` (a StaffRole or its value) holds ``capability``."""
    try:
        role = StaffRole(role)
    except ValueError:
        return False
    return capability in _ROLE_CAPABILITIES[role]


def authorize(role, capability: Capability) -> None:
    """Raise ForbiddenError unless ``role`` holds ``capability``.

    A ``None`` role means the caller is the system itself (seeding, internal
    cascades) and is always allowed.
    """
    if role is None:
        return
    if not can(role, capability):
        raise ForbiddenError({"role": [f"Role '{role}' is not allowed to {capability.value.replace('_', ' ')}"]})
