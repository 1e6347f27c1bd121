"""Login lookup against the fixed roster.

There is one system-wide credential; the roster only decides *who* logs in.
"""

import structlog
from protean.utils.globals import current_domain

from pharmacy.staff.staff import StaffMember

logger = structlog.get_logger(__name__)

SHARED_PASSWORD = "password123"


def authenticate(email, password):
    """Return the StaffMember for ``email`` when the password matches, else None."""
    if not email:
        return None

    member = current_domain.repository_for(StaffMember).find_by_email(email)
    if member is None or password != SHARED_PASSWORD:
        logger.info("Login rejected", email=email)
        return None

    logger.info("Login accepted", staff_id=str(member.id), role=member.role)
    return member
