"""Pharmacy bounded context — Medicine Stock, Requests, Usage and Alerts.

Handles the medicine catalogue, the doctor-to-pharmacy request lifecycle
(submit, approve/reject, dispense), usage recording and the derived
expiry / low-stock / stale-request alerts. All state lives in the in-memory
provider configured in domain.toml.
"""

from protean.domain import Domain

from pharmacy.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
pharmacy = Domain(name="pharmacy")
