"""AlertBoard — the last computed alert set, minus anything dismissed since.

Dismissal is ephemeral, not a suppression rule: ``refresh`` replaces the whole
set, so a dismissed alert comes back if its trigger still holds.
"""

import structlog
from protean.exceptions import ObjectNotFoundError

from pharmacy.alerts.alerts import derive_alerts

logger = structlog.get_logger(__name__)


class AlertBoard:
    def __init__(self):
        self._alerts = []

    def refresh(self, medicines, requests, now=None):
        self._alerts = derive_alerts(medicines, requests, now)
        logger.debug("Alerts recomputed", count=len(self._alerts))
        return self.items()

    def dismiss(self, alert_id):
        """Drop one alert from the current set."""
        remaining = [alert for alert in self._alerts if alert.id != alert_id]
        if len(remaining) == len(self._alerts):
            raise ObjectNotFoundError({"alert_id": [f"No active alert with id {alert_id}"]})
        self._alerts = remaining
        logger.debug("Alert dismissed", alert_id=alert_id)

    def items(self, alert_type=None):
        if alert_type is None:
            return list(self._alerts)
        return [alert for alert in self._alerts if alert.type == alert_type]
