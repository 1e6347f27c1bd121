"""PharmacyStore — the single entry point used by the application shell.

The store holds the session (who is logged in) and the live alert board. Every
state change is sent to the pharmacy domain as a command, stamped with the
logged-in user's role so the handlers can check capabilities; reads load fresh
copies from the repositories. Alerts are recomputed after each successful
change.

The domain must already be initialized (``pharmacy.init()``) before a store is
created.
"""

import structlog
from protean.utils.globals import current_domain

from pharmacy.alerts.board import AlertBoard
from pharmacy.analytics.dashboard import summarize_dashboard
from pharmacy.analytics.report import build_usage_report
from pharmacy.domain import pharmacy
from pharmacy.medicine.classification import expiry_counts, filter_by_expiry, is_expiring_soon
from pharmacy.medicine.editing import UpdateMedicine
from pharmacy.medicine.medicine import Medicine
from pharmacy.medicine.queries import categories, search_medicines
from pharmacy.medicine.registration import AddMedicine
from pharmacy.requisition.dispensing import DispenseRequest
from pharmacy.requisition.queries import visible_requests
from pharmacy.requisition.request import MedicineRequest, RequestPriority
from pharmacy.requisition.review import ApproveRequest, RejectRequest
from pharmacy.requisition.submission import SubmitRequest
from pharmacy.seed import seed_all
from pharmacy.shared.errors import ForbiddenError
from pharmacy.shared.timeutils import as_utc, iso_date, utcnow
from pharmacy.staff.authentication import authenticate
from pharmacy.staff.staff import StaffMember
from pharmacy.usage.recording import RecordUsage
from pharmacy.usage.usage import UsageRecord
from pharmacy.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


class PharmacyStore:
    def __init__(self, domain=None, clock=None, seed=True):
        self.domain = domain or pharmacy
        self._clock = clock or utcnow
        self._current_user = None
        self._board = AlertBoard()

        if seed:
            with self.domain.domain_context():
                seed_all(self.now().date())
        self._refresh_alerts()

    def now(self):
        return as_utc(self._clock())

    # -------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------
    @property
    def current_user(self):
        return self._current_user

    def login(self, email, password) -> bool:
        with self.domain.domain_context():
            member = authenticate(email, password)
        self._current_user = member
        if member is not None:
            add_context(staff_id=str(member.id), role=member.role)
        return member is not None

    def logout(self):
        if self._current_user is not None:
            logger.info("Logged out", staff_id=str(self._current_user.id))
        self._current_user = None
        clear_context()

    def _acting_user(self):
        if self._current_user is None:
            raise ForbiddenError({"user": ["You must be logged in to change pharmacy records"]})
        return self._current_user

    def _process(self, command):
        with self.domain.domain_context():
            result = current_domain.process(command, asynchronous=False)
        self._refresh_alerts()
        return result

    def _load(self, aggregate_cls, identifier):
        with self.domain.domain_context():
            return current_domain.repository_for(aggregate_cls).get(identifier)

    # -------------------------------------------------------------------
    # Medicine catalogue
    # -------------------------------------------------------------------
    def add_medicine(self, **fields):
        user = self._acting_user()
        if "expiry_date" in fields:
            fields["expiry_date"] = iso_date(fields["expiry_date"])

        medicine_id = self._process(AddMedicine(actor_role=user.role, **fields))
        return self._load(Medicine, medicine_id)

    def update_medicine(self, medicine_id, **changes) -> None:
        user = self._acting_user()
        if changes.get("expiry_date") is not None:
            changes["expiry_date"] = iso_date(changes["expiry_date"])

        self._process(UpdateMedicine(medicine_id=medicine_id, actor_role=user.role, **changes))

    # -------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------
    def submit_request(
        self,
        medicine_id,
        quantity_requested,
        reason,
        priority=RequestPriority.MEDIUM.value,
        medicine_name=None,
        department=None,
    ):
        user = self._acting_user()
        request_id = self._process(
            SubmitRequest(
                doctor_id=str(user.id),
                doctor_name=user.name,
                department=department or user.department,
                medicine_id=medicine_id,
                medicine_name=medicine_name,
                quantity_requested=quantity_requested,
                reason=reason,
                priority=priority,
                actor_role=user.role,
            )
        )
        return self._load(MedicineRequest, request_id)

    def approve_request(self, request_id, notes=None):
        user = self._acting_user()
        self._process(ApproveRequest(request_id=request_id, approved_by=user.name, notes=notes, actor_role=user.role))
        return self._load(MedicineRequest, request_id)

    def reject_request(self, request_id, notes):
        user = self._acting_user()
        self._process(RejectRequest(request_id=request_id, notes=notes, actor_role=user.role))
        return self._load(MedicineRequest, request_id)

    def dispense_request(self, request_id):
        user = self._acting_user()
        self._process(DispenseRequest(request_id=request_id, actor_role=user.role))
        return self._load(MedicineRequest, request_id)

    # -------------------------------------------------------------------
    # Usage
    # -------------------------------------------------------------------
    def record_usage(self, medicine_id, medicine_name, quantity_used, used_by=None, department=None, purpose=None):
        user = self._acting_user()
        usage_id = self._process(
            RecordUsage(
                medicine_id=medicine_id,
                medicine_name=medicine_name,
                quantity_used=quantity_used,
                used_by=used_by or user.name,
                department=department or user.department,
                purpose=purpose,
                actor_role=user.role,
            )
        )
        return self._load(UsageRecord, usage_id)

    # -------------------------------------------------------------------
    # Alerts
    # -------------------------------------------------------------------
    def _refresh_alerts(self):
        with self.domain.domain_context():
            medicines = current_domain.repository_for(Medicine).catalogue()
            requests = current_domain.repository_for(MedicineRequest).all_requests()
        self._board.refresh(medicines, requests, self.now())

    def alerts(self, alert_type=None):
        return self._board.items(alert_type)

    def dismiss_alert(self, alert_id) -> None:
        self._board.dismiss(alert_id)

    # -------------------------------------------------------------------
    # Read views
    # -------------------------------------------------------------------
    def medicines(self):
        with self.domain.domain_context():
            return current_domain.repository_for(Medicine).catalogue()

    def search_medicines(self, term=None, category=None):
        return search_medicines(self.medicines(), term=term, category=category)

    def categories(self):
        return categories(self.medicines())

    def medicines_by_expiry(self, status=None):
        """Medicines in one expiry bucket ("expired", "critical", ...); ``None`` or "all" keeps every one."""
        return filter_by_expiry(self.medicines(), status, self.now().date())

    def expiring_soon(self):
        today = self.now().date()
        return [m for m in self.medicines() if is_expiring_soon(m, today)]

    def expiry_counts(self):
        return expiry_counts(self.medicines(), self.now().date())

    def requests(self):
        with self.domain.domain_context():
            return current_domain.repository_for(MedicineRequest).all_requests()

    def usage_records(self):
        with self.domain.domain_context():
            return current_domain.repository_for(UsageRecord).all_records()

    def staff(self):
        with self.domain.domain_context():
            return current_domain.repository_for(StaffMember).roster()

    def my_requests(self, search=None, status=None):
        """Requests visible to the logged-in user."""
        return visible_requests(self.requests(), self._current_user, search=search, status=status)

    def usage_report(self, window_days=30):
        return build_usage_report(
            self.medicines(),
            self.requests(),
            self.usage_records(),
            window_days=window_days,
            now=self.now(),
        )

    def dashboard(self):
        return summarize_dashboard(self.medicines(), self.requests(), self.usage_records(), self.alerts())
