import json
from decimal import Decimal
from types import SimpleNamespace

import pytest

from harakapay.clients.payment_gateway import PaymentInitiationError
from harakapay.core.security import create_access_token
from harakapay.db.base import Base
from harakapay.db.session import engine
from harakapay.dependencies import remote
from harakapay.main import app
from harakapay.repositories.errors import RecordNotFound
from harakapay.schemas.fee_plan import AcademicYear, FeeAssignment
from harakapay.schemas.parent import Parent
from harakapay.schemas.payment import PaymentInitiated
from harakapay.schemas.student import LinkedStudent
from harakapay.services.payments import SubmissionGuard

PARENT_USER_ID = "7f1c2a8e-0000-4000-8000-000000000001"


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=None):
        self.status_code = status_code
        self._json = json_data
        if text is None:
            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text
        self.content = text.encode("utf-8")

    def json(self):
        if self._json is None:
            return json.loads(self.text)
        return self._json


class FakeHTTPSession:
    """Stands in for requests.Session; replays queued responses or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def _next(self):
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def request(self, method, url, **kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, **kwargs))
        return self._next()

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)


class FakeParentRepository:
    def __init__(self, parents):
        self.parents = {p.user_id: p for p in parents}

    def get_by_user_id(self, user_id):
        if user_id not in self.parents:
            raise RecordNotFound("parent profile not found")
        return self.parents[user_id]


class FakeStudentRepository:
    def __init__(self, linked=None, candidates=None):
        self.linked = {}
        for parent_id, students in (linked or {}).items():
            self.linked[parent_id] = list(students)
        self.candidates = list(candidates or [])
        self.links = []

    def list_linked(self, parent_id):
        return list(self.linked.get(parent_id, []))

    def find_candidates(self, parent):
        return list(self.candidates)

    def to_student(self, row):
        return LinkedStudent(**{k: v for k, v in row.items() if k in LinkedStudent.model_fields})

    def link(self, parent_id, student_id):
        self.links.append((parent_id, student_id))
        row = next(r for r in self.candidates if r["id"] == student_id)
        self.linked.setdefault(parent_id, []).append(self.to_student(row))


class FakeAcademicYearRepository:
    def __init__(self, year=None):
        self.year = year

    def get_active(self):
        if self.year is None:
            raise RecordNotFound("No active academic year")
        return self.year


class FakeFeeAssignmentRepository:
    def __init__(self, assignments=None):
        self.assignments = {(a.student_id, a.academic_year_id): a for a in assignments or []}
        self.calls = []

    def get_for_student(self, student_id, academic_year_id):
        self.calls.append((student_id, academic_year_id))
        key = (student_id, academic_year_id)
        if key not in self.assignments:
            raise RecordNotFound(f"No fee assignment for student {student_id}")
        return self.assignments[key]


class FakePaymentRepository:
    def __init__(self, payments=None):
        self.payments = list(payments or [])

    def get(self, payment_id):
        for p in self.payments:
            if p.id == payment_id:
                return p
        raise RecordNotFound("payment not found")

    def list_for_student(self, student_id):
        return [p for p in self.payments if p.student_id == student_id]


class FakeGateway:
    def __init__(self, error=None):
        self.error = error
        self.requests = []

    def initiate(self, payment, access_token):
        self.requests.append((payment, access_token))
        if self.error:
            raise PaymentInitiationError(self.error)
        return PaymentInitiated(payment_id="pay-1", transaction_id="txn-1")


class FakeWebApi:
    def __init__(self, notifications=None, unread_count=0, student_fees=None, error=None):
        self.notifications = list(notifications or [])
        self.unread_count = unread_count
        self.fees = list(student_fees or [])
        self.error = error
        self.calls = []

    def _call(self, *call):
        self.calls.append(call)
        if self.error:
            raise self.error

    def list_notifications(self, limit=20, offset=0, unread_only=False):
        self._call("list", limit, offset, unread_only)
        rows = [n for n in self.notifications if not (unread_only and n.get("is_read"))]
        page = rows[offset : offset + limit]
        return {
            "success": True,
            "notifications": page,
            "unreadCount": self.unread_count,
            "hasMore": offset + limit < len(rows),
        }

    def mark_notification_read(self, notification_id):
        self._call("read", notification_id)

    def mark_all_notifications_read(self):
        self._call("read_all")

    def delete_notification(self, notification_id):
        self._call("delete", notification_id)

    def student_fees(self):
        self._call("fees")
        return list(self.fees)

    def delete_account(self):
        self._call("delete_account")
        return {"success": True, "message": "Account deleted successfully"}


def make_parent(**overrides):
    data = {
        "id": "parent-1",
        "user_id": PARENT_USER_ID,
        "first_name": "Amani",
        "last_name": "Kabila",
        "phone": "0812345678",
        "email": "amani@example.com",
    }
    data.update(overrides)
    return Parent(**data)


def make_student(**overrides):
    data = {
        "id": "student-1",
        "student_id": "STU-001",
        "first_name": "Grace",
        "last_name": "Mukendi",
        "grade_level": "5",
        "school_name": "Ecole La Colombe",
    }
    data.update(overrides)
    return LinkedStudent(**data)


def make_assignment(plan, total_due="1000.00", **overrides):
    data = {
        "student_id": "student-1",
        "academic_year_id": "year-2025",
        "payment_plan_id": plan["id"],
        "total_due": Decimal(total_due),
        "paid_amount": Decimal("0"),
        "status": "active",
        "payment_plan": plan,
    }
    data.update(overrides)
    return FeeAssignment(**data)


def auth_headers(user_id=PARENT_USER_ID, **extra):
    headers = {"Authorization": f"Bearer {create_access_token(user_id, email='amani@example.com')}"}
    headers.update(extra)
    return headers


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def backend():
    """Install in-memory repositories and gateway behind the API."""
    state = SimpleNamespace(
        parents=FakeParentRepository([make_parent()]),
        students=FakeStudentRepository(linked={"parent-1": [make_student()]}),
        academic_years=FakeAcademicYearRepository(AcademicYear(id="year-2025", is_active=True)),
        assignments=FakeFeeAssignmentRepository(
            [make_assignment({"id": "plan-1", "type": "one_time"}, total_due="250.00")]
        ),
        payments=FakePaymentRepository(),
        gateway=FakeGateway(),
        guard=SubmissionGuard(),
        web=FakeWebApi(),
    )
    app.dependency_overrides[remote.get_parent_repository] = lambda: state.parents
    app.dependency_overrides[remote.get_student_repository] = lambda: state.students
    app.dependency_overrides[remote.get_academic_year_repository] = lambda: state.academic_years
    app.dependency_overrides[remote.get_fee_assignment_repository] = lambda: state.assignments
    app.dependency_overrides[remote.get_payment_repository] = lambda: state.payments
    app.dependency_overrides[remote.get_payment_gateway] = lambda: state.gateway
    app.dependency_overrides[remote.get_submission_guard] = lambda: state.guard
    app.dependency_overrides[remote.get_web_api_client] = lambda: state.web
    yield state
    app.dependency_overrides.clear()

