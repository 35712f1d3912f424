from pydantic import TypeAdapter, ValidationError

from harakapay.clients.supabase import SupabaseClient
from harakapay.repositories.errors import RecordNotFound, ValidationFailed, raise_for_error
from harakapay.schemas.fee_plan import AcademicYear, FeeAssignment, PaymentPlan

ASSIGNMENT_COLUMNS = (
    "student_id, academic_year_id, payment_plan_id, total_due, paid_amount, status, "
    "payment_plans(id, type, discount_percentage, installments)"
)
# Cancelled assignments never count as owed
BILLABLE_STATUSES = ("active", "fully_paid")

_plan_adapter = TypeAdapter(PaymentPlan)


def parse_payment_plan(row: dict) -> PaymentPlan:
    data = dict(row)
    if data.get("type") == "installment":
        installments = data.get("installments") or []
        data["installments"] = sorted(installments, key=lambda i: i.get("installment_number") or 0)
    else:
        data.pop("installments", None)
    if data.get("discount_percentage") is None:
        data.pop("discount_percentage", None)
    data["id"] = str(data["id"])
    return _plan_adapter.validate_python(data)


class AcademicYearRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    def get_active(self) -> AcademicYear:
        result = self.client.select("academic_years", "id, name, is_active", filters={"is_active": True}, limit=1)
        if not result.ok:
            raise_for_error(result.error, "active academic year")
        rows = result.data or []
        if not rows:
            raise RecordNotFound("No active academic year")
        row = rows[0]
        return AcademicYear(id=str(row["id"]), name=row.get("name"), is_active=True)


class FeeAssignmentRepository:
    def __init__(self, client: SupabaseClient):
        self.client = client

    def get_for_student(self, student_id: str, academic_year_id: str) -> FeeAssignment:
        result = self.client.select(
            "student_fee_assignments",
            ASSIGNMENT_COLUMNS,
            filters={"student_id": student_id, "academic_year_id": academic_year_id},
            in_filters={"status": BILLABLE_STATUSES},
            limit=1,
        )
        if not result.ok:
            raise_for_error(result.error, "fee assignment")
        rows = result.data or []
        if not rows:
            raise RecordNotFound(f"No fee assignment for student {student_id}")
        row = dict(rows[0])
        plan_row = row.pop("payment_plans", None)
        try:
            plan = parse_payment_plan(plan_row) if plan_row else None
            return FeeAssignment(
                student_id=str(row["student_id"]),
                academic_year_id=str(row["academic_year_id"]),
                payment_plan_id=str(row["payment_plan_id"]) if row.get("payment_plan_id") else None,
                total_due=row.get("total_due") or 0,
                paid_amount=row.get("paid_amount") or 0,
                status=row.get("status") or "active",
                payment_plan=plan,
            )
        except ValidationError as exc:
            raise ValidationFailed(f"Malformed fee assignment for student {student_id}: {exc}") from exc
