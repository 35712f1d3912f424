"""Fee-plan resolution: what a parent owes for a student, and in what shape."""

import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

from harakapay.core.i18n import translate
from harakapay.core.time import parse_datetime, utc_now
from harakapay.repositories.errors import RecordNotFound
from harakapay.repositories.fee_assignments import AcademicYearRepository, FeeAssignmentRepository
from harakapay.schemas.fee_plan import (
    AmountDue,
    FeePlanResolution,
    Installment,
    InstallmentDue,
    InstallmentPlan,
    MonthlyDue,
    MonthlyPlan,
    MonthOption,
    OneTimeDue,
    OneTimePlan,
    PaymentPlan,
)
from harakapay.services.formatting import format_currency
from harakapay.services.validation import PaymentValidationError

logger = logging.getLogger(__name__)

# School year runs September through June
MONTHS = (
    "september",
    "october",
    "november",
    "december",
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
)
CENT = Decimal("0.01")


class FeePlanUnavailable(Exception):
    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def monthly_amount(total_due) -> Decimal:
    """Even split of the yearly total over the ten school months."""
    return (Decimal(str(total_due)) / Decimal(len(MONTHS))).quantize(CENT, rounding=ROUND_HALF_UP)


def month_options(language: str) -> list[MonthOption]:
    return [MonthOption(key=m, label=translate(f"payment.months.{m}", language)) for m in MONTHS]


def _due_on_or_after(due, now: datetime) -> bool:
    if isinstance(due, datetime):
        return parse_datetime(due) >= now
    return due >= now.date()


def select_installment(installments: Sequence[Installment], now: Optional[datetime] = None) -> Optional[Installment]:
    """Pick the first unpaid installment due on or after ``now``.

    Falls back to the first installment when none qualifies.
    """
    if not installments:
        return None
    now = parse_datetime(now) if now is not None else utc_now()
    for installment in installments:
        if not installment.paid and _due_on_or_after(installment.due_date, now):
            return installment
    return installments[0]


def resolve_due(
    plan: PaymentPlan,
    total_due=None,
    *,
    selected_month: Optional[str] = None,
    selected_installment: Optional[Installment] = None,
    now: Optional[datetime] = None,
    language: str = "fr",
) -> AmountDue:
    if isinstance(plan, OneTimePlan):
        if total_due is None:
            raise PaymentValidationError("invalid_amount", "total_due is required for a one-time plan")
        amount = _money(total_due)
        return OneTimeDue(amount=amount, amount_input=f"{amount:.2f}")

    if isinstance(plan, MonthlyPlan):
        if total_due is None:
            raise PaymentValidationError("invalid_amount", "total_due is required for a monthly plan")
        if selected_month is not None and selected_month not in MONTHS:
            raise PaymentValidationError("month_required", f"Unknown month: {selected_month}")
        per_month = monthly_amount(total_due)
        return MonthlyDue(
            monthly_amount=per_month,
            months=month_options(language),
            selected_month=selected_month,
            amount_input=f"{per_month:.2f}" if selected_month else None,
        )

    if isinstance(plan, InstallmentPlan):
        installment = selected_installment or select_installment(plan.installments, now)
        return InstallmentDue(
            installment=installment,
            amount_input=f"{_money(installment.amount):.2f}" if installment else None,
        )

    raise PaymentValidationError("invalid_plan", f"Unsupported payment plan type: {getattr(plan, 'type', None)}")


def resolve_fee_plan(
    *,
    student_id: str,
    academic_years: AcademicYearRepository | None = None,
    assignments: FeeAssignmentRepository | None = None,
    payment_plan: Optional[PaymentPlan] = None,
    total_due=None,
    selected_month: Optional[str] = None,
    selected_installment: Optional[Installment] = None,
    now: Optional[datetime] = None,
    language: str = "fr",
) -> FeePlanResolution:
    """Resolve the amount due for ``student_id``.

    A ``payment_plan`` handed over by the caller is used as-is; otherwise the
    active academic year and the student's billable fee assignment are read
    from the backend.
    """
    paid_amount = None
    if payment_plan is None:
        try:
            year = academic_years.get_active()
        except RecordNotFound:
            raise FeePlanUnavailable("no_active_year", "No active academic year")
        try:
            assignment = assignments.get_for_student(student_id, year.id)
        except RecordNotFound:
            raise FeePlanUnavailable("no_fee_assignment", f"No fee assignment for student {student_id}")
        if assignment.payment_plan is None:
            raise FeePlanUnavailable("no_payment_plan", f"Fee assignment for student {student_id} has no payment plan")
        payment_plan = assignment.payment_plan
        total_due = assignment.total_due
        paid_amount = assignment.paid_amount
        logger.debug("Resolved %s plan %s for student %s", payment_plan.type, payment_plan.id, student_id)

    due = resolve_due(
        payment_plan,
        total_due,
        selected_month=selected_month,
        selected_installment=selected_installment,
        now=now,
        language=language,
    )
    return FeePlanResolution(
        student_id=student_id,
        payment_plan_id=payment_plan.id,
        plan_type=payment_plan.type,
        total_due=_money(total_due) if total_due is not None else None,
        paid_amount=_money(paid_amount) if paid_amount is not None else None,
        total_due_display=format_currency(total_due, language) if total_due is not None else None,
        due=due,
    )
