"""Payment initiation, status and history endpoints."""

from decimal import Decimal

from fastapi import APIRouter, Depends, status

from harakapay.api.parent import ensure_linked_student
from harakapay.clients.payment_gateway import PaymentGatewayClient
from harakapay.dependencies.auth import CurrentUser, get_current_user
from harakapay.dependencies.remote import (
    get_academic_year_repository,
    get_current_parent,
    get_fee_assignment_repository,
    get_language,
    get_payment_gateway,
    get_payment_repository,
    get_student_repository,
    get_submission_guard,
)
from harakapay.repositories.fee_assignments import AcademicYearRepository, FeeAssignmentRepository
from harakapay.repositories.payments import PaymentRepository
from harakapay.repositories.students import StudentRepository
from harakapay.schemas.parent import Parent
from harakapay.schemas.payment import (
    PaymentHistoryItem,
    PaymentHistoryRead,
    PaymentInitiated,
    PaymentInitiateRequest,
    PaymentStatusRead,
)
from harakapay.services.fee_plans import resolve_fee_plan
from harakapay.services.formatting import format_currency, format_date, format_datetime
from harakapay.services.payments import SubmissionGuard, initiate_payment
from harakapay.services.presenters import empty_state, payment_status_badge, view_state

router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/initiate", response_model=PaymentInitiated, status_code=status.HTTP_201_CREATED)
def create_payment(
    form: PaymentInitiateRequest,
    current_user: CurrentUser = Depends(get_current_user),
    parent: Parent = Depends(get_current_parent),
    students: StudentRepository = Depends(get_student_repository),
    academic_years: AcademicYearRepository = Depends(get_academic_year_repository),
    assignments: FeeAssignmentRepository = Depends(get_fee_assignment_repository),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway),
    guard: SubmissionGuard = Depends(get_submission_guard),
    language: str = Depends(get_language),
):
    ensure_linked_student(students, parent, form.student_id)
    resolution = resolve_fee_plan(
        student_id=form.student_id,
        academic_years=academic_years,
        assignments=assignments,
        payment_plan=form.payment_plan,
        total_due=form.total_due,
        selected_month=form.selected_month,
        selected_installment=form.selected_installment,
        language=language,
    )
    return initiate_payment(
        form=form,
        resolution=resolution,
        gateway=gateway,
        access_token=current_user.access_token,
        user_id=current_user.id,
        guard=guard,
    )


@router.get("/history", response_model=PaymentHistoryRead)
def read_payment_history(
    student_id: str,
    parent: Parent = Depends(get_current_parent),
    students: StudentRepository = Depends(get_student_repository),
    payments: PaymentRepository = Depends(get_payment_repository),
    language: str = Depends(get_language),
):
    ensure_linked_student(students, parent, student_id)
    records = payments.list_for_student(student_id)
    total_paid = sum((p.amount for p in records if p.status == "completed"), Decimal("0.00"))
    items = [
        PaymentHistoryItem(
            payment=p,
            amount_display=format_currency(p.amount, language),
            date_display=format_date(p.created_at, language) if p.created_at else None,
            badge=payment_status_badge(p.status, language),
        )
        for p in records
    ]
    state = view_state(items)
    return PaymentHistoryRead(
        student_id=student_id,
        state=state,
        payments=items,
        total_paid=total_paid,
        total_paid_display=format_currency(total_paid, language),
        empty_state=empty_state("no_payments", language) if state == "empty" else None,
    )


@router.get("/{payment_id}", response_model=PaymentStatusRead)
def read_payment_status(
    payment_id: str,
    payments: PaymentRepository = Depends(get_payment_repository),
    language: str = Depends(get_language),
):
    payment = payments.get(payment_id)
    return PaymentStatusRead(
        payment=payment,
        amount_display=format_currency(payment.amount, language),
        created_at_display=format_datetime(payment.created_at, language) if payment.created_at else None,
        badge=payment_status_badge(payment.status, language),
        is_pending=payment.status == "pending",
    )
