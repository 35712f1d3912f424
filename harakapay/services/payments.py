"""Payment form submission to the external payment-initiation API."""

import logging
import threading
from contextlib import contextmanager
from typing import Hashable

from harakapay.clients.payment_gateway import PaymentGatewayClient
from harakapay.core.security import mask_phone
from harakapay.schemas.fee_plan import FeePlanResolution, InstallmentDue, MonthlyDue
from harakapay.schemas.payment import PaymentInitiated, PaymentInitiateRequest, PaymentRequest
from harakapay.services.fee_plans import FeePlanUnavailable
from harakapay.services.validation import PaymentValidationError, is_valid_phone, normalize_phone, parse_amount

logger = logging.getLogger(__name__)


class DuplicateSubmission(Exception):
    pass


class SubmissionGuard:
    """Rejects a second submission for a key while the first is in flight."""

    def __init__(self):
        self._lock = threading.Lock()
        self._in_flight: set[Hashable] = set()

    @contextmanager
    def hold(self, key: Hashable):
        with self._lock:
            if key in self._in_flight:
                raise DuplicateSubmission("A payment for this student is already being submitted")
            self._in_flight.add(key)
        try:
            yield
        finally:
            with self._lock:
                self._in_flight.discard(key)


submission_guard = SubmissionGuard()


def build_payment_request(form: PaymentInitiateRequest, resolution: FeePlanResolution) -> PaymentRequest:
    """Validate the form against the resolved plan; nothing invalid gets through."""
    phone = normalize_phone(form.phone_number)
    if not is_valid_phone(phone):
        raise PaymentValidationError("invalid_phone", "Phone number must be 243 followed by 9 to 11 digits")

    due = resolution.due
    installment_number = None
    selected_month = None
    if isinstance(due, MonthlyDue):
        if not due.selected_month:
            raise PaymentValidationError("month_required", "Select a month before paying a monthly plan")
        selected_month = due.selected_month
    elif isinstance(due, InstallmentDue):
        if due.installment is None:
            raise FeePlanUnavailable("no_installment", "Installment plan has no installments")
        installment_number = due.installment.installment_number
    # Amounts are derived from the plan; the form field is read-only
    amount = parse_amount(due.amount_input)
    if form.amount is not None and parse_amount(form.amount) != amount:
        raise PaymentValidationError("invalid_amount", f"Amount must be {amount:.2f} for this plan")

    return PaymentRequest(
        student_id=resolution.student_id,
        amount=amount,
        phone_number=phone,
        payment_plan_id=resolution.payment_plan_id,
        installment_number=installment_number,
        payment_type=resolution.plan_type,
        selected_month=selected_month,
    )


def initiate_payment(
    *,
    form: PaymentInitiateRequest,
    resolution: FeePlanResolution,
    gateway: PaymentGatewayClient,
    access_token: str,
    user_id: str,
    guard: SubmissionGuard = submission_guard,
) -> PaymentInitiated:
    payment = build_payment_request(form, resolution)
    logger.info(
        "Submitting %s payment of %s for student %s from %s",
        payment.payment_type,
        payment.amount,
        payment.student_id,
        mask_phone(payment.phone_number),
    )
    with guard.hold((user_id, payment.student_id)):
        initiated = gateway.initiate(payment, access_token)
    if initiated.payment_id:
        initiated.status_url = f"/payments/{initiated.payment_id}"
    return initiated
