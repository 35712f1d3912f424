"""Payment schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict

from harakapay.schemas.dashboard import EmptyState, StatusBadge
from harakapay.schemas.fee_plan import Installment, PaymentPlan


class PaymentInitiateRequest(BaseModel):
    """What the payment form submits."""

    student_id: str
    phone_number: str
    amount: Optional[str] = None
    selected_month: Optional[str] = None
    # Supplied when the client already fetched the plan on a previous screen
    payment_plan: Optional[PaymentPlan] = None
    total_due: Optional[Decimal] = None
    selected_installment: Optional[Installment] = None


class PaymentRequest(BaseModel):
    """Outbound request to the payment-initiation API; never persisted."""

    student_id: str
    amount: Decimal
    phone_number: str
    payment_plan_id: Optional[str] = None
    installment_number: Optional[int] = None
    payment_type: str
    selected_month: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "studentId": self.student_id,
            "amount": float(self.amount),
            "phoneNumber": self.phone_number,
            "paymentPlanId": self.payment_plan_id,
            "installmentNumber": self.installment_number,
            "paymentType": self.payment_type,
            "selectedMonth": self.selected_month,
        }


class PaymentInitiated(BaseModel):
    payment_id: Optional[str] = None
    transaction_id: str
    status_url: Optional[str] = None


class PaymentRecord(BaseModel):
    id: str
    student_id: Optional[str] = None
    amount: Decimal
    status: str
    payment_method: Optional[str] = None
    transaction_reference: Optional[str] = None
    description: Optional[str] = None
    installment_number: Optional[int] = None
    installment_label: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PaymentStatusRead(BaseModel):
    payment: PaymentRecord
    amount_display: str
    created_at_display: Optional[str] = None
    badge: StatusBadge
    is_pending: bool


class PaymentHistoryItem(BaseModel):
    payment: PaymentRecord
    amount_display: str
    date_display: Optional[str] = None
    badge: StatusBadge


class PaymentHistoryRead(BaseModel):
    student_id: str
    state: str
    payments: List[PaymentHistoryItem]
    total_paid: Decimal
    total_paid_display: str
    empty_state: Optional[EmptyState] = None
