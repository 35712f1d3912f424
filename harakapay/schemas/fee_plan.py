"""Fee assignment and payment plan schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from harakapay.schemas.dashboard import EmptyState


class Installment(BaseModel):
    installment_number: int
    amount: Decimal
    due_date: Union[date, datetime]
    paid: bool = False
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class _PlanBase(BaseModel):
    id: str
    discount_percentage: Decimal = Decimal("0")

    model_config = ConfigDict(from_attributes=True)


class OneTimePlan(_PlanBase):
    type: Literal["one_time"] = "one_time"


class MonthlyPlan(_PlanBase):
    type: Literal["monthly"] = "monthly"


class InstallmentPlan(_PlanBase):
    type: Literal["installment"] = "installment"
    installments: List[Installment] = Field(default_factory=list)


PaymentPlan = Annotated[Union[OneTimePlan, MonthlyPlan, InstallmentPlan], Field(discriminator="type")]


class AcademicYear(BaseModel):
    id: str
    is_active: bool = False
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class FeeAssignment(BaseModel):
    student_id: str
    academic_year_id: str
    payment_plan_id: Optional[str] = None
    total_due: Decimal
    paid_amount: Decimal = Decimal("0")
    status: Literal["active", "fully_paid", "cancelled"] = "active"
    payment_plan: Optional[PaymentPlan] = None

    model_config = ConfigDict(from_attributes=True)


class OneTimeDue(BaseModel):
    kind: Literal["one_time"] = "one_time"
    amount: Decimal
    amount_input: str
    read_only: bool = True


class MonthOption(BaseModel):
    key: str
    label: str


class MonthlyDue(BaseModel):
    kind: Literal["monthly"] = "monthly"
    monthly_amount: Decimal
    months: List[MonthOption]
    selected_month: Optional[str] = None
    # Unset until a month is picked
    amount_input: Optional[str] = None
    read_only: bool = True


class InstallmentDue(BaseModel):
    kind: Literal["installment"] = "installment"
    installment: Optional[Installment] = None
    amount_input: Optional[str] = None
    read_only: bool = True


AmountDue = Annotated[Union[OneTimeDue, MonthlyDue, InstallmentDue], Field(discriminator="kind")]


class FeePlanResolution(BaseModel):
    student_id: str
    state: str = "loaded"
    payment_plan_id: Optional[str] = None
    # Unset when the student has nothing billable this year
    plan_type: Optional[Literal["one_time", "monthly", "installment"]] = None
    total_due: Optional[Decimal] = None
    paid_amount: Optional[Decimal] = None
    total_due_display: Optional[str] = None
    due: Optional[AmountDue] = None
    empty_state: Optional[EmptyState] = None
