"""Fee categories and payment schedules published by the web API."""

from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from harakapay.schemas.dashboard import EmptyState


class FeeCategory(BaseModel):
    id: str
    name: str = ""
    description: Optional[str] = None
    amount: Decimal = Decimal("0")
    remaining_balance: Optional[Decimal] = None
    is_mandatory: bool = False
    supports_recurring: bool = False
    supports_one_time: bool = False
    category_type: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ScheduleInstallment(BaseModel):
    id: str
    installment_number: int = 0
    name: str = ""
    amount: Decimal = Decimal("0")
    percentage: Optional[Decimal] = None
    due_date: Optional[date] = None
    term_id: Optional[str] = None
    is_active: bool = False
    paid: bool = False


class PaymentSchedule(BaseModel):
    id: str
    name: str = ""
    schedule_type: str = ""
    discount_percentage: Decimal = Decimal("0")
    template_name: Optional[str] = None
    installments: List[ScheduleInstallment] = Field(default_factory=list)


class PaymentOption(BaseModel):
    key: Literal["one_time", "recurring"]
    label: str


class FeeCategoryCard(BaseModel):
    category: FeeCategory
    amount_display: str
    payment_options: List[PaymentOption]


class StudentFeesRead(BaseModel):
    student_id: str
    state: str
    categories: List[FeeCategoryCard]
    schedules: List[PaymentSchedule]
    empty_state: Optional[EmptyState] = None
