"""Fee categories and payment schedules for one student.

The web API answers for every student linked to the parent at once; the
student's entry is picked out here.
"""

import logging
from decimal import Decimal

from harakapay.clients.web_api import WebApiClient
from harakapay.core.i18n import translate
from harakapay.schemas.fee_schedule import (
    FeeCategory,
    FeeCategoryCard,
    PaymentOption,
    PaymentSchedule,
    ScheduleInstallment,
    StudentFeesRead,
)
from harakapay.services.formatting import format_currency
from harakapay.services.presenters import empty_state

logger = logging.getLogger(__name__)


class FeeCategoryNotFound(Exception):
    pass


def _decimal(value, default=None):
    if value is None or value == "":
        return default
    return Decimal(str(value))


def parse_category(row: dict) -> FeeCategory:
    return FeeCategory(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        description=row.get("description"),
        amount=_decimal(row.get("amount"), Decimal("0")),
        remaining_balance=_decimal(row.get("remaining_balance")),
        is_mandatory=bool(row.get("is_mandatory")),
        supports_recurring=bool(row.get("supports_recurring")),
        supports_one_time=bool(row.get("supports_one_time")),
        category_type=row.get("category_type"),
    )


def parse_schedule(row: dict) -> PaymentSchedule:
    installments = [
        ScheduleInstallment(
            id=str(i.get("id")),
            installment_number=int(i.get("installment_number") or 0),
            name=str(i.get("name") or i.get("label") or ""),
            amount=_decimal(i.get("amount"), Decimal("0")),
            percentage=_decimal(i.get("percentage")),
            due_date=i.get("due_date") or None,
            term_id=i.get("term_id"),
            is_active=bool(i.get("is_active")),
            paid=bool(i.get("paid")),
        )
        for i in row.get("installments") or []
    ]
    return PaymentSchedule(
        id=str(row["id"]),
        name=str(row.get("name") or ""),
        schedule_type=str(row.get("schedule_type") or ""),
        discount_percentage=_decimal(row.get("discount_percentage"), Decimal("0")),
        template_name=row.get("template_name"),
        installments=installments,
    )


def payment_options(category: FeeCategory, language: str = "fr") -> list[PaymentOption]:
    keys = []
    if category.supports_one_time:
        keys.append("one_time")
    if category.supports_recurring:
        keys.append("recurring")
    return [PaymentOption(key=k, label=translate(f"student.payment_options.{k}", language)) for k in keys]


def category_card(category: FeeCategory, language: str = "fr") -> FeeCategoryCard:
    return FeeCategoryCard(
        category=category,
        amount_display=format_currency(category.amount, language),
        payment_options=payment_options(category, language),
    )


def _student_entry(fees: list, student_id: str) -> dict | None:
    for entry in fees:
        if isinstance(entry, dict) and str((entry.get("student") or {}).get("id")) == student_id:
            return entry
    return None


def student_fees(web: WebApiClient, student_id: str, language: str = "fr") -> StudentFeesRead:
    entry = _student_entry(web.student_fees(), student_id)
    if entry is None:
        logger.info("No fee data published for student %s", student_id)
        entry = {}
    categories = [category_card(parse_category(c), language) for c in entry.get("fee_categories") or []]
    schedules = [parse_schedule(s) for s in entry.get("payment_schedules") or []]
    empty = not categories and not schedules
    return StudentFeesRead(
        student_id=student_id,
        state="empty" if empty else "loaded",
        categories=categories,
        schedules=schedules,
        empty_state=empty_state("no_fees", language) if empty else None,
    )


def fee_category(web: WebApiClient, student_id: str, category_id: str, language: str = "fr") -> FeeCategoryCard:
    fees = student_fees(web, student_id, language)
    for card in fees.categories:
        if card.category.id == category_id:
            return card
    raise FeeCategoryNotFound(f"Fee category {category_id} not found for student {student_id}")
