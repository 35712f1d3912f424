"""View models for the cards, badges and empty states the client renders."""

from harakapay.core.i18n import translate
from harakapay.core.theme import COLORS
from harakapay.schemas.dashboard import ChildCard, EmptyState, NotificationBadge, StatusBadge
from harakapay.schemas.student import LinkedStudent

STATUS_ICONS = {
    "completed": "checkmark-circle",
    "pending": "time",
    "failed": "close-circle",
}
STATUS_COLORS = {
    "completed": COLORS["success"],
    "pending": COLORS["warning"],
    "failed": COLORS["danger"],
}
EMPTY_STATE_KEYS = {
    "no_children": "dashboard.empty.no_children",
    "no_payments": "payment.empty.no_payments",
    "no_fees": "student.empty.no_fees",
    "no_notifications": "notifications.empty.no_notifications",
}


def child_card(student: LinkedStudent, language: str = "fr") -> ChildCard:
    first = student.first_name or translate("student.unknown_first_name", language)
    last = student.last_name or translate("student.unknown_last_name", language)
    initials = (student.first_name or "S")[:1] + (student.last_name or "T")[:1]
    return ChildCard(
        student_id=student.id,
        display_name=f"{first} {last}",
        initials=initials.upper(),
        grade_label=translate("student.grade", language, grade=student.grade_level) if student.grade_level else None,
        school_name=student.school_name,
        avatar_url=student.avatar_url,
    )


def empty_state(kind: str, language: str = "fr") -> EmptyState:
    base = EMPTY_STATE_KEYS[kind]
    return EmptyState(
        kind=kind,
        title=translate(f"{base}.title", language),
        message=translate(f"{base}.message", language),
        action_label=translate(f"{base}.action", language),
    )


def notification_badge(count: int) -> NotificationBadge:
    if count <= 0:
        return NotificationBadge(visible=False, text="")
    return NotificationBadge(visible=True, text="99+" if count > 99 else str(count))


def payment_status_badge(status: str, language: str = "fr") -> StatusBadge:
    known = status if status in STATUS_ICONS else "unknown"
    return StatusBadge(
        status=status,
        label=translate(f"payment.status.{known}", language),
        icon=STATUS_ICONS.get(status, "help-circle"),
        color=STATUS_COLORS.get(status, COLORS["muted"]),
    )


def view_state(items, error: str | None = None) -> str:
    if error:
        return "error"
    return "loaded" if items else "empty"
