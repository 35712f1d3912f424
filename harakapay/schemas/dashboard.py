from typing import List, Optional

from pydantic import BaseModel

from harakapay.schemas.parent import Parent


class ChildCard(BaseModel):
    student_id: str
    display_name: str
    initials: str
    grade_label: Optional[str] = None
    school_name: Optional[str] = None
    avatar_url: Optional[str] = None


class EmptyState(BaseModel):
    kind: str
    title: str
    message: str
    action_label: Optional[str] = None


class StatusBadge(BaseModel):
    status: str
    label: str
    icon: str
    color: str


class NotificationBadge(BaseModel):
    visible: bool
    text: str


class DashboardRead(BaseModel):
    parent: Parent
    greeting: str
    state: str
    children: List[ChildCard]
    empty_state: Optional[EmptyState] = None
