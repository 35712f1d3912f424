from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from harakapay.schemas.dashboard import EmptyState, NotificationBadge


class Notification(BaseModel):
    id: str
    title: str = ""
    message: str = ""
    type: Optional[str] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    action_url: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class NotificationItem(BaseModel):
    notification: Notification
    date_display: Optional[str] = None


class NotificationListRead(BaseModel):
    state: str
    notifications: List[NotificationItem]
    unread_count: int
    has_more: bool
    badge: NotificationBadge
    empty_state: Optional[EmptyState] = None
