"""Parent notifications read through the web API."""

from harakapay.clients.web_api import WebApiClient
from harakapay.schemas.dashboard import NotificationBadge
from harakapay.schemas.notification import Notification, NotificationItem, NotificationListRead
from harakapay.services.formatting import format_datetime
from harakapay.services.presenters import empty_state, notification_badge, view_state


def _notification(row: dict) -> Notification:
    fields = {k: v for k, v in row.items() if k in Notification.model_fields}
    fields["id"] = str(row["id"])
    return Notification.model_validate(fields)


def list_notifications(
    web: WebApiClient,
    *,
    limit: int = 20,
    offset: int = 0,
    unread_only: bool = False,
    language: str = "fr",
) -> NotificationListRead:
    data = web.list_notifications(limit=limit, offset=offset, unread_only=unread_only)
    notifications = [_notification(row) for row in data.get("notifications") or [] if row.get("id") is not None]
    items = [
        NotificationItem(
            notification=n,
            date_display=format_datetime(n.created_at, language) if n.created_at else None,
        )
        for n in notifications
    ]
    unread_count = int(data.get("unreadCount") or 0)
    state = view_state(items)
    return NotificationListRead(
        state=state,
        notifications=items,
        unread_count=unread_count,
        has_more=bool(data.get("hasMore")),
        badge=notification_badge(unread_count),
        empty_state=empty_state("no_notifications", language) if state == "empty" else None,
    )


def unread_badge(web: WebApiClient) -> NotificationBadge:
    data = web.list_notifications(limit=1, unread_only=True)
    return notification_badge(int(data.get("unreadCount") or 0))
