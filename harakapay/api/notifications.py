"""Parent notifications: list, unread badge, mark read and delete."""

from fastapi import APIRouter, Depends, Query, Response, status

from harakapay.clients.web_api import WebApiClient
from harakapay.dependencies.remote import get_language, get_web_api_client
from harakapay.schemas.dashboard import NotificationBadge
from harakapay.schemas.notification import NotificationListRead
from harakapay.services.notifications import list_notifications, unread_badge

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListRead)
def read_notifications(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    unread_only: bool = False,
    web: WebApiClient = Depends(get_web_api_client),
    language: str = Depends(get_language),
):
    return list_notifications(web, limit=limit, offset=offset, unread_only=unread_only, language=language)


@router.get("/badge", response_model=NotificationBadge)
def read_notification_badge(web: WebApiClient = Depends(get_web_api_client)):
    return unread_badge(web)


@router.post("/mark-all-read", status_code=status.HTTP_204_NO_CONTENT)
def mark_all_read(web: WebApiClient = Depends(get_web_api_client)):
    web.mark_all_notifications_read()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_read(notification_id: str, web: WebApiClient = Depends(get_web_api_client)):
    web.mark_notification_read(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notification(notification_id: str, web: WebApiClient = Depends(get_web_api_client)):
    web.delete_notification(notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
