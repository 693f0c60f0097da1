# danke/routers/notifications_router.py
from fastapi import APIRouter, Depends, HTTPException, Query, status

from danke.authentication import require_identity, verify_token
from danke.dependencies import get_notification_service
from danke.models.notification import NotificationList
from danke.policy.access import UserIdentity
from danke.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"], dependencies=[Depends(verify_token)])


@router.get("/", response_model=NotificationList)
async def get_notifications(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    identity: UserIdentity = Depends(require_identity),
    notification_service: NotificationService = Depends(get_notification_service),
):
    return NotificationList(
        notifications=notification_service.get_user_notifications(identity.id, limit=limit, offset=offset),
        unread_count=notification_service.get_unread_count(identity.id),
    )


@router.post("/read-all", response_model=dict)
async def mark_all_notifications_read(
    identity: UserIdentity = Depends(require_identity),
    notification_service: NotificationService = Depends(get_notification_service),
):
    return {"success": True, "updated": notification_service.mark_all_as_read(identity.id)}


@router.post("/{notification_id}/read", response_model=dict)
async def mark_notification_read(
    notification_id: str,
    identity: UserIdentity = Depends(require_identity),
    notification_service: NotificationService = Depends(get_notification_service),
):
    if not notification_service.mark_as_read(notification_id, identity.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notification not found")
    return {"success": True}
