# services/notification_service.py
from typing import Any, List, Optional

from loguru import logger

from danke.models.enums import NotificationType
from danke.models.notification import Notification
from danke.repositories.notifications_repository import NotificationsRepository


def build_moderation_notification(post: Any, board: Any, notification_type: NotificationType,
                                  reason: Optional[str] = None) -> Notification:
    """Message sent to a post's author after a moderator acted on it."""
    if notification_type == NotificationType.POST_APPROVED:
        title = "Post Approved"
        message = f'Your post on "{board.title}" has been approved and is now visible.'
    elif notification_type == NotificationType.POST_REJECTED:
        title = "Post Rejected"
        message = f'Your post on "{board.title}" has been rejected' + (f": {reason}" if reason else ".")
    else:
        title = "Post Hidden"
        message = f'Your post on "{board.title}" has been hidden' + (f": {reason}" if reason else ".")

    return Notification(
        user_id=post.creator_id,
        type=notification_type.value,
        title=title,
        message=message,
        post_id=post.id,
        board_id=board.id,
    )


class NotificationService:
    def __init__(self, notifications_repository: NotificationsRepository):
        self.notifications_repository = notifications_repository

    def notify_moderation(self, post: Any, board: Any, notification_type: NotificationType,
                          reason: Optional[str] = None) -> Notification:
        notification = self.notifications_repository.create_notification(
            build_moderation_notification(post, board, notification_type, reason)
        )
        logger.info(f"Sent {notification_type.value} notification to {post.creator_id} for post {post.id}")
        return notification

    def get_user_notifications(self, user_id: str, limit: int = 50, offset: int = 0) -> List[Notification]:
        return self.notifications_repository.get_user_notifications(user_id, limit=limit, offset=offset)

    def get_unread_count(self, user_id: str) -> int:
        return self.notifications_repository.get_unread_count(user_id)

    def mark_as_read(self, notification_id: str, user_id: str) -> bool:
        return self.notifications_repository.mark_as_read(notification_id, user_id)

    def mark_all_as_read(self, user_id: str) -> int:
        return self.notifications_repository.mark_all_as_read(user_id)
