# services/moderation_service.py
from datetime import datetime
from typing import List, Optional, Tuple, Union

from loguru import logger

from danke.models.post import Post
from danke.policy.moderation import (
    ModerationAction,
    ModerationParams,
    PostUpdate,
    Result,
)
from danke.repositories.boards_repository import BoardsRepository
from danke.repositories.posts_repository import PostsRepository
from danke.services.notification_service import NotificationService


class ModerationService:
    def __init__(self, posts_repository: PostsRepository, boards_repository: BoardsRepository,
                 notification_service: NotificationService):
        self.posts_repository = posts_repository
        self.boards_repository = boards_repository
        self.notification_service = notification_service

    def moderate_post(self, post_id: str, moderator_id: str, action: Union[str, ModerationAction],
                      reason: Optional[str] = None, delete_date: Optional[datetime] = None,
                      now: Optional[datetime] = None) -> Tuple[Result[PostUpdate], Optional[Post]]:
        """Apply one moderation action and notify the author when the status changed.

        Returns the ``Ok``/``Err`` result of the transition together with the
        post as stored afterwards.
        """
        params = ModerationParams(reason=reason, delete_date=delete_date)
        result, post = self.posts_repository.moderate_post(post_id, moderator_id, action, params, now=now)

        if not result.is_ok:
            logger.warning(f"Moderation '{action}' on post {post_id} by {moderator_id} refused: {result.error.message}")
            return result, post

        update = result.value
        if update.is_noop:
            logger.info(f"Post {post_id} was already deleted, nothing to do")
            return result, post

        logger.info(f"Post {post_id} moved to {update.moderation_status.value} by {moderator_id}")
        if update.notification_type is not None:
            board = self.boards_repository.get_board(post.board_id)
            self.notification_service.notify_moderation(
                post, board, update.notification_type, update.moderation_reason
            )
        return result, post

    def approve(self, post_id: str, moderator_id: str, now: Optional[datetime] = None):
        return self.moderate_post(post_id, moderator_id, ModerationAction.APPROVE, now=now)

    def request_change(self, post_id: str, moderator_id: str, reason: str, now: Optional[datetime] = None):
        return self.moderate_post(post_id, moderator_id, ModerationAction.REQUEST_CHANGE, reason=reason, now=now)

    def schedule_deletion(self, post_id: str, moderator_id: str, delete_date: datetime,
                          reason: Optional[str] = None, now: Optional[datetime] = None):
        return self.moderate_post(
            post_id, moderator_id, ModerationAction.SCHEDULE_DELETION,
            reason=reason, delete_date=delete_date, now=now,
        )

    def delete(self, post_id: str, moderator_id: str, reason: Optional[str] = None,
               now: Optional[datetime] = None):
        return self.moderate_post(post_id, moderator_id, ModerationAction.DELETE, reason=reason, now=now)

    def process_scheduled_deletions(self, now: Optional[datetime] = None) -> List[str]:
        """Run by a periodic job: soft delete posts whose deletion date has passed."""
        return [post.id for post in self.posts_repository.delete_due_posts(now)]
