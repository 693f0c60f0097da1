# policy/posts.py
from datetime import datetime, timedelta
from typing import Any, Optional

from danke.exceptions import ForbiddenException, NotFoundException, ValidationException
from danke.models.enums import ModerationStatus
from danke.utils import as_utc, utcnow

EDIT_WINDOW = timedelta(minutes=10)


def initial_moderation_status(board: Any) -> ModerationStatus:
    if board.moderation_enabled:
        return ModerationStatus.PENDING
    return ModerationStatus.APPROVED


def within_edit_window(post: Any, now: Optional[datetime] = None, window: timedelta = EDIT_WINDOW) -> bool:
    now = as_utc(now) or utcnow()
    return now - as_utc(post.created_at) <= window


def ensure_can_edit(post: Optional[Any], user_id: str, now: Optional[datetime] = None,
                    window: timedelta = EDIT_WINDOW) -> None:
    """Authors may edit their own post for a short time after creating it.

    Editing is independent of moderation: the moderation status is left as is.
    """
    if post is None or post.is_deleted or post.creator_id != user_id:
        raise NotFoundException("Post not found or you can only edit your own posts")
    if not within_edit_window(post, now, window):
        minutes = int(window.total_seconds() // 60)
        raise ForbiddenException(f"Posts can only be edited within {minutes} minutes of creation")


def can_delete(post: Any, board: Any, user_id: str) -> bool:
    """The author and the board creator may remove a post."""
    return post.creator_id == user_id or board.creator_id == user_id


def ensure_anonymous_allowed(board: Any, is_anonymous: bool) -> None:
    if is_anonymous and not board.allow_anonymous:
        raise ValidationException("Anonymous posts are not allowed on this board")
