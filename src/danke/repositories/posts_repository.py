# repositories/posts_repository.py
from datetime import datetime, timedelta
from typing import List, Optional, Tuple
from loguru import logger
from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select, and_

from danke.database import get_engine
from danke.models.board import Board
from danke.models.enums import ModerationStatus
from danke.models.moderator import BoardModerator
from danke.models.post import Post, PostAttentionRead, PostUpdateForm
from danke.models.user import User
from danke.policy.moderation import (
    ModerationAction,
    ModerationParams,
    PostUpdate,
    Result,
    apply_moderation_action,
    apply_update,
)
from danke.policy.posts import EDIT_WINDOW, can_delete, ensure_can_edit
from danke.utils import as_utc, utcnow


class PostsRepository:
    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine or get_engine()

    def create_post(self, post: Post) -> Post:
        with Session(self.engine) as session:
            session.add(post)
            session.commit()
            session.refresh(post)
            return post

    def get_post(self, post_id: str, include_deleted: bool = False) -> Optional[Post]:
        with Session(self.engine) as session:
            post = session.get(Post, post_id)
            if post is None or (post.is_deleted and not include_deleted):
                return None
            return post

    def count_active_posts(self, board_id: str, creator_id: str) -> int:
        """
        Number of the user's posts on the board that are not soft-deleted,
        whatever their moderation status.
        """
        with Session(self.engine) as session:
            statement = select(func.count(Post.id)).where(
                and_(
                    Post.board_id == board_id,
                    Post.creator_id == creator_id,
                    Post.is_deleted == False,  # noqa: E712
                )
            )
            return session.exec(statement).one()

    def get_board_posts(self, board_id: str, approved_only: bool = False) -> List[Tuple[Post, Optional[User]]]:
        """
        Posts shown on a board, newest first. Soft-deleted posts never appear.
        """
        with Session(self.engine) as session:
            statement = (
                select(Post, User)
                .join(User, Post.creator_id == User.id, isouter=True)
                .where(and_(Post.board_id == board_id, Post.is_deleted == False))  # noqa: E712
                .order_by(Post.created_at.desc())
            )
            if approved_only:
                statement = statement.where(Post.moderation_status == ModerationStatus.APPROVED.value)
            return list(session.exec(statement).all())

    def get_user_posts(self, user_id: str) -> List[Post]:
        with Session(self.engine) as session:
            statement = (
                select(Post)
                .where(and_(Post.creator_id == user_id, Post.is_deleted == False))  # noqa: E712
                .order_by(Post.created_at.desc())
            )
            return list(session.exec(statement).all())

    def update_post(self, post_id: str, data: PostUpdateForm, user_id: str,
                    now: Optional[datetime] = None, edit_window: timedelta = EDIT_WINDOW) -> Post:
        """
        Author edit of content and media. Leaves the moderation status untouched.
        """
        with Session(self.engine) as session:
            post = session.get(Post, post_id)
            ensure_can_edit(post, user_id, now=now, window=edit_window)

            if data.content is not None:
                post.content = data.content.model_dump(exclude_none=True)
            if data.media_urls is not None:
                post.media_urls = [str(url) for url in data.media_urls]
            post.updated_at = utcnow()
            session.add(post)
            session.commit()
            session.refresh(post)
            return post

    def delete_post(self, post_id: str, user_id: str) -> bool:
        """
        Soft delete by the post author or the board creator.
        """
        with Session(self.engine) as session:
            post = session.get(Post, post_id)
            if post is None or post.is_deleted:
                return False
            board = session.get(Board, post.board_id)
            if board is None or not can_delete(post, board, user_id):
                return False

            post.is_deleted = True
            post.updated_at = utcnow()
            session.add(post)
            session.commit()
            return True

    def moderate_post(self, post_id: str, moderator_id: str, action: ModerationAction,
                      params: ModerationParams, now: Optional[datetime] = None) -> Tuple[Result[PostUpdate], Optional[Post]]:
        """
        Read the post, its board and the board's moderators, compute the
        transition and write it back, all within one session.
        """
        with Session(self.engine) as session:
            post = session.get(Post, post_id)
            board = session.get(Board, post.board_id) if post else None
            moderator_ids = []
            if board is not None:
                moderator_ids = list(session.exec(
                    select(BoardModerator.user_id).where(BoardModerator.board_id == board.id)
                ).all())

            result = apply_moderation_action(
                post, board, moderator_id, action, params,
                moderator_user_ids=moderator_ids, now=now,
            )
            if not result.is_ok:
                return result, post

            if not result.value.is_noop:
                apply_update(post, result.value)
                session.add(post)
                session.commit()
                session.refresh(post)
            return result, post

    def get_posts_needing_attention(self, board_id: str) -> List[PostAttentionRead]:
        with Session(self.engine) as session:
            statement = (
                select(Post, User)
                .join(User, Post.creator_id == User.id)
                .where(and_(Post.board_id == board_id, Post.is_deleted == False))  # noqa: E712
                .order_by(Post.created_at.desc())
            )
            return [
                PostAttentionRead(
                    id=post.id,
                    content=post.content,
                    creator_name=user.name,
                    created_at=post.created_at,
                    updated_at=post.updated_at,
                    moderation_status=post.moderation_status,
                    moderation_reason=post.moderation_reason,
                    delete_scheduled_date=post.delete_scheduled_date,
                )
                for post, user in session.exec(statement).all()
            ]

    def delete_due_posts(self, now: Optional[datetime] = None) -> List[Post]:
        """
        Soft delete every deletion-scheduled post whose date has been reached.
        """
        now = as_utc(now) or utcnow()
        with Session(self.engine) as session:
            statement = select(Post).where(
                and_(
                    Post.moderation_status == ModerationStatus.DELETION_SCHEDULED.value,
                    Post.is_deleted == False,  # noqa: E712
                    Post.delete_scheduled_date != None,  # noqa: E711
                )
            )
            due = [
                post for post in session.exec(statement).all()
                if as_utc(post.delete_scheduled_date) <= now
            ]
            for post in due:
                post.is_deleted = True
                post.moderation_status = ModerationStatus.DELETED.value
                post.updated_at = now
                session.add(post)
            session.commit()
            for post in due:
                session.refresh(post)
            if due:
                logger.info(f"Deleted {len(due)} posts whose scheduled deletion date passed")
            return due

