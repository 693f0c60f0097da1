# services/posting_service.py
from datetime import datetime, timedelta
from typing import Any, Optional, Tuple

from loguru import logger

from danke.config import Settings
from danke.exceptions import BoardNotFoundException, ForbiddenException, ValidationException
from danke.models.post import Post, PostCreate, PostUpdateForm
from danke.policy.access import Identity
from danke.policy.content import screen_content
from danke.policy.posting import PostingLimitResult, evaluate_posting_limit
from danke.policy.posts import ensure_anonymous_allowed, initial_moderation_status
from danke.repositories.boards_repository import BoardsRepository
from danke.repositories.posts_repository import PostsRepository
from danke.services.access_service import AccessService
from danke.utils import extract_text


class PostingService:
    def __init__(self, boards_repository: BoardsRepository, posts_repository: PostsRepository,
                 access_service: AccessService, settings: Settings):
        self.boards_repository = boards_repository
        self.posts_repository = posts_repository
        self.access_service = access_service
        self.settings = settings

    def check_posting_limits(self, board_id: str, user: Identity,
                             now: Optional[datetime] = None) -> Tuple[Any, PostingLimitResult]:
        board = self.boards_repository.get_board(board_id)
        if not board:
            raise BoardNotFoundException()
        # Same access rules as viewing: creator and moderators pass the access lists
        access = self.access_service.check_board_access(board, user, now=now)
        post_count = self.posts_repository.count_active_posts(board.id, user.id)
        return board, evaluate_posting_limit(
            board, user, post_count, now=now, access=access.as_decision()
        )

    def create_post(self, data: PostCreate, user: Identity, now: Optional[datetime] = None) -> Post:
        board, limits = self.check_posting_limits(data.board_id, user, now=now)
        if not limits.is_allowed:
            raise ForbiddenException(limits.reason)

        ensure_anonymous_allowed(board, data.is_anonymous)

        if len(data.media_urls) > self.settings.max_media_per_post:
            raise ValidationException(
                f"Maximum {self.settings.max_media_per_post} media files allowed"
            )

        content = data.content.model_dump(exclude_none=True)
        if board.moderation_enabled:
            check = screen_content(extract_text(content))
            if not check.is_allowed:
                raise ValidationException(check.reason)

        post = Post(
            board_id=board.id,
            creator_id=user.id,
            content=content,
            media_urls=[str(url) for url in data.media_urls],
            is_anonymous=data.is_anonymous,
            anonymous_name=data.anonymous_name if data.is_anonymous else None,
            moderation_status=initial_moderation_status(board).value,
        )
        post = self.posts_repository.create_post(post)
        logger.info(f"Post {post.id} created on board {board.id} by {user.id}")
        return post

    def update_post(self, post_id: str, data: PostUpdateForm, user: Identity,
                    now: Optional[datetime] = None) -> Post:
        if data.media_urls is not None and len(data.media_urls) > self.settings.max_media_per_post:
            raise ValidationException(
                f"Maximum {self.settings.max_media_per_post} media files allowed"
            )
        return self.posts_repository.update_post(
            post_id, data, user.id, now=now,
            edit_window=timedelta(minutes=self.settings.post_edit_window_minutes),
        )
