# services/board_service.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional

from danke.exceptions import BoardNotFoundException
from danke.models.board import Board
from danke.models.post import Post, PostCreator, PostRead
from danke.models.user import User
from danke.policy.access import Identity
from danke.repositories.boards_repository import BoardsRepository
from danke.repositories.posts_repository import PostsRepository
from danke.services.access_service import AccessService, BoardAccessResult


@dataclass
class BoardView:
    board: Board
    access: BoardAccessResult
    posts: List[PostRead]


def to_post_read(post: Post, creator: Optional[User]) -> PostRead:
    if post.is_anonymous:
        author = PostCreator(name=post.anonymous_name or "Anonymous")
    elif creator is not None:
        author = PostCreator(id=creator.id, name=creator.name, avatar_url=creator.avatar_url)
    else:
        author = PostCreator(id=post.creator_id, name="Unknown User")
    return PostRead(
        id=post.id,
        board_id=post.board_id,
        content=post.content,
        media_urls=post.media_urls or [],
        is_anonymous=post.is_anonymous,
        anonymous_name=post.anonymous_name,
        moderation_status=post.moderation_status,
        created_at=post.created_at,
        updated_at=post.updated_at,
        creator=author,
    )


class BoardService:
    def __init__(self, boards_repository: BoardsRepository, posts_repository: PostsRepository,
                 access_service: AccessService):
        self.boards_repository = boards_repository
        self.posts_repository = posts_repository
        self.access_service = access_service

    def get_board_view(self, board_ref: str, user: Optional[Identity],
                       now: Optional[datetime] = None) -> BoardView:
        """
        Board by id or view token with its visible posts. Raises the access
        error matching the evaluator's decision when the caller may not see it.
        """
        board = self.boards_repository.get_board_by_ref(board_ref)
        if not board:
            raise BoardNotFoundException()
        return self._view(board, user, now)

    def get_board_for_posting(self, post_token: str, user: Optional[Identity],
                              now: Optional[datetime] = None) -> BoardView:
        board = self.boards_repository.get_board_by_post_token(post_token)
        if not board:
            raise BoardNotFoundException()
        return self._view(board, user, now)

    def _view(self, board: Any, user: Optional[Identity], now: Optional[datetime]) -> BoardView:
        access = self.access_service.check_board_access(board, user, now=now)
        access.raise_for_access()

        # Moderated boards only show approved posts to regular visitors
        approved_only = board.moderation_enabled and not access.can_moderate
        rows = self.posts_repository.get_board_posts(board.id, approved_only=approved_only)
        return BoardView(
            board=board,
            access=access,
            posts=[to_post_read(post, creator) for post, creator in rows],
        )
