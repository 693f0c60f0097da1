# danke/routers/boards_router.py

from fastapi import APIRouter, Depends, HTTPException, status
from typing import List, Optional
from loguru import logger
from pydantic import BaseModel

from danke.authentication import get_current_identity, require_identity, verify_token
from danke.dependencies import (
    get_board_service,
    get_boards_repository,
    get_posting_service,
)
from danke.exceptions import DankeException
from danke.models.board import BoardCreate, BoardRead, BoardSummary, BoardUpdate
from danke.models.post import PostRead
from danke.policy.access import UserIdentity
from danke.policy.posting import parse_max_posts
from danke.repositories.boards_repository import BoardsRepository
from danke.services.board_service import BoardService, BoardView
from danke.services.posting_service import PostingService

router = APIRouter(prefix="/boards", tags=["Boards"], dependencies=[Depends(verify_token)])


class BoardPageResponse(BaseModel):
    board: BoardSummary
    posts: List[PostRead]
    is_creator: bool = False
    is_moderator: bool = False


class PostingPermissionsResponse(BaseModel):
    can_post: bool
    reason: Optional[str] = None
    posting_mode: str
    max_posts: Optional[int] = None
    post_count: int = 0
    allow_anonymous: bool


def _page(view: BoardView) -> BoardPageResponse:
    return BoardPageResponse(
        board=BoardSummary.model_validate(view.board, from_attributes=True),
        posts=view.posts,
        is_creator=view.access.is_creator,
        is_moderator=view.access.is_moderator,
    )


@router.post("/", response_model=BoardRead, status_code=status.HTTP_201_CREATED)
async def create_board(
    board: BoardCreate,
    identity: UserIdentity = Depends(require_identity),
    boards_repository: BoardsRepository = Depends(get_boards_repository),
):
    try:
        return boards_repository.create_board(board, creator_id=identity.id)
    except DankeException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/mine", response_model=List[BoardRead])
async def get_my_boards(
    identity: UserIdentity = Depends(require_identity),
    boards_repository: BoardsRepository = Depends(get_boards_repository),
):
    return boards_repository.get_boards_by_creator(identity.id)


@router.get("/post/{post_token}", response_model=BoardPageResponse)
async def get_board_for_posting(
    post_token: str,
    identity: Optional[UserIdentity] = Depends(get_current_identity),
    board_service: BoardService = Depends(get_board_service),
):
    try:
        return _page(board_service.get_board_for_posting(post_token, identity))
    except DankeException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.get("/{board_ref}", response_model=BoardPageResponse)
async def get_board(
    board_ref: str,
    identity: Optional[UserIdentity] = Depends(get_current_identity),
    board_service: BoardService = Depends(get_board_service),
):
    """Board by id or view token, with the posts the caller may see."""
    try:
        return _page(board_service.get_board_view(board_ref, identity))
    except DankeException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{board_id}", response_model=BoardRead)
async def update_board(
    board_id: str,
    board: BoardUpdate,
    identity: UserIdentity = Depends(require_identity),
    boards_repository: BoardsRepository = Depends(get_boards_repository),
):
    try:
        return boards_repository.update_board(board_id, board, user_id=identity.id)
    except DankeException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.exception(f"Error updating board {board_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update board")


@router.get("/{board_id}/posting-permissions", response_model=PostingPermissionsResponse)
async def get_posting_permissions(
    board_id: str,
    identity: UserIdentity = Depends(require_identity),
    posting_service: PostingService = Depends(get_posting_service),
):
    try:
        board, limits = posting_service.check_posting_limits(board_id, identity)
    except DankeException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return PostingPermissionsResponse(
        can_post=limits.is_allowed,
        reason=limits.reason,
        posting_mode=board.posting_mode,
        max_posts=parse_max_posts(board.max_posts_per_user),
        post_count=limits.post_count,
        allow_anonymous=board.allow_anonymous,
    )
