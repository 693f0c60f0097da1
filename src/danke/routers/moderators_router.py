# danke/routers/moderators_router.py
from fastapi import APIRouter, Depends, HTTPException, status
from typing import List
from pydantic import BaseModel

from danke.authentication import require_identity, verify_token
from danke.dependencies import get_moderators_repository, get_posts_repository
from danke.exceptions import DankeException
from danke.models.moderator import BoardModerator, ModeratedBoardRead, ModeratorRead
from danke.models.post import PostAttentionRead
from danke.models.user import EmailRequestForm
from danke.policy.access import UserIdentity
from danke.repositories.moderators_repository import ModeratorsRepository
from danke.repositories.posts_repository import PostsRepository

router = APIRouter(tags=["Moderators"], dependencies=[Depends(verify_token)])


class ModeratorListResponse(BaseModel):
    moderators: List[ModeratorRead]


class AddModeratorResponse(BaseModel):
    moderator: BoardModerator


class ModerationQueueResponse(BaseModel):
    posts: List[PostAttentionRead]


@router.get("/boards/{board_id}/moderators", response_model=ModeratorListResponse)
async def get_board_moderators(
    board_id: str,
    identity: UserIdentity = Depends(require_identity),
    moderators_repository: ModeratorsRepository = Depends(get_moderators_repository),
):
    """Moderators may see who else moderates the board."""
    if not moderators_repository.has_moderator_permissions(board_id, identity.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to view moderators for this board",
        )
    return ModeratorListResponse(moderators=moderators_repository.get_board_moderators(board_id))


@router.post("/boards/{board_id}/moderators", response_model=AddModeratorResponse,
             status_code=status.HTTP_201_CREATED)
async def add_board_moderator(
    board_id: str,
    form_data: EmailRequestForm,
    identity: UserIdentity = Depends(require_identity),
    moderators_repository: ModeratorsRepository = Depends(get_moderators_repository),
):
    try:
        moderator = moderators_repository.add_moderator(board_id, form_data.email, added_by=identity.id)
        return AddModeratorResponse(moderator=moderator)
    except DankeException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/boards/{board_id}/moderators/{user_id}", response_model=dict)
async def remove_board_moderator(
    board_id: str,
    user_id: str,
    identity: UserIdentity = Depends(require_identity),
    moderators_repository: ModeratorsRepository = Depends(get_moderators_repository),
):
    try:
        removed = moderators_repository.remove_moderator(board_id, user_id, removed_by=identity.id)
    except DankeException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Moderator not found or already removed",
        )
    return {"success": True}


@router.get("/boards/{board_id}/moderation", response_model=ModerationQueueResponse)
async def get_moderation_queue(
    board_id: str,
    identity: UserIdentity = Depends(require_identity),
    moderators_repository: ModeratorsRepository = Depends(get_moderators_repository),
    posts_repository: PostsRepository = Depends(get_posts_repository),
):
    if not moderators_repository.has_moderator_permissions(board_id, identity.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have moderation permissions for this board",
        )
    return ModerationQueueResponse(posts=posts_repository.get_posts_needing_attention(board_id))


@router.get("/users/me/moderated-boards", response_model=List[ModeratedBoardRead])
async def get_my_moderated_boards(
    identity: UserIdentity = Depends(require_identity),
    moderators_repository: ModeratorsRepository = Depends(get_moderators_repository),
):
    return moderators_repository.get_user_moderated_boards(identity.id)
