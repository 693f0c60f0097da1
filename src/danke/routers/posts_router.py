# danke/routers/posts_router.py
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Optional
from pydantic import BaseModel

from danke.authentication import require_identity, verify_token
from danke.dependencies import get_moderation_service, get_posting_service, get_posts_repository
from danke.exceptions import DankeException, status_code_for
from danke.models.post import ModeratePostForm, Post, PostCreate, PostUpdateForm
from danke.policy.access import UserIdentity
from danke.repositories.posts_repository import PostsRepository
from danke.services.moderation_service import ModerationService
from danke.services.posting_service import PostingService

router = APIRouter(prefix="/posts", tags=["Posts"], dependencies=[Depends(verify_token)])


class ModeratePostResponse(BaseModel):
    success: bool
    post_id: str
    moderation_status: str
    moderation_reason: Optional[str] = None
    is_deleted: bool


@router.post("/", response_model=Post, status_code=status.HTTP_201_CREATED)
async def create_post(
    post: PostCreate,
    identity: UserIdentity = Depends(require_identity),
    posting_service: PostingService = Depends(get_posting_service),
):
    try:
        return posting_service.create_post(post, identity)
    except DankeException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.put("/{post_id}", response_model=Post)
async def update_post(
    post_id: str,
    post: PostUpdateForm,
    identity: UserIdentity = Depends(require_identity),
    posting_service: PostingService = Depends(get_posting_service),
):
    try:
        return posting_service.update_post(post_id, post, identity)
    except DankeException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)


@router.delete("/{post_id}", response_model=dict)
async def delete_post(
    post_id: str,
    identity: UserIdentity = Depends(require_identity),
    posts_repository: PostsRepository = Depends(get_posts_repository),
):
    if not posts_repository.delete_post(post_id, identity.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Post not found or you can only delete your own posts",
        )
    return {"success": True}


@router.post("/{post_id}/moderate", response_model=ModeratePostResponse)
async def moderate_post(
    post_id: str,
    form_data: ModeratePostForm,
    identity: UserIdentity = Depends(require_identity),
    moderation_service: ModerationService = Depends(get_moderation_service),
):
    """
    Approve, request changes, schedule deletion or delete a post.
    The author is notified when the post is approved, rejected or hidden.
    """
    result, post = moderation_service.moderate_post(
        post_id,
        identity.id,
        form_data.action,
        reason=form_data.reason,
        delete_date=form_data.delete_date,
    )
    if not result.is_ok:
        raise HTTPException(
            status_code=status_code_for(result.error.kind),
            detail=result.error.message,
        )

    update = result.value
    return ModeratePostResponse(
        success=True,
        post_id=post.id,
        moderation_status=update.moderation_status.value,
        moderation_reason=update.moderation_reason,
        is_deleted=update.is_deleted,
    )
