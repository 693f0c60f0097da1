# danke/routers/users_router.py
from fastapi import APIRouter, Depends
from typing import List

from danke.authentication import require_identity, verify_token
from danke.dependencies import get_posts_repository, get_users_repository
from danke.models.post import Post
from danke.models.user import UserRead, UserSync
from danke.policy.access import UserIdentity
from danke.repositories.posts_repository import PostsRepository
from danke.repositories.users_repository import UsersRepository

router = APIRouter(prefix="/users", tags=["Users"], dependencies=[Depends(verify_token)])


@router.post("/sync", response_model=UserRead)
async def sync_user(
    profile: UserSync,
    identity: UserIdentity = Depends(require_identity),
    users_repository: UsersRepository = Depends(get_users_repository),
):
    """Refresh the local copy of the caller's profile."""
    return users_repository.sync_user(
        identity.id, identity.email, name=profile.name, avatar_url=profile.avatar_url
    )


@router.get("/me", response_model=UserRead)
async def get_me(
    identity: UserIdentity = Depends(require_identity),
    users_repository: UsersRepository = Depends(get_users_repository),
):
    return users_repository.get_user(identity.id)


@router.get("/me/posts", response_model=List[Post])
async def get_my_posts(
    identity: UserIdentity = Depends(require_identity),
    posts_repository: PostsRepository = Depends(get_posts_repository),
):
    return posts_repository.get_user_posts(identity.id)
