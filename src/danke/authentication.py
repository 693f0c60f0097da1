# danke/authentication.py
from typing import Optional
from fastapi import Depends, Header, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from danke.config import Settings, get_settings
from danke.dependencies import get_users_repository
from danke.exceptions import DankeException
from danke.policy.access import UserIdentity
from danke.repositories.users_repository import UsersRepository

# Define API key security scheme
API_KEY_NAME = "X-API-Key"
api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)


def verify_token(
    x_token: Optional[str] = Security(api_key_header),
    settings: Settings = Depends(get_settings),
):
    # No configured secret means a local setup without the gateway in front
    if settings.secret_token and x_token != settings.secret_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing token",
        )


def get_current_identity(
    x_user_id: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
    x_user_name: Optional[str] = Header(default=None),
    users_repository: UsersRepository = Depends(get_users_repository),
) -> Optional[UserIdentity]:
    """
    Identity already resolved by the identity provider in front of the service.
    The user is mirrored locally so that boards, posts and moderators can refer to it.
    """
    if not x_user_id:
        return None

    user = users_repository.get_user(x_user_id)
    if x_user_email:
        email = x_user_email.strip().lower()
        if user is None or user.email != email or (x_user_name and user.name != x_user_name):
            try:
                user = users_repository.sync_user(x_user_id, email, name=x_user_name)
            except DankeException as e:
                raise HTTPException(status_code=e.status_code, detail=e.message)
    elif user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    return UserIdentity(id=user.id, email=user.email, name=user.name)


def require_identity(identity: Optional[UserIdentity] = Depends(get_current_identity)) -> UserIdentity:
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return identity
