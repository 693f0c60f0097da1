# repositories/users_repository.py
from typing import Optional
from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from danke.database import get_engine
from danke.exceptions import AlreadyExistsException
from danke.models.user import User
from danke.utils import utcnow


class UsersRepository:
    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine or get_engine()

    def get_user(self, user_id: str) -> Optional[User]:
        with Session(self.engine) as session:
            return session.get(User, user_id)

    def sync_user(self, user_id: str, email: str, name: Optional[str] = None,
                  avatar_url: Optional[str] = None) -> User:
        """
        Mirror an identity from the identity provider, creating or refreshing the local row.
        """
        with Session(self.engine) as session:
            user = session.get(User, user_id)
            if user is None:
                user = User(
                    id=user_id,
                    email=email.strip().lower(),
                    name=name or email.split("@")[0],
                    avatar_url=avatar_url,
                )
                logger.info(f"Mirroring new user {user_id}")
            else:
                user.email = email.strip().lower()
                if name:
                    user.name = name
                if avatar_url is not None:
                    user.avatar_url = avatar_url
                user.updated_at = utcnow()
            session.add(user)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                logger.error(f"Could not sync user {user_id}: {e}")
                raise AlreadyExistsException("Email is already registered to another user")
            session.refresh(user)
            return user
