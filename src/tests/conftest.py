"""
Shared fixtures: an in-memory database per test and a FastAPI client wired to it.
"""
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from danke.config import Settings, get_settings
from danke.database import create_db_and_tables
from danke.dependencies import get_db_engine
from danke.main import app
from danke.models.board import BoardCreate
from danke.policy.access import UserIdentity
from danke.repositories.boards_repository import BoardsRepository
from danke.repositories.moderators_repository import ModeratorsRepository
from danke.repositories.notifications_repository import NotificationsRepository
from danke.repositories.posts_repository import PostsRepository
from danke.repositories.users_repository import UsersRepository
from danke.utils import utcnow


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", secret_token=None)


@pytest.fixture
def users_repository(engine):
    return UsersRepository(engine)


@pytest.fixture
def boards_repository(engine):
    return BoardsRepository(engine)


@pytest.fixture
def posts_repository(engine):
    return PostsRepository(engine)


@pytest.fixture
def moderators_repository(engine):
    return ModeratorsRepository(engine)


@pytest.fixture
def notifications_repository(engine):
    return NotificationsRepository(engine)


@pytest.fixture
def creator(users_repository):
    user = users_repository.sync_user("user_creator", "creator@acme.com", name="Carla Creator")
    return UserIdentity(id=user.id, email=user.email, name=user.name)


@pytest.fixture
def member(users_repository):
    user = users_repository.sync_user("user_member", "member@acme.com", name="Mika Member")
    return UserIdentity(id=user.id, email=user.email, name=user.name)


@pytest.fixture
def outsider(users_repository):
    user = users_repository.sync_user("user_outsider", "someone@other.org", name="Otto Outsider")
    return UserIdentity(id=user.id, email=user.email, name=user.name)


@pytest.fixture
def board(boards_repository, creator):
    return boards_repository.create_board(
        BoardCreate(title="Thank you, Ada!", recipient_name="Ada"),
        creator_id=creator.id,
    )


@pytest.fixture
def moderated_board(boards_repository, creator):
    return boards_repository.create_board(
        BoardCreate(
            title="Farewell Grace",
            recipient_name="Grace",
            board_type="farewell",
            moderation_enabled=True,
            expiration_date=utcnow() + timedelta(days=30),
        ),
        creator_id=creator.id,
    )


@pytest.fixture
def client(engine, settings):
    app.dependency_overrides[get_db_engine] = lambda: engine
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def headers_for(identity):
    return {
        "X-User-Id": identity.id,
        "X-User-Email": identity.email,
        "X-User-Name": identity.name,
    }


def doc(text):
    return {
        "type": "doc",
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": text}]}],
    }
