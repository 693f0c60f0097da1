# danke/dependencies.py
from fastapi import Depends
from sqlalchemy.engine import Engine

from danke.config import Settings, get_settings
from danke.database import get_engine
from danke.repositories.boards_repository import BoardsRepository
from danke.repositories.moderators_repository import ModeratorsRepository
from danke.repositories.notifications_repository import NotificationsRepository
from danke.repositories.posts_repository import PostsRepository
from danke.repositories.users_repository import UsersRepository
from danke.services.access_service import AccessService
from danke.services.board_service import BoardService
from danke.services.moderation_service import ModerationService
from danke.services.notification_service import NotificationService
from danke.services.posting_service import PostingService


def get_db_engine() -> Engine:
    return get_engine()


def get_users_repository(engine: Engine = Depends(get_db_engine)) -> UsersRepository:
    return UsersRepository(engine)


def get_boards_repository(engine: Engine = Depends(get_db_engine),
                          settings: Settings = Depends(get_settings)) -> BoardsRepository:
    return BoardsRepository(engine, multi_step_boards=settings.multi_step_boards)


def get_posts_repository(engine: Engine = Depends(get_db_engine)) -> PostsRepository:
    return PostsRepository(engine)


def get_moderators_repository(engine: Engine = Depends(get_db_engine)) -> ModeratorsRepository:
    return ModeratorsRepository(engine)


def get_notifications_repository(engine: Engine = Depends(get_db_engine)) -> NotificationsRepository:
    return NotificationsRepository(engine)


def get_access_service(
    moderators_repository: ModeratorsRepository = Depends(get_moderators_repository),
) -> AccessService:
    return AccessService(moderators_repository)


def get_notification_service(
    notifications_repository: NotificationsRepository = Depends(get_notifications_repository),
) -> NotificationService:
    return NotificationService(notifications_repository)


def get_board_service(
    boards_repository: BoardsRepository = Depends(get_boards_repository),
    posts_repository: PostsRepository = Depends(get_posts_repository),
    access_service: AccessService = Depends(get_access_service),
) -> BoardService:
    return BoardService(boards_repository, posts_repository, access_service)


def get_posting_service(
    boards_repository: BoardsRepository = Depends(get_boards_repository),
    posts_repository: PostsRepository = Depends(get_posts_repository),
    access_service: AccessService = Depends(get_access_service),
    settings: Settings = Depends(get_settings),
) -> PostingService:
    return PostingService(boards_repository, posts_repository, access_service, settings)


def get_moderation_service(
    posts_repository: PostsRepository = Depends(get_posts_repository),
    boards_repository: BoardsRepository = Depends(get_boards_repository),
    notification_service: NotificationService = Depends(get_notification_service),
) -> ModerationService:
    return ModerationService(posts_repository, boards_repository, notification_service)
