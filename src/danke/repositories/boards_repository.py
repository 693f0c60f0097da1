# repositories/boards_repository.py

from typing import List, Optional, Union
from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from danke.database import get_engine
from danke.exceptions import BoardNotFoundException, ForbiddenException, ValidationException
from danke.models.board import Board, BoardBasicCreate, BoardCreate, BoardUpdate
from danke.policy.board_config import validate_board_config
from danke.utils import utcnow


class BoardsRepository:
    def __init__(self, engine: Optional[Engine] = None, multi_step_boards: bool = True):
        self.engine = engine or get_engine()
        self.multi_step_boards = multi_step_boards

    def create_board(self, board: Union[BoardCreate, BoardBasicCreate], creator_id: str) -> Board:
        """
        Create a new board owned by ``creator_id``.

        With multi-step creation switched off only the basic fields are used
        and the board gets the default configuration.
        """
        if isinstance(board, BoardCreate) and self.multi_step_boards:
            validate_board_config(
                posting_mode=board.posting_mode,
                max_posts_per_user=board.max_posts_per_user,
                expiration_date=board.expiration_date,
                board_type=board.board_type,
                type_config=board.type_config,
            )
            db_board = Board(
                title=board.title,
                recipient_name=board.recipient_name,
                creator_id=creator_id,
                board_type=board.board_type.value,
                name_type=board.name_type.value,
                posting_mode=board.posting_mode.value,
                moderation_enabled=board.moderation_enabled,
                allow_anonymous=board.allow_anonymous,
                max_posts_per_user=board.max_posts_per_user,
                board_visibility=board.board_visibility.value,
                allowed_domains=board.allowed_domains or None,
                blocked_domains=board.blocked_domains or None,
                allowed_emails=board.allowed_emails or None,
                blocked_emails=board.blocked_emails or None,
                expiration_date=board.expiration_date,
                type_config=board.type_config or None,
            )
        else:
            db_board = Board(
                title=board.title,
                recipient_name=board.recipient_name,
                creator_id=creator_id,
            )

        with Session(self.engine) as session:
            session.add(db_board)
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                logger.error(f"Database error creating board: {e}")
                raise ValidationException("Invalid user ID or database constraint violation")
            session.refresh(db_board)
            logger.info(f"Board {db_board.id} created by {creator_id}")
            return db_board

    def get_board(self, board_id: str) -> Optional[Board]:
        with Session(self.engine) as session:
            return session.get(Board, board_id)

    def get_board_by_view_token(self, view_token: str) -> Optional[Board]:
        with Session(self.engine) as session:
            statement = select(Board).where(Board.view_token == view_token)
            return session.exec(statement).first()

    def get_board_by_post_token(self, post_token: str) -> Optional[Board]:
        with Session(self.engine) as session:
            statement = select(Board).where(Board.post_token == post_token)
            return session.exec(statement).first()

    def get_board_by_ref(self, board_ref: str) -> Optional[Board]:
        """Look a board up by id first, then by view token."""
        return self.get_board(board_ref) or self.get_board_by_view_token(board_ref)

    def get_boards_by_creator(self, creator_id: str) -> List[Board]:
        with Session(self.engine) as session:
            statement = (
                select(Board)
                .where(Board.creator_id == creator_id)
                .order_by(Board.created_at.desc())
            )
            return list(session.exec(statement).all())

    def update_board(self, board_id: str, board: BoardUpdate, user_id: str) -> Board:
        """
        Update a board. Only its creator may do so.
        """
        with Session(self.engine) as session:
            db_board = session.get(Board, board_id)
            if not db_board:
                raise BoardNotFoundException()
            if db_board.creator_id != user_id:
                raise ForbiddenException("Unauthorized: You can only update your own boards")

            board_data = board.model_dump(exclude_unset=True)
            for key, value in board_data.items():
                if hasattr(value, "value"):
                    value = value.value
                if isinstance(value, list) and not value:
                    value = None
                setattr(db_board, key, value)

            validate_board_config(
                posting_mode=db_board.posting_mode,
                max_posts_per_user=db_board.max_posts_per_user,
                expiration_date=db_board.expiration_date,
                board_type=db_board.board_type,
                type_config=db_board.type_config,
                check_expiration="expiration_date" in board_data,
            )

            db_board.updated_at = utcnow()
            session.add(db_board)
            session.commit()
            session.refresh(db_board)
            logger.info(f"Board {board_id} updated by {user_id}")
            return db_board
