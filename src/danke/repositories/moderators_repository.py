# repositories/moderators_repository.py
from typing import List, Optional
from loguru import logger
from sqlalchemy.engine import Engine
from sqlalchemy.orm import aliased
from sqlalchemy import func
from sqlmodel import Session, select, and_

from danke.database import get_engine
from danke.exceptions import BoardNotFoundException, UserNotFoundException
from danke.models.board import Board
from danke.models.moderator import BoardModerator, ModeratedBoardRead, ModeratorRead
from danke.models.user import User
from danke.policy.moderators import check_moderator_grant, ensure_board_creator, is_moderator


class ModeratorsRepository:
    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine or get_engine()

    def add_moderator(self, board_id: str, user_email: str, added_by: str) -> BoardModerator:
        """
        Appoint the user registered under ``user_email`` as moderator of a board.

        Only the board creator may do this. Fails with NotFound for an unknown
        email or board, Forbidden for a non-creator caller, AlreadyExists for an
        existing moderator and SelfReference when the target is the creator.
        """
        with Session(self.engine) as session:
            user = session.exec(
                select(User).where(func.lower(User.email) == user_email.strip().lower())
            ).first()
            if not user:
                raise UserNotFoundException()

            board = session.get(Board, board_id)
            if not board:
                raise BoardNotFoundException()

            check_moderator_grant(
                board,
                added_by=added_by,
                target_user_id=user.id,
                moderator_user_ids=self._moderator_ids(session, board_id),
            )

            moderator = BoardModerator(board_id=board_id, user_id=user.id, added_by=added_by)
            session.add(moderator)
            session.commit()
            session.refresh(moderator)
            logger.info(f"User {user.id} added as moderator of board {board_id} by {added_by}")
            return moderator

    def remove_moderator(self, board_id: str, user_id: str, removed_by: str) -> bool:
        """
        Remove a moderator. Returns False when there was nothing to remove.
        """
        with Session(self.engine) as session:
            board = session.get(Board, board_id)
            if not board:
                raise BoardNotFoundException()

            ensure_board_creator(board, removed_by, "remove moderators")

            moderator = session.exec(
                select(BoardModerator).where(
                    and_(
                        BoardModerator.board_id == board_id,
                        BoardModerator.user_id == user_id,
                    )
                )
            ).first()
            if not moderator:
                return False

            session.delete(moderator)
            session.commit()
            logger.info(f"User {user_id} removed as moderator of board {board_id} by {removed_by}")
            return True

    def get_board_moderators(self, board_id: str) -> List[ModeratorRead]:
        added_by_user = aliased(User)
        with Session(self.engine) as session:
            statement = (
                select(BoardModerator, User, added_by_user)
                .join(User, BoardModerator.user_id == User.id)
                .join(added_by_user, BoardModerator.added_by == added_by_user.id)
                .where(BoardModerator.board_id == board_id)
                .order_by(BoardModerator.created_at)
            )
            return [
                ModeratorRead(
                    id=moderator.id,
                    user_id=moderator.user_id,
                    user_name=user.name,
                    user_email=user.email,
                    added_at=moderator.created_at,
                    added_by_name=adder.name,
                )
                for moderator, user, adder in session.exec(statement).all()
            ]

    def get_moderator_ids(self, board_id: str) -> List[str]:
        with Session(self.engine) as session:
            return self._moderator_ids(session, board_id)

    def is_moderator(self, board_id: str, user_id: str) -> bool:
        """Explicitly appointed moderator; the creator is never stored as one."""
        return user_id in self.get_moderator_ids(board_id)

    def has_moderator_permissions(self, board_id: str, user_id: Optional[str]) -> bool:
        """
        Creator or appointed moderator. Evaluated on every call, never cached.
        """
        with Session(self.engine) as session:
            board = session.get(Board, board_id)
            if not board:
                return False
            return is_moderator(board, self._moderator_ids(session, board_id), user_id)

    def get_user_moderated_boards(self, user_id: str) -> List[ModeratedBoardRead]:
        with Session(self.engine) as session:
            statement = (
                select(BoardModerator, Board)
                .join(Board, BoardModerator.board_id == Board.id)
                .where(BoardModerator.user_id == user_id)
            )
            return [
                ModeratedBoardRead(
                    board_id=board.id,
                    board_title=board.title,
                    board_recipient_name=board.recipient_name,
                    added_at=moderator.created_at,
                )
                for moderator, board in session.exec(statement).all()
            ]

    @staticmethod
    def _moderator_ids(session: Session, board_id: str) -> List[str]:
        statement = select(BoardModerator.user_id).where(BoardModerator.board_id == board_id)
        return list(session.exec(statement).all())
