# models/moderator.py
from datetime import datetime
from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field

from danke.utils import new_id, utcnow


class BoardModerator(SQLModel, table=True):
    __tablename__ = "board_moderators"
    __table_args__ = (
        UniqueConstraint("board_id", "user_id", name="board_moderators_board_id_user_id_unique"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    board_id: str = Field(foreign_key="boards.id", index=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=255)
    added_by: str = Field(foreign_key="users.id", max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class ModeratorRead(SQLModel):
    id: str
    user_id: str
    user_name: str
    user_email: str
    added_at: datetime
    added_by_name: str


class ModeratedBoardRead(SQLModel):
    board_id: str
    board_title: str
    board_recipient_name: str
    added_at: datetime
