# models/notification.py
from datetime import datetime
from typing import List, Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from danke.utils import new_id, utcnow


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=255)
    type: str = Field(max_length=50)
    title: str = Field(max_length=255)
    message: str
    post_id: Optional[str] = Field(default=None, foreign_key="posts.id", max_length=36)
    board_id: Optional[str] = Field(default=None, foreign_key="boards.id", max_length=36)
    is_read: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class NotificationList(SQLModel):
    notifications: List[Notification]
    unread_count: int
