# models/post.py
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from pydantic import HttpUrl
from sqlalchemy import JSON, DateTime, Index
from sqlmodel import SQLModel, Field

from danke.models.enums import ModerationStatus
from danke.utils import new_id, utcnow


class Post(SQLModel, table=True):
    __tablename__ = "posts"
    __table_args__ = (
        Index("posts_board_id_is_deleted_idx", "board_id", "is_deleted"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    board_id: str = Field(foreign_key="boards.id", index=True, max_length=36)
    # Kept for tracking even when the post is shown anonymously
    creator_id: str = Field(foreign_key="users.id", index=True, max_length=255)
    content: Dict[str, Any] = Field(sa_type=JSON)
    media_urls: Optional[List[str]] = Field(default=None, sa_type=JSON)
    is_anonymous: bool = Field(default=False)
    anonymous_name: Optional[str] = Field(default=None, max_length=100)

    # Moderation fields
    moderation_status: str = Field(default=ModerationStatus.APPROVED.value, index=True, max_length=50)
    moderation_reason: Optional[str] = Field(default=None)
    moderated_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=255)
    moderated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    delete_scheduled_date: Optional[datetime] = Field(default=None, index=True, sa_type=DateTime(timezone=True))
    delete_scheduled_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=255)

    is_deleted: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class RichTextContent(SQLModel):
    type: Literal["doc"]
    content: Optional[List[Any]] = None


class PostCreate(SQLModel):
    board_id: str
    content: RichTextContent
    media_urls: List[HttpUrl] = Field(default_factory=list)
    is_anonymous: bool = False
    anonymous_name: Optional[str] = Field(default=None, max_length=100)

    class Config:
        json_schema_extra = {
            "examples": [
                {
                    "board_id": "5b1f0c8e-7d0a-4a57-9d0e-8d3c2b8f9a10",
                    "content": {
                        "type": "doc",
                        "content": [
                            {"type": "paragraph", "content": [{"type": "text", "text": "Thanks for everything!"}]}
                        ],
                    },
                    "media_urls": [],
                }
            ]
        }


class PostUpdateForm(SQLModel):
    content: Optional[RichTextContent] = None
    media_urls: Optional[List[HttpUrl]] = None


class ModeratePostForm(SQLModel):
    action: str
    reason: Optional[str] = None
    delete_date: Optional[datetime] = None


class PostCreator(SQLModel):
    id: Optional[str] = None
    name: str
    avatar_url: Optional[str] = None


class PostRead(SQLModel):
    id: str
    board_id: str
    content: Dict[str, Any]
    media_urls: List[str] = Field(default_factory=list)
    is_anonymous: bool
    anonymous_name: Optional[str] = None
    moderation_status: str
    created_at: datetime
    updated_at: datetime
    creator: PostCreator


class PostAttentionRead(SQLModel):
    id: str
    content: Dict[str, Any]
    creator_name: str
    created_at: datetime
    updated_at: datetime
    moderation_status: str
    moderation_reason: Optional[str] = None
    delete_scheduled_date: Optional[datetime] = None
