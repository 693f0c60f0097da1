# models/board.py
import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import field_validator
from sqlalchemy import JSON, DateTime
from sqlmodel import SQLModel, Field

from danke.models.enums import BoardType, BoardVisibility, NameType, PostingMode
from danke.utils import new_id, new_token, normalize_entries, utcnow

_DIGITS = re.compile(r"^\d+$")


class Board(SQLModel, table=True):
    __tablename__ = "boards"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    title: str = Field(max_length=255)
    recipient_name: str = Field(max_length=255)
    creator_id: str = Field(foreign_key="users.id", index=True, max_length=255)
    view_token: str = Field(default_factory=new_token, unique=True, index=True, max_length=255)
    post_token: str = Field(default_factory=new_token, unique=True, index=True, max_length=255)
    board_type: str = Field(default=BoardType.GENERAL.value, max_length=50)
    name_type: str = Field(default=NameType.FULL_NAME.value, max_length=50)
    posting_mode: str = Field(default=PostingMode.MULTIPLE.value, max_length=50)
    moderation_enabled: bool = Field(default=False)
    allow_anonymous: bool = Field(default=True)
    # String encoded so that "unlimited" can be stored as null
    max_posts_per_user: Optional[str] = Field(default=None, max_length=10)
    board_visibility: str = Field(default=BoardVisibility.PUBLIC.value, max_length=50)
    allowed_domains: Optional[List[str]] = Field(default=None, sa_type=JSON)
    blocked_domains: Optional[List[str]] = Field(default=None, sa_type=JSON)
    allowed_emails: Optional[List[str]] = Field(default=None, sa_type=JSON)
    blocked_emails: Optional[List[str]] = Field(default=None, sa_type=JSON)
    expiration_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    type_config: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class BoardBasicCreate(SQLModel):
    """Legacy creation form: title and recipient only."""
    title: str = Field(min_length=1, max_length=255)
    recipient_name: str = Field(min_length=1, max_length=255)


class BoardConfigFields(SQLModel):
    posting_mode: Optional[PostingMode] = None
    moderation_enabled: Optional[bool] = None
    allow_anonymous: Optional[bool] = None
    max_posts_per_user: Optional[str] = None
    board_visibility: Optional[BoardVisibility] = None
    allowed_domains: Optional[List[str]] = None
    blocked_domains: Optional[List[str]] = None
    allowed_emails: Optional[List[str]] = None
    blocked_emails: Optional[List[str]] = None
    expiration_date: Optional[datetime] = None
    type_config: Optional[Dict[str, Any]] = None

    @field_validator("max_posts_per_user", mode="before")
    @classmethod
    def validate_max_posts(cls, value):
        if value is None or value == "":
            return None
        value = str(value).strip()
        if not _DIGITS.match(value):
            raise ValueError("Must be a valid number")
        if int(value) < 1:
            raise ValueError("Must be a positive number")
        return value

    @field_validator("allowed_domains", "blocked_domains", "allowed_emails", "blocked_emails")
    @classmethod
    def normalize_lists(cls, value):
        if value is None:
            return None
        return normalize_entries(value)


class BoardCreate(BoardConfigFields):
    title: str = Field(min_length=1, max_length=255)
    recipient_name: str = Field(min_length=1, max_length=255)
    board_type: BoardType = BoardType.GENERAL
    name_type: NameType = NameType.FULL_NAME
    posting_mode: PostingMode = PostingMode.MULTIPLE
    moderation_enabled: bool = False
    allow_anonymous: bool = True
    board_visibility: BoardVisibility = BoardVisibility.PUBLIC

    class Config:
        json_schema_extra = {
            "examples": [
                {
                    "title": "Thank you, Ada!",
                    "recipient_name": "Ada",
                    "board_type": "appreciation",
                    "name_type": "first-name",
                    "posting_mode": "single",
                    "board_visibility": "private",
                    "allowed_domains": ["acme.com"],
                    "type_config": {"appreciationTheme": "professional"},
                }
            ]
        }


class BoardUpdate(BoardConfigFields):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    recipient_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    board_type: Optional[BoardType] = None
    name_type: Optional[NameType] = None

    # Omit a field to keep it; these columns cannot be cleared
    @field_validator(
        "title", "recipient_name", "board_type", "name_type", "posting_mode",
        "board_visibility", "moderation_enabled", "allow_anonymous",
    )
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class BoardRead(SQLModel):
    id: str
    title: str
    recipient_name: str
    creator_id: str
    view_token: str
    post_token: str
    board_type: str
    name_type: str
    posting_mode: str
    moderation_enabled: bool
    allow_anonymous: bool
    max_posts_per_user: Optional[str] = None
    board_visibility: str
    allowed_domains: Optional[List[str]] = None
    blocked_domains: Optional[List[str]] = None
    allowed_emails: Optional[List[str]] = None
    blocked_emails: Optional[List[str]] = None
    expiration_date: Optional[datetime] = None
    type_config: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class BoardSummary(SQLModel):
    """Public view of a board, without tokens or access lists."""
    id: str
    title: str
    recipient_name: str
    creator_id: str
    board_type: str
    posting_mode: str
    moderation_enabled: bool
    allow_anonymous: bool
    max_posts_per_user: Optional[str] = None
    board_visibility: str
    expiration_date: Optional[datetime] = None
    type_config: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime
