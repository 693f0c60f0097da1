# models/user.py
from datetime import datetime
from typing import Optional
from pydantic import EmailStr
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field

from danke.utils import utcnow


class User(SQLModel, table=True):
    """Local mirror of an identity owned by the external identity provider."""
    __tablename__ = "users"

    id: str = Field(primary_key=True, max_length=255)
    name: str = Field(max_length=255)
    email: str = Field(unique=True, index=True, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    class Config:
        json_schema_extra = {
            "examples": [
                {
                    "id": "user_2abc",
                    "name": "Ada Lovelace",
                    "email": "ada@acme.com",
                }
            ]
        }


class UserSync(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)
    avatar_url: Optional[str] = Field(default=None, max_length=255)


class UserRead(SQLModel):
    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None


class EmailRequestForm(SQLModel):
    email: EmailStr
