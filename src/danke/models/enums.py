# models/enums.py
from enum import Enum


class BoardVisibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"


class PostingMode(str, Enum):
    SINGLE = "single"
    MULTIPLE = "multiple"


class BoardType(str, Enum):
    APPRECIATION = "appreciation"
    BIRTHDAY = "birthday"
    FAREWELL = "farewell"
    GENERAL = "general"


class NameType(str, Enum):
    FIRST_NAME = "first-name"
    FULL_NAME = "full-name"
    NICKNAME = "nickname"


class ModerationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    CHANGES_REQUESTED = "changes-requested"
    DELETION_SCHEDULED = "deletion-scheduled"
    DELETED = "deleted"


class NotificationType(str, Enum):
    POST_APPROVED = "post_approved"
    POST_REJECTED = "post_rejected"
    POST_HIDDEN = "post_hidden"
