# policy/moderation.py
"""
Post moderation state machine.

    pending ──► approved | changes-requested | deletion-scheduled | deleted
    approved / changes-requested / deletion-scheduled ──► any of the above
    deleted ──► (terminal)

``apply_moderation_action`` computes the fields to write for one transition
and returns ``Ok(PostUpdate)`` or ``Err(ModerationError)``. It does no I/O;
the caller persists the update in the same session it read the post from.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar, Union

from danke.exceptions import ErrorKind, exception_for
from danke.models.enums import ModerationStatus, NotificationType
from danke.policy.moderators import is_moderator
from danke.utils import as_utc, utcnow

MAX_REASON_LENGTH = 500
DEFAULT_SCHEDULE_REASON = "Scheduled for deletion"
DEFAULT_DELETE_REASON = "Deleted by moderator"

T = TypeVar("T")


class ModerationAction(str, Enum):
    APPROVE = "approve"
    REQUEST_CHANGE = "request_change"
    SCHEDULE_DELETION = "schedule_deletion"
    DELETE = "delete"


TARGET_STATUS = {
    ModerationAction.APPROVE: ModerationStatus.APPROVED,
    ModerationAction.REQUEST_CHANGE: ModerationStatus.CHANGES_REQUESTED,
    ModerationAction.SCHEDULE_DELETION: ModerationStatus.DELETION_SCHEDULED,
    ModerationAction.DELETE: ModerationStatus.DELETED,
}

# Status changes that notify the post author
NOTIFICATIONS = {
    ModerationAction.APPROVE: NotificationType.POST_APPROVED,
    ModerationAction.REQUEST_CHANGE: NotificationType.POST_REJECTED,
    ModerationAction.DELETE: NotificationType.POST_HIDDEN,
}


@dataclass(frozen=True)
class ModerationError:
    kind: ErrorKind
    message: str

    def to_exception(self):
        return exception_for(self.kind, self.message)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    is_ok: bool = field(default=True, init=False)

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: ModerationError
    is_ok: bool = field(default=False, init=False)

    def unwrap(self):
        raise self.error.to_exception()


Result = Union[Ok[T], Err]


@dataclass(frozen=True)
class ModerationParams:
    reason: Optional[str] = None
    delete_date: Optional[datetime] = None


@dataclass(frozen=True)
class PostUpdate:
    action: ModerationAction
    moderation_status: ModerationStatus
    moderated_by: str
    moderated_at: datetime
    moderation_reason: Optional[str] = None
    delete_scheduled_date: Optional[datetime] = None
    delete_scheduled_by: Optional[str] = None
    is_deleted: bool = False
    # Re-deleting a deleted post changes nothing
    is_noop: bool = False

    @property
    def notification_type(self) -> Optional[NotificationType]:
        if self.is_noop:
            return None
        return NOTIFICATIONS.get(self.action)

    def as_fields(self) -> Dict[str, Any]:
        fields = {
            "moderation_status": self.moderation_status.value,
            "moderated_by": self.moderated_by,
            "moderated_at": self.moderated_at,
            "updated_at": self.moderated_at,
        }
        if self.moderation_reason is not None:
            fields["moderation_reason"] = self.moderation_reason
        if self.action == ModerationAction.SCHEDULE_DELETION:
            fields["delete_scheduled_date"] = self.delete_scheduled_date
            fields["delete_scheduled_by"] = self.delete_scheduled_by
        if self.action == ModerationAction.DELETE:
            fields["is_deleted"] = True
        return fields


def _fail(kind: ErrorKind, message: str) -> Err:
    return Err(ModerationError(kind, message))


def parse_action(action: Union[str, ModerationAction]) -> Optional[ModerationAction]:
    try:
        return ModerationAction(action)
    except ValueError:
        return None


def validate_params(
    action: ModerationAction, params: ModerationParams, now: datetime
) -> Optional[Err]:
    reason = params.reason.strip() if params.reason is not None else None
    if action == ModerationAction.REQUEST_CHANGE and not reason:
        return _fail(ErrorKind.VALIDATION_ERROR, "Reason is required")
    if reason is not None and len(reason) > MAX_REASON_LENGTH:
        return _fail(ErrorKind.VALIDATION_ERROR, "Reason too long")
    if action == ModerationAction.SCHEDULE_DELETION:
        delete_date = as_utc(params.delete_date)
        if delete_date is None:
            return _fail(
                ErrorKind.VALIDATION_ERROR, "Delete date is required for scheduling deletion"
            )
        if delete_date <= now:
            return _fail(ErrorKind.VALIDATION_ERROR, "Delete date must be in the future")
    return None


def current_status(post: Any) -> ModerationStatus:
    if post.is_deleted:
        return ModerationStatus.DELETED
    return ModerationStatus(post.moderation_status)


def apply_moderation_action(
    post: Optional[Any],
    board: Optional[Any],
    moderator_id: str,
    action: Union[str, ModerationAction],
    params: Optional[ModerationParams] = None,
    moderator_user_ids: Iterable[str] = (),
    now: Optional[datetime] = None,
) -> Result[PostUpdate]:
    """Compute one moderation transition for ``post``.

    Order of checks: input (action, reason, delete date), existence of the
    post and its board, moderator rights, then the terminal ``deleted`` state.
    """
    params = params or ModerationParams()
    now = as_utc(now) or utcnow()

    parsed = parse_action(action)
    if parsed is None:
        return _fail(ErrorKind.VALIDATION_ERROR, "Invalid moderation action")

    invalid = validate_params(parsed, params, now)
    if invalid:
        return invalid

    if post is None:
        return _fail(ErrorKind.NOT_FOUND, "Post not found")
    if board is None or board.id != post.board_id:
        return _fail(ErrorKind.NOT_FOUND, "Board not found")

    if not is_moderator(board, moderator_user_ids, moderator_id):
        return _fail(
            ErrorKind.FORBIDDEN, "You do not have moderator permissions for this board"
        )

    reason = params.reason.strip() if params.reason else None

    if current_status(post) == ModerationStatus.DELETED:
        if parsed != ModerationAction.DELETE:
            return _fail(ErrorKind.VALIDATION_ERROR, "Post has already been deleted")
        return Ok(PostUpdate(
            action=parsed,
            moderation_status=ModerationStatus.DELETED,
            moderated_by=post.moderated_by or moderator_id,
            moderated_at=as_utc(post.moderated_at) or now,
            moderation_reason=post.moderation_reason,
            is_deleted=True,
            is_noop=True,
        ))

    update = PostUpdate(
        action=parsed,
        moderation_status=TARGET_STATUS[parsed],
        moderated_by=moderator_id,
        moderated_at=now,
        moderation_reason=reason,
    )

    if parsed == ModerationAction.SCHEDULE_DELETION:
        update = PostUpdate(
            action=parsed,
            moderation_status=ModerationStatus.DELETION_SCHEDULED,
            moderated_by=moderator_id,
            moderated_at=now,
            moderation_reason=reason or DEFAULT_SCHEDULE_REASON,
            delete_scheduled_date=as_utc(params.delete_date),
            delete_scheduled_by=moderator_id,
        )
    elif parsed == ModerationAction.DELETE:
        update = PostUpdate(
            action=parsed,
            moderation_status=ModerationStatus.DELETED,
            moderated_by=moderator_id,
            moderated_at=now,
            moderation_reason=reason or DEFAULT_DELETE_REASON,
            is_deleted=True,
        )

    return Ok(update)


def apply_update(post: Any, update: PostUpdate) -> Any:
    """Write ``update`` onto ``post`` in place and return it."""
    if not update.is_noop:
        for key, value in update.as_fields().items():
            setattr(post, key, value)
    return post
