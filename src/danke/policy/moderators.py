# policy/moderators.py
from typing import Any, Iterable, Optional

from danke.exceptions import (
    AlreadyExistsException,
    ForbiddenException,
    SelfReferenceException,
)


def is_board_creator(board: Any, user_id: Optional[str]) -> bool:
    return user_id is not None and board.creator_id == user_id


def is_moderator(board: Any, moderator_user_ids: Iterable[str], user_id: Optional[str]) -> bool:
    """Creator or appointed moderator of ``board``."""
    if user_id is None:
        return False
    if is_board_creator(board, user_id):
        return True
    return user_id in set(moderator_user_ids)


def ensure_board_creator(board: Any, user_id: Optional[str], action: str) -> None:
    """Moderator list changes are creator-only; moderators cannot manage each other."""
    if not is_board_creator(board, user_id):
        raise ForbiddenException(f"Only board creators can {action}")


def check_moderator_grant(
    board: Any,
    added_by: str,
    target_user_id: str,
    moderator_user_ids: Iterable[str],
) -> None:
    ensure_board_creator(board, added_by, "add moderators")
    if target_user_id in set(moderator_user_ids):
        raise AlreadyExistsException()
    if target_user_id == board.creator_id:
        raise SelfReferenceException()
