# services/access_service.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from loguru import logger

from danke.exceptions import ErrorKind, exception_for
from danke.policy.access import AccessDecision, ErrorType, Identity, evaluate_board_access
from danke.policy.moderators import is_board_creator
from danke.repositories.moderators_repository import ModeratorsRepository


@dataclass(frozen=True)
class BoardAccessResult:
    has_access: bool
    reason: Optional[str] = None
    error_type: Optional[ErrorType] = None
    user_email: Optional[str] = None
    is_creator: bool = False
    is_moderator: bool = False

    @property
    def can_moderate(self) -> bool:
        return self.is_creator or self.is_moderator

    def as_decision(self) -> AccessDecision:
        if self.has_access:
            return AccessDecision.allow()
        return AccessDecision.deny(self.error_type, self.reason)

    def raise_for_access(self) -> None:
        if not self.has_access:
            raise exception_for(ErrorKind(self.error_type.value), self.reason)


def resolve_board_access(
    board: Any,
    user: Optional[Identity],
    moderator_user_ids: Iterable[str] = (),
    now: Optional[datetime] = None,
) -> BoardAccessResult:
    """Request-level access: the evaluator's decision, with the board's creator and
    moderators let through allow/block-list rejections. Expiration still applies."""
    decision: AccessDecision = evaluate_board_access(board, user, now=now)
    if user is None:
        return BoardAccessResult(
            has_access=decision.has_access,
            reason=decision.reason,
            error_type=decision.error_type,
        )

    is_creator = is_board_creator(board, user.id)
    is_moderator = not is_creator and user.id in set(moderator_user_ids)

    if (is_creator or is_moderator) and decision.error_type == ErrorType.ACCESS_DENIED:
        decision = AccessDecision.allow()

    return BoardAccessResult(
        has_access=decision.has_access,
        reason=decision.reason,
        error_type=decision.error_type,
        user_email=user.email,
        is_creator=is_creator,
        is_moderator=is_moderator,
    )


class AccessService:
    def __init__(self, moderators_repository: ModeratorsRepository):
        self.moderators_repository = moderators_repository

    def check_board_access(self, board: Any, user: Optional[Identity],
                           now: Optional[datetime] = None) -> BoardAccessResult:
        moderator_ids = self.moderators_repository.get_moderator_ids(board.id) if user else []
        result = resolve_board_access(board, user, moderator_ids, now=now)
        if not result.has_access:
            logger.warning(
                f"Access to board {board.id} denied for {user.id if user else 'anonymous visitor'}: {result.reason}"
            )
        return result
