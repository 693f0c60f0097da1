# policy/posting.py
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from danke.models.enums import PostingMode
from danke.policy.access import AccessDecision, Identity, evaluate_board_access


@dataclass(frozen=True)
class PostingLimitResult:
    is_allowed: bool
    post_count: int = 0
    reason: Optional[str] = None


def parse_max_posts(value: Optional[str]) -> Optional[int]:
    """Stored caps are strings; anything that is not a positive integer means no cap."""
    if value is None:
        return None
    try:
        max_posts = int(str(value).strip())
    except ValueError:
        return None
    return max_posts if max_posts > 0 else None


def evaluate_posting_limit(
    board: Any,
    user: Identity,
    existing_post_count: int,
    now: Optional[datetime] = None,
    access: Optional[AccessDecision] = None,
) -> PostingLimitResult:
    """Decide whether ``user`` may add one more post to ``board``.

    ``existing_post_count`` must only count the user's non-deleted posts, so a
    soft-deleted post frees its slot again. The single-mode cap is trusted as
    stored: single mode allows one post whatever ``max_posts_per_user`` says.

    ``access`` is a decision already made for this request, e.g. one that lets
    the board creator past the access lists; without it the board is evaluated.
    """
    if access is None:
        access = evaluate_board_access(board, user, now=now)
    if not access.has_access:
        return PostingLimitResult(
            is_allowed=False, post_count=existing_post_count, reason=access.reason
        )

    if board.posting_mode == PostingMode.SINGLE:
        if existing_post_count >= 1:
            return PostingLimitResult(
                is_allowed=False,
                post_count=existing_post_count,
                reason="This board only allows one post per user",
            )
        return PostingLimitResult(is_allowed=True, post_count=existing_post_count)

    max_posts = parse_max_posts(board.max_posts_per_user)
    if max_posts is not None and existing_post_count >= max_posts:
        return PostingLimitResult(
            is_allowed=False,
            post_count=existing_post_count,
            reason=f"You have reached the maximum of {max_posts} posts for this board",
        )

    return PostingLimitResult(is_allowed=True, post_count=existing_post_count)
