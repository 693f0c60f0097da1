# policy/access.py
"""
Board access evaluation.

Every check here is a pure function over an ``AccessPolicy`` and an optional
signed-in identity. Checks run in a fixed order and the first failure wins:
expiration, sign-in (private boards only), blocked email, allowed email,
blocked domain, allowed domain. Block lists are consulted before allow lists
so an explicitly blocked address stays blocked even when it is also allowed.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional, Protocol, Union

from danke.models.enums import BoardVisibility
from danke.utils import as_utc, normalize_entries, utcnow


class ErrorType(str, Enum):
    NOT_SIGNED_IN = "NOT_SIGNED_IN"
    ACCESS_DENIED = "ACCESS_DENIED"
    EXPIRED = "EXPIRED"


class Identity(Protocol):
    id: str
    email: str


@dataclass(frozen=True)
class UserIdentity:
    id: str
    email: str
    name: Optional[str] = None


@dataclass(frozen=True)
class AccessDecision:
    has_access: bool
    reason: Optional[str] = None
    error_type: Optional[ErrorType] = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(has_access=True)

    @classmethod
    def deny(cls, error_type: ErrorType, reason: str) -> "AccessDecision":
        return cls(has_access=False, reason=reason, error_type=error_type)


ALLOWED = AccessDecision.allow()


def _frozen(values: Optional[Iterable[str]]) -> FrozenSet[str]:
    return frozenset(normalize_entries(values))


@dataclass(frozen=True)
class AccessPolicy:
    """Typed access settings of one board, normalised once per fetch."""
    visibility: BoardVisibility = BoardVisibility.PUBLIC
    creator_id: Optional[str] = None
    allowed_domains: FrozenSet[str] = field(default_factory=frozenset)
    blocked_domains: FrozenSet[str] = field(default_factory=frozenset)
    allowed_emails: FrozenSet[str] = field(default_factory=frozenset)
    blocked_emails: FrozenSet[str] = field(default_factory=frozenset)
    expiration_date: Optional[datetime] = None

    @classmethod
    def from_board(cls, board: Any) -> "AccessPolicy":
        return cls(
            visibility=BoardVisibility(board.board_visibility or BoardVisibility.PUBLIC.value),
            creator_id=board.creator_id,
            allowed_domains=_frozen(board.allowed_domains),
            blocked_domains=_frozen(board.blocked_domains),
            allowed_emails=_frozen(board.allowed_emails),
            blocked_emails=_frozen(board.blocked_emails),
            expiration_date=as_utc(board.expiration_date),
        )

    @property
    def is_private(self) -> bool:
        return self.visibility == BoardVisibility.PRIVATE


def as_policy(board: Union[AccessPolicy, Any]) -> AccessPolicy:
    if isinstance(board, AccessPolicy):
        return board
    return AccessPolicy.from_board(board)


def email_of(user: Identity) -> str:
    return (user.email or "").strip().lower()


def domain_of(email: str) -> Optional[str]:
    if "@" not in email:
        return None
    domain = email.split("@", 1)[1].strip().lower()
    return domain or None


# Policy primitives. Each returns a rejection or None.

def check_expiration(policy: AccessPolicy, now: datetime) -> Optional[AccessDecision]:
    if policy.expiration_date is not None and policy.expiration_date <= now:
        return AccessDecision.deny(ErrorType.EXPIRED, "Board has expired")
    return None


def check_signed_in(policy: AccessPolicy, user: Optional[Identity]) -> Optional[AccessDecision]:
    if policy.is_private and user is None:
        return AccessDecision.deny(
            ErrorType.NOT_SIGNED_IN, "Authentication required for private board"
        )
    return None


def check_blocked_email(policy: AccessPolicy, email: str) -> Optional[AccessDecision]:
    if email in policy.blocked_emails:
        return AccessDecision.deny(
            ErrorType.ACCESS_DENIED, "Your email is blocked from accessing this board"
        )
    return None


def check_allowed_email(policy: AccessPolicy, email: str) -> Optional[AccessDecision]:
    if policy.allowed_emails and email not in policy.allowed_emails:
        return AccessDecision.deny(
            ErrorType.ACCESS_DENIED, "Your email is not on the allowed list for this board"
        )
    return None


def check_blocked_domain(policy: AccessPolicy, domain: Optional[str]) -> Optional[AccessDecision]:
    if domain is not None and domain in policy.blocked_domains:
        return AccessDecision.deny(
            ErrorType.ACCESS_DENIED, "Your email domain is blocked from accessing this board"
        )
    return None


def check_allowed_domain(policy: AccessPolicy, domain: Optional[str]) -> Optional[AccessDecision]:
    if policy.allowed_domains and domain not in policy.allowed_domains:
        return AccessDecision.deny(
            ErrorType.ACCESS_DENIED, "Your email domain is not allowed to access this board"
        )
    return None


def evaluate_board_access(
    board: Union[AccessPolicy, Any],
    user: Optional[Identity] = None,
    now: Optional[datetime] = None,
) -> AccessDecision:
    """Decide whether ``user`` (None for anonymous visitors) may access ``board``.

    Never raises for well-formed input; negative outcomes come back as an
    ``AccessDecision`` whose ``error_type`` tells the caller which status to use.
    """
    policy = as_policy(board)
    now = as_utc(now) or utcnow()

    rejection = check_expiration(policy, now) or check_signed_in(policy, user)
    if rejection:
        return rejection

    # Anonymous visitor on a public board
    if user is None:
        return ALLOWED

    email = email_of(user)
    domain = domain_of(email)
    rejection = (
        check_blocked_email(policy, email)
        or check_allowed_email(policy, email)
        or check_blocked_domain(policy, domain)
        or check_allowed_domain(policy, domain)
    )
    return rejection or ALLOWED
