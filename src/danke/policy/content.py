# policy/content.py
import re
from dataclasses import dataclass, field
from typing import List, Optional

FLAGGED_WORDS = (
    # Profanity
    "fuck", "shit", "damn", "bitch", "asshole", "bastard",
    # Hate speech indicators
    "hate", "kill", "die", "stupid", "idiot", "loser",
    # Spam indicators
    "click here", "buy now", "free money", "get rich quick",
    # Inappropriate content
    "nude", "sex", "porn", "xxx",
)

_REPEATED = re.compile(r"(.)\1{4,}")
_URL = re.compile(r"https?://\S+")


@dataclass(frozen=True)
class ContentCheck:
    is_allowed: bool
    reason: Optional[str] = None
    flagged_content: List[str] = field(default_factory=list)


def screen_content(text: str) -> ContentCheck:
    """Heuristic screening used on boards with moderation enabled."""
    flagged = []
    lowered = text.lower()

    for word in FLAGGED_WORDS:
        if word in lowered:
            flagged.append(word)

    letters = [c for c in text if c.isascii() and c.isalpha()]
    uppercase = [c for c in letters if c.isupper()]
    if len(letters) > 10 and len(uppercase) / len(letters) > 0.5:
        flagged.append("excessive caps")

    if _REPEATED.search(text):
        flagged.append("repeated characters")

    if _URL.search(text):
        flagged.append("contains links")

    if not flagged:
        return ContentCheck(is_allowed=True)
    return ContentCheck(
        is_allowed=False,
        reason=f"Content flagged for: {', '.join(flagged)}",
        flagged_content=flagged,
    )
