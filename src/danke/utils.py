# danke/utils.py
import secrets
import uuid
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (as SQLite hands them back) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def new_token(length: int = 32) -> str:
    return secrets.token_urlsafe(length)[:length]


def normalize_entries(values: Optional[Iterable[str]]) -> List[str]:
    """Lower-case, strip and de-duplicate email or domain list entries, keeping order."""
    if not values:
        return []
    seen = []
    for value in values:
        if value is None:
            continue
        entry = str(value).strip().lower()
        if entry and entry not in seen:
            seen.append(entry)
    return seen


def extract_text(node: Any) -> str:
    """Flatten a rich-text document (``{"type": "doc", "content": [...]}``) to plain text."""
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    if isinstance(node, list):
        return " ".join(filter(None, (extract_text(child) for child in node)))
    if isinstance(node, dict):
        parts = []
        if isinstance(node.get("text"), str):
            parts.append(node["text"])
        if "content" in node:
            parts.append(extract_text(node["content"]))
        return " ".join(filter(None, parts))
    return ""
