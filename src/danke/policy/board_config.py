# policy/board_config.py
from datetime import date, datetime
from typing import Any, Dict, Optional
import re

from danke.exceptions import ValidationException
from danke.models.enums import BoardType, PostingMode
from danke.utils import as_utc, utcnow

APPRECIATION_THEMES = ("professional", "casual", "celebration")
_HEX_COLOR = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)


def _is_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value[:10])
    except ValueError:
        return False
    return True


def type_config_error(board_type: str, type_config: Dict[str, Any]) -> Optional[str]:
    if not isinstance(type_config, dict):
        return "Invalid type configuration format"

    if board_type == BoardType.BIRTHDAY and type_config.get("birthdayDate"):
        if not _is_date(type_config["birthdayDate"]):
            return "Invalid birthday date format"
    elif board_type == BoardType.FAREWELL and type_config.get("lastWorkingDay"):
        if not _is_date(type_config["lastWorkingDay"]):
            return "Invalid last working day date format"
    elif board_type == BoardType.APPRECIATION and type_config.get("appreciationTheme"):
        if type_config["appreciationTheme"] not in APPRECIATION_THEMES:
            return "Invalid appreciation theme"

    message = type_config.get("customMessage")
    if message is not None and len(str(message)) > 500:
        return "Custom message too long"
    color = type_config.get("backgroundColor")
    if color is not None and not _HEX_COLOR.match(str(color)):
        return "Invalid color format"
    return None


def validate_board_config(
    posting_mode: str,
    max_posts_per_user: Optional[str],
    expiration_date: Optional[datetime],
    board_type: str,
    type_config: Optional[Dict[str, Any]],
    now: Optional[datetime] = None,
    check_expiration: bool = True,
) -> None:
    """Business rules checked when a board is created or updated.

    Not re-checked when access or posting limits are evaluated.
    """
    now = as_utc(now) or utcnow()

    if posting_mode == PostingMode.SINGLE and max_posts_per_user and int(max_posts_per_user) > 1:
        raise ValidationException(
            "Single posting mode cannot have max posts per user greater than 1"
        )

    if check_expiration and expiration_date is not None and as_utc(expiration_date) <= now:
        raise ValidationException("Expiration date must be in the future")

    if type_config:
        error = type_config_error(board_type, type_config)
        if error:
            raise ValidationException(f"Invalid type configuration - {error}")
