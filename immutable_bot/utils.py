"""
Shared formatting helpers
"""
import logging
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


logger = logging.getLogger(__name__)

QUOTE_DATE_FORMAT = "%b %d, %Y at %I:%M %p"


def format_user_display(user_id: int, username: Optional[str] = None) -> str:
    """Render an author as "@handle", or "User <id>" when there is no handle"""
    if username:
        return f"@{username}"
    return f"User {user_id}"


def resolve_timezone(name: str) -> tzinfo:
    """
    Resolve a zone identifier such as "Europe/Paris"

    Falls back to UTC (and logs) when the identifier is unknown.
    """
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.error(f"Failed to parse timezone identifier {name!r}: {e}")
        return timezone.utc


def format_quote_date(moment: datetime, tz: tzinfo) -> str:
    """Format a stored UTC timestamp in the given zone, e.g. Mar 14, 2024 at 06:30 PM"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).strftime(QUOTE_DATE_FORMAT)
