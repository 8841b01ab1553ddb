"""Input validation and parsing helpers.

Functions:
- validate_email(email) -> bool
- validate_username(username) -> bool
- parse_tags(raw) -> list[str]: comma-separated input to a tag list
- matches_search(query, *fields) -> bool: case-insensitive substring search
"""

from __future__ import annotations

import re
from typing import Iterable

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$")
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.]{3,30}$")


def validate_email(email: str) -> bool:
    """Validate email format.

    Args:
        email: Email address to validate

    Returns:
        True if the address looks valid
    """
    return bool(email) and bool(EMAIL_PATTERN.match(email))


def validate_username(username: str) -> bool:
    """Usernames are 3-30 letters, digits, underscores or dots."""
    return bool(username) and bool(USERNAME_PATTERN.match(username))


def parse_tags(raw: str | Iterable[str] | None) -> list[str]:
    """Turn "a, b ,c" (or a list) into ["a", "b", "c"].

    Empty entries are dropped. Order is kept.
    """
    if not raw:
        return []
    items = raw.split(",") if isinstance(raw, str) else list(raw)
    return [tag.strip() for tag in items if tag and tag.strip()]


def matches_search(query: str | None, *fields: str | Iterable[str] | None) -> bool:
    """True if query is empty or a case-insensitive substring of any field.

    A field may be a list of strings (tags), in which case any element counts.
    """
    if not query:
        return True
    needle = query.lower()
    for value in fields:
        if value is None:
            continue
        if isinstance(value, str):
            if needle in value.lower():
                return True
        elif any(needle in str(item).lower() for item in value):
            return True
    return False
