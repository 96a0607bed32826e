"""
Input normalization and validation for login identifiers.
"""

from __future__ import annotations

import re
from typing import Optional

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(email: Optional[str]) -> str:
    """Trim and lower-case so equivalent inputs map to one identifier."""
    return (email or "").strip().lower()


def is_valid_email(email: str) -> bool:
    return bool(email) and _EMAIL_RE.match(email) is not None


def normalize_username(username: Optional[str]) -> Optional[str]:
    """Trim; blank usernames are treated as absent."""
    if username is None:
        return None
    username = username.strip()
    return username or None
