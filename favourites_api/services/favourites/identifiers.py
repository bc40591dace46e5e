"""Identifier and clock capabilities injected into the favourites service."""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable
from datetime import UTC, datetime

__all__ = [
    "Clock",
    "IdFactory",
    "is_valid_user_id",
    "new_favourite_id",
    "utc_now",
]

IdFactory = Callable[[], str]
Clock = Callable[[], datetime]

_USER_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")


def new_favourite_id() -> str:
    """Return a random 128-bit identifier rendered as 32 hex characters."""

    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(UTC)


def is_valid_user_id(user_id: object) -> bool:
    """Return ``True`` when ``user_id`` is 1-64 letters, digits, ``_`` or ``-``."""

    return isinstance(user_id, str) and _USER_ID_PATTERN.fullmatch(user_id) is not None
