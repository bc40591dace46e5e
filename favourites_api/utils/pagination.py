"""Limit/offset helpers used by listing endpoints."""

from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple, TypeVar

T = TypeVar("T")


class PageWindow(NamedTuple):
    limit: int
    offset: int


def resolve_page_window(
    limit: int | None,
    offset: int | None,
    *,
    default_limit: int,
    max_limit: int,
) -> PageWindow:
    """Normalise client supplied paging hints.

    A missing or non-positive ``limit`` falls back to ``default_limit`` and a
    larger one is clamped to ``max_limit``; a missing or negative ``offset``
    becomes zero.
    """

    resolved_limit = default_limit if limit is None or limit <= 0 else limit
    resolved_limit = min(resolved_limit, max_limit)
    resolved_offset = offset if offset is not None and offset >= 0 else 0
    return PageWindow(limit=resolved_limit, offset=resolved_offset)


def paginate(items: Sequence[T], window: PageWindow) -> list[T]:
    """Slice ``items`` without reordering; offsets past the end yield ``[]``."""

    return list(items[window.offset : window.offset + window.limit])
