"""Correlation id bound to the request being served.

The request-id middleware binds a fresh id for the duration of each call with
:func:`bound_request_id`. Sync endpoints run in FastAPI's threadpool with the
caller's context copied in, so log lines and error payloads written there see
the same id that is echoed back in ``X-Request-ID``.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

__all__ = [
    "REQUEST_ID_HEADER",
    "bound_request_id",
    "current_request_id",
    "new_request_id",
]

REQUEST_ID_HEADER = "X-Request-ID"

_bound_id: ContextVar[str | None] = ContextVar("favourites_request_id", default=None)


def new_request_id() -> str:
    return str(uuid.uuid4())


@contextmanager
def bound_request_id(request_id: str) -> Iterator[str]:
    """Bind ``request_id`` for the enclosed block, restoring the previous id after."""

    token = _bound_id.set(request_id)
    try:
        yield request_id
    finally:
        _bound_id.reset(token)


def current_request_id() -> str | None:
    return _bound_id.get()
