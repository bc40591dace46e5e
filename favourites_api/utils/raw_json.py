"""Helpers for handling JSON documents without re-encoding them.

Favourites hand their asset back exactly as it was sent, so the transport
layer needs the literal text of a member of the request body rather than its
decoded value. :func:`member_text` walks the top-level object with the stdlib
decoder and returns the source slice of the requested member.
"""

from __future__ import annotations

import json
from typing import Any

__all__ = [
    "NonFiniteNumberError",
    "decoder",
    "member_text",
]

_WHITESPACE = " \t\n\r"


class NonFiniteNumberError(ValueError):
    """Raised when a document uses ``NaN``, ``Infinity`` or ``-Infinity``."""


def _reject_constant(name: str) -> Any:
    raise NonFiniteNumberError(f"non-finite number {name} is not valid JSON")


# Plain JSON only: the stdlib decoder accepts NaN and Infinity unless told not to.
decoder = json.JSONDecoder(parse_constant=_reject_constant)


def _skip_whitespace(text: str, index: int) -> int:
    while index < len(text) and text[index] in _WHITESPACE:
        index += 1
    return index


def _expect(text: str, index: int, char: str) -> int:
    if index >= len(text) or text[index] != char:
        raise ValueError(f"expected {char!r} at position {index}")
    return index + 1


def member_text(document: str, name: str) -> str | None:
    """Return the source text of member ``name`` of the JSON object ``document``.

    Returns ``None`` when the member is absent. When the key repeats, the last
    occurrence wins, matching how the value decodes. Raises ``ValueError`` when
    ``document`` is not a JSON object.
    """

    found: str | None = None
    index = _expect(document, _skip_whitespace(document, 0), "{")
    index = _skip_whitespace(document, index)
    if index < len(document) and document[index] == "}":
        index += 1
    else:
        while True:
            key, index = decoder.raw_decode(document, _skip_whitespace(document, index))
            if not isinstance(key, str):
                raise ValueError("object keys must be strings")
            index = _expect(document, _skip_whitespace(document, index), ":")
            start = _skip_whitespace(document, index)
            _, index = decoder.raw_decode(document, start)
            if key == name:
                found = document[start:index]
            index = _skip_whitespace(document, index)
            if index < len(document) and document[index] == ",":
                index += 1
                continue
            index = _expect(document, index, "}")
            break

    if _skip_whitespace(document, index) != len(document):
        raise ValueError("unexpected data after the JSON object")
    return found
