"""Exception taxonomy raised by the favourites core.

Every failure the validator, store, or service can produce derives from
:class:`FavouritesError`. Each class also inherits the closest builtin so that
callers written against ``ValueError`` or ``LookupError`` keep working.
"""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "DuplicateFavouriteIdError",
    "FavouriteNotFoundError",
    "FavouritesError",
    "InvalidIdentityError",
    "MalformedPayloadError",
    "SchemaViolationError",
    "UnknownAssetKindError",
]


class FavouritesError(Exception):
    """Base class for all favourites domain failures."""


class InvalidIdentityError(FavouritesError, ValueError):
    """Raised when a user or favourite identifier fails syntactic validation."""

    def __init__(self, message: str, *, field: str = "user_id") -> None:
        super().__init__(message)
        self.field = field


class MalformedPayloadError(FavouritesError, ValueError):
    """Raised when an asset payload is not well-formed or has mistyped fields."""


class UnknownAssetKindError(FavouritesError, ValueError):
    """Raised when an asset payload declares no type or an unsupported one."""

    def __init__(self, declared: object) -> None:
        if declared is None:
            message = "asset type is missing"
        else:
            message = f"unknown asset type: {declared!r}"
        super().__init__(message)
        self.declared = declared


class SchemaViolationError(FavouritesError, ValueError):
    """Raised when a recognised asset is missing required, non-empty fields."""

    def __init__(self, kind: str, fields: Sequence[str]) -> None:
        self.kind = kind
        self.fields = tuple(fields)
        super().__init__(f"{kind} requires non-empty {', '.join(self.fields)}")


class FavouriteNotFoundError(FavouritesError, LookupError):
    """Raised when the user owns no favourite with the requested identifier."""

    def __init__(self, user_id: str, favourite_id: str) -> None:
        super().__init__("favourite not found")
        self.user_id = user_id
        self.favourite_id = favourite_id


class DuplicateFavouriteIdError(FavouritesError, RuntimeError):
    """Raised when an inserted favourite reuses an identifier already stored."""

    def __init__(self, favourite_id: str) -> None:
        super().__init__(f"favourite id already exists: {favourite_id}")
        self.favourite_id = favourite_id
