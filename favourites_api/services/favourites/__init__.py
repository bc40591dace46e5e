"""Favourites domain components split by responsibility.

The package separates payload validation, storage, and the capabilities the
service needs from its environment (identifiers and time) so that each piece
can be exercised on its own in tests.
"""

from .errors import (
    DuplicateFavouriteIdError,
    FavouriteNotFoundError,
    FavouritesError,
    InvalidIdentityError,
    MalformedPayloadError,
    SchemaViolationError,
    UnknownAssetKindError,
)
from .identifiers import is_valid_user_id, new_favourite_id, utc_now
from .store import FavouriteStore, InMemoryFavouriteStore
from .validation import ValidatedAsset, validate_asset

__all__ = [
    "DuplicateFavouriteIdError",
    "FavouriteNotFoundError",
    "FavouriteStore",
    "FavouritesError",
    "InMemoryFavouriteStore",
    "InvalidIdentityError",
    "MalformedPayloadError",
    "SchemaViolationError",
    "UnknownAssetKindError",
    "ValidatedAsset",
    "is_valid_user_id",
    "new_favourite_id",
    "utc_now",
    "validate_asset",
]
