"""In-memory, per-user favourites store.

Persistence-oriented operations exposed by :class:`InMemoryFavouriteStore`:
* ``list`` – snapshot of a user's favourites ordered newest first.
* ``create`` – insert guarded by a store-wide identifier uniqueness check.
* ``get`` – point lookup scoped to the owning user.
* ``update_description`` – swaps in a copy carrying the new description.
* ``delete`` – removes a favourite and prunes empty user buckets.

All state sits behind one :class:`ReadWriteLock` scoped to the whole store,
because ``create`` may add a user's bucket while other callers read. No I/O
happens under the lock.
"""

from __future__ import annotations

from typing import Protocol

from favourites_api.schemas.favourites import Favourite
from favourites_api.services.favourites.errors import (
    DuplicateFavouriteIdError,
    FavouriteNotFoundError,
)
from favourites_api.services.favourites.locking import ReadWriteLock

__all__ = [
    "FavouriteStore",
    "InMemoryFavouriteStore",
    "newest_first",
]


class FavouriteStore(Protocol):
    """Minimal store surface required by :class:`FavouritesService`."""

    def list(self, user_id: str) -> list[Favourite]:
        """Return the user's favourites ordered newest first."""

    def create(self, user_id: str, favourite: Favourite) -> None:
        """Insert ``favourite`` for ``user_id``."""

    def get(self, user_id: str, favourite_id: str) -> Favourite:
        """Return a single favourite owned by ``user_id``."""

    def update_description(
        self, user_id: str, favourite_id: str, description: str
    ) -> Favourite:
        """Replace the description of an existing favourite."""

    def delete(self, user_id: str, favourite_id: str) -> None:
        """Remove an existing favourite."""


def newest_first(favourites: list[Favourite]) -> list[Favourite]:
    """Order by creation time descending, breaking ties on the identifier."""

    return sorted(
        favourites,
        key=lambda favourite: (favourite.created_at, favourite.id),
        reverse=True,
    )


class InMemoryFavouriteStore:
    """Thread-safe store keeping favourites in process memory."""

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        # user_id -> favourite_id -> Favourite
        self._favourites: dict[str, dict[str, Favourite]] = {}
        # favourite_id -> user_id, for store-wide uniqueness
        self._owners: dict[str, str] = {}

    def list(self, user_id: str) -> list[Favourite]:
        with self._lock.read():
            snapshot = list(self._favourites.get(user_id, {}).values())
        return newest_first(snapshot)

    def create(self, user_id: str, favourite: Favourite) -> None:
        with self._lock.write():
            if favourite.id in self._owners:
                raise DuplicateFavouriteIdError(favourite.id)
            self._favourites.setdefault(user_id, {})[favourite.id] = favourite
            self._owners[favourite.id] = user_id

    def get(self, user_id: str, favourite_id: str) -> Favourite:
        with self._lock.read():
            favourite = self._favourites.get(user_id, {}).get(favourite_id)
        if favourite is None:
            raise FavouriteNotFoundError(user_id, favourite_id)
        return favourite

    def update_description(
        self, user_id: str, favourite_id: str, description: str
    ) -> Favourite:
        with self._lock.write():
            bucket = self._favourites.get(user_id)
            if bucket is None or favourite_id not in bucket:
                raise FavouriteNotFoundError(user_id, favourite_id)
            updated = bucket[favourite_id].model_copy(update={"description": description})
            bucket[favourite_id] = updated
        return updated

    def delete(self, user_id: str, favourite_id: str) -> None:
        with self._lock.write():
            bucket = self._favourites.get(user_id)
            if bucket is None or favourite_id not in bucket:
                raise FavouriteNotFoundError(user_id, favourite_id)
            del bucket[favourite_id]
            del self._owners[favourite_id]
            if not bucket:
                del self._favourites[user_id]

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._owners)
