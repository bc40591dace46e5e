"""Business logic powering the favourites API endpoints.

:class:`FavouritesService` is the only component that combines identity
checks, asset validation, identifier and timestamp assignment, and store
access:

* identities are checked before the store is touched, so a malformed path is
  always reported as :class:`InvalidIdentityError` rather than a miss;
* payloads go through :func:`validate_asset` and their JSON text is stored
  exactly as supplied;
* identifiers come from an injected factory; a collision is retried with a
  fresh identifier up to ``max_id_attempts`` times before the store's
  :class:`DuplicateFavouriteIdError` is surfaced.
"""

from __future__ import annotations

import logging

from favourites_api.schemas.favourites import Favourite
from favourites_api.services.favourites import (
    DuplicateFavouriteIdError,
    FavouriteStore,
    InvalidIdentityError,
    is_valid_user_id,
    new_favourite_id,
    utc_now,
    validate_asset,
)
from favourites_api.services.favourites.identifiers import Clock, IdFactory
from favourites_api.services.favourites.validation import RawAsset

logger = logging.getLogger(__name__)

DEFAULT_MAX_ID_ATTEMPTS = 3


class FavouritesService:
    """Orchestrates validation and storage of user favourites."""

    def __init__(
        self,
        store: FavouriteStore,
        *,
        id_factory: IdFactory = new_favourite_id,
        clock: Clock = utc_now,
        max_id_attempts: int = DEFAULT_MAX_ID_ATTEMPTS,
    ) -> None:
        if max_id_attempts < 1:
            raise ValueError("max_id_attempts must be at least 1")
        self._store = store
        self._id_factory = id_factory
        self._clock = clock
        self._max_id_attempts = max_id_attempts

    def list_favourites(self, user_id: str) -> list[Favourite]:
        self._require_user_id(user_id)
        favourites = self._store.list(user_id)
        logger.debug("Listed %d favourites for user %s", len(favourites), user_id)
        return favourites

    def get_favourite(self, user_id: str, favourite_id: str) -> Favourite:
        self._require_user_id(user_id)
        self._require_favourite_id(favourite_id)
        return self._store.get(user_id, favourite_id)

    def create_favourite(self, user_id: str, raw_payload: RawAsset) -> Favourite:
        """Validate ``raw_payload`` and store it as a new favourite."""

        self._require_user_id(user_id)
        validated = validate_asset(raw_payload)
        created_at = self._clock()

        for attempt in range(1, self._max_id_attempts + 1):
            favourite = Favourite(
                id=self._id_factory(),
                type=validated.kind,
                description=validated.description,
                asset=validated.raw,
                created_at=created_at,
            )
            try:
                self._store.create(user_id, favourite)
            except DuplicateFavouriteIdError:
                if attempt == self._max_id_attempts:
                    logger.error(
                        "Giving up on favourite id allocation for user %s after %d attempts",
                        user_id,
                        attempt,
                    )
                    raise
                logger.warning(
                    "Favourite id collision on %s (attempt %d/%d); regenerating",
                    favourite.id,
                    attempt,
                    self._max_id_attempts,
                )
                continue

            logger.info(
                "Created %s favourite %s for user %s",
                favourite.type.value,
                favourite.id,
                user_id,
            )
            return favourite

        raise AssertionError("unreachable")  # pragma: no cover

    def update_favourite_description(
        self, user_id: str, favourite_id: str, description: str
    ) -> Favourite:
        """Replace only the description; the text itself is not validated."""

        self._require_user_id(user_id)
        self._require_favourite_id(favourite_id)
        updated = self._store.update_description(user_id, favourite_id, description)
        logger.debug("Updated description of favourite %s for user %s", favourite_id, user_id)
        return updated

    def delete_favourite(self, user_id: str, favourite_id: str) -> None:
        self._require_user_id(user_id)
        self._require_favourite_id(favourite_id)
        self._store.delete(user_id, favourite_id)
        logger.info("Deleted favourite %s for user %s", favourite_id, user_id)

    @staticmethod
    def _require_user_id(user_id: str) -> None:
        if not is_valid_user_id(user_id):
            raise InvalidIdentityError(
                "user id must be 1-64 characters of letters, digits, '_' or '-'",
                field="user_id",
            )

    @staticmethod
    def _require_favourite_id(favourite_id: str) -> None:
        if not isinstance(favourite_id, str) or not favourite_id.strip():
            raise InvalidIdentityError(
                "favourite id must not be blank", field="favourite_id"
            )
