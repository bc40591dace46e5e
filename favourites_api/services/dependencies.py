"""FastAPI dependency wiring for the favourites services.

Separating dependency factories from service implementation modules keeps the
latter free of web-layer concerns. The store and service are built once by the
application factory and kept on ``app.state``; these helpers only look them up.
"""

from __future__ import annotations

from fastapi import Request

from favourites_api.services.favourites import FavouriteStore, InMemoryFavouriteStore
from favourites_api.services.favourites_service import FavouritesService
from favourites_api.settings import AppSettings


def build_favourites_service(store: FavouriteStore | None = None) -> FavouritesService:
    """Wire a service around ``store`` (a fresh in-memory store by default)."""

    return FavouritesService(store if store is not None else InMemoryFavouriteStore())


def get_favourites_service(request: Request) -> FavouritesService:
    """Provide the application's shared :class:`FavouritesService` instance."""

    return request.app.state.favourites_service


def get_app_settings(request: Request) -> AppSettings:
    """Provide the settings the running application was built with."""

    return request.app.state.settings


__all__ = ["build_favourites_service", "get_app_settings", "get_favourites_service"]
