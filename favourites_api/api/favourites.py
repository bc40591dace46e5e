"""FastAPI router exposing CRUD operations for user favourites.

Endpoints are plain ``def`` functions, so FastAPI runs them in its threadpool
and concurrent requests reach the shared store in parallel. Domain failures
propagate as :class:`FavouritesError` subclasses and are turned into error
payloads by the handlers registered in :mod:`favourites_api.main`.

Favourites are rendered by :mod:`favourites_api.api.responses` so the stored
asset text is returned exactly as it was posted.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Request, Response, status

from favourites_api.api.responses import favourite_list_response, favourite_response
from favourites_api.schemas.favourites import (
    FavouriteCreateRequest,
    FavouriteDescriptionUpdate,
    FavouriteListResponse,
    FavouriteRead,
)
from favourites_api.services.dependencies import get_app_settings, get_favourites_service
from favourites_api.services.favourites_service import FavouritesService
from favourites_api.settings import AppSettings
from favourites_api.utils.pagination import paginate, resolve_page_window
from favourites_api.utils.raw_json import decoder, member_text

router = APIRouter()


async def read_request_body(request: Request) -> bytes:
    """Expose the raw request body; Starlette caches it after the first read."""

    return await request.body()


def _asset_source(body: bytes, parsed: Any) -> Any:
    """Return the literal JSON text of the posted ``asset`` member.

    A string member is taken as JSON text itself. When the body cannot be
    scanned as plain JSON the already parsed value is returned instead and
    the validator reports the problem.
    """

    try:
        text = member_text(body.decode("utf-8"), "asset")
    except ValueError:
        return parsed
    if text is None:
        return parsed
    if text.startswith('"'):
        return decoder.decode(text)
    return text


@router.get("/{user_id}/favourites", response_model=FavouriteListResponse)
def list_favourites(
    user_id: str,
    limit: int | None = Query(
        None,
        description="Page size; non-positive values use the default, large ones are capped.",
    ),
    offset: int | None = Query(None, description="Number of favourites to skip."),
    service: FavouritesService = Depends(get_favourites_service),
    settings: AppSettings = Depends(get_app_settings),
) -> Response:
    """Return one page of the user's favourites, newest first."""

    favourites = service.list_favourites(user_id)
    window = resolve_page_window(
        limit,
        offset,
        default_limit=settings.default_page_limit,
        max_limit=settings.max_page_limit,
    )
    return favourite_list_response(
        paginate(favourites, window),
        total=len(favourites),
        limit=window.limit,
        offset=window.offset,
    )


@router.post(
    "/{user_id}/favourites",
    response_model=FavouriteRead,
    status_code=status.HTTP_201_CREATED,
)
def create_favourite(
    user_id: str,
    payload: FavouriteCreateRequest,
    body: bytes = Depends(read_request_body),
    service: FavouritesService = Depends(get_favourites_service),
) -> Response:
    """Validate the supplied asset and save it as a new favourite."""

    favourite = service.create_favourite(user_id, _asset_source(body, payload.asset))
    return favourite_response(favourite, status_code=status.HTTP_201_CREATED)


@router.get("/{user_id}/favourites/{favourite_id}", response_model=FavouriteRead)
def get_favourite(
    user_id: str,
    favourite_id: str,
    service: FavouritesService = Depends(get_favourites_service),
) -> Response:
    return favourite_response(service.get_favourite(user_id, favourite_id))


@router.patch("/{user_id}/favourites/{favourite_id}", response_model=FavouriteRead)
def update_favourite_description(
    user_id: str,
    favourite_id: str,
    payload: FavouriteDescriptionUpdate,
    service: FavouritesService = Depends(get_favourites_service),
) -> Response:
    """Replace the description of an existing favourite."""

    return favourite_response(
        service.update_favourite_description(user_id, favourite_id, payload.description)
    )


@router.delete(
    "/{user_id}/favourites/{favourite_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_favourite(
    user_id: str,
    favourite_id: str,
    service: FavouritesService = Depends(get_favourites_service),
) -> Response:
    service.delete_favourite(user_id, favourite_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
