"""JSON responses that embed stored asset text verbatim.

Pydantic would re-encode a decoded asset, so numbers such as ``1.50`` or
``1e2`` would come back rewritten. These helpers serialise the favourite's
metadata with pydantic and splice the stored asset text in unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import Response, status

from favourites_api.schemas.favourites import Favourite

__all__ = ["favourite_list_response", "favourite_response", "render_favourite"]

JSON_MEDIA_TYPE = "application/json"


def render_favourite(favourite: Favourite) -> str:
    """Return ``favourite`` as a JSON object whose ``asset`` is the stored text."""

    metadata = favourite.model_dump_json(exclude={"asset"})
    return f'{metadata[:-1]},"asset":{favourite.asset}}}'


def favourite_response(
    favourite: Favourite, *, status_code: int = status.HTTP_200_OK
) -> Response:
    return Response(
        content=render_favourite(favourite),
        status_code=status_code,
        media_type=JSON_MEDIA_TYPE,
    )


def favourite_list_response(
    favourites: Sequence[Favourite], *, total: int, limit: int, offset: int
) -> Response:
    """Render one page of favourites with its paging metadata."""

    items = ",".join(render_favourite(favourite) for favourite in favourites)
    content = (
        f'{{"favourites":[{items}],"total":{total},"limit":{limit},"offset":{offset}}}'
    )
    return Response(content=content, media_type=JSON_MEDIA_TYPE)
