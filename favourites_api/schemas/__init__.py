"""Pydantic schemas for API requests and responses."""

from favourites_api.schemas.error import (  # noqa: F401
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from favourites_api.schemas.favourites import (  # noqa: F401
    AssetKind,
    Favourite,
    FavouriteCreateRequest,
    FavouriteDescriptionUpdate,
    FavouriteListResponse,
    FavouriteRead,
)
