"""Pydantic schemas that power the favourites API surface.

Two families of models live here. The asset shapes (:class:`ChartAsset`,
:class:`InsightAsset`, :class:`AudienceAsset`) describe the per-kind payloads
accepted at the validation boundary and run in strict mode so that mistyped
fields are rejected instead of coerced. The read and request models
(:class:`Favourite` and friends) describe what the HTTP layer exchanges.
"""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AssetKind(str, Enum):
    """Closed set of asset kinds a favourite can reference."""

    CHART = "chart"
    INSIGHT = "insight"
    AUDIENCE = "audience"


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class AssetEnvelope(BaseModel):
    """Fields shared by every asset kind; anything else is ignored."""

    model_config = ConfigDict(extra="ignore", strict=True)

    type: str | None = None
    description: str | None = None


class AssetShape(BaseModel):
    """Base class for the kind-specific payload shapes."""

    model_config = ConfigDict(extra="ignore", strict=True, allow_inf_nan=False)

    description: str | None = None

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are absent or empty."""

        return []


class ChartAsset(AssetShape):
    """A simple numeric chart."""

    title: str | None = None
    axis_x_title: str | None = None
    axis_y_title: str | None = None
    data: list[float] | None = None

    def missing_fields(self) -> list[str]:
        missing: list[str] = []
        if _is_blank(self.title):
            missing.append("title")
        if not self.data:
            missing.append("data")
        return missing


class InsightAsset(AssetShape):
    """A short free-text insight."""

    text: str | None = None

    def missing_fields(self) -> list[str]:
        return ["text"] if _is_blank(self.text) else []


class AudienceAsset(AssetShape):
    """Demographic and behavioural description of an audience segment."""

    gender: str | None = None
    birth_country: str | None = None
    age_groups: list[str] | None = None
    hours_social_daily: float | None = None
    purchases_last_month: int | None = None

    def missing_fields(self) -> list[str]:
        missing: list[str] = []
        if _is_blank(self.gender):
            missing.append("gender")
        if not self.age_groups:
            missing.append("age_groups")
        return missing


class Favourite(BaseModel):
    """Read model for a user-saved asset.

    Instances are frozen; the store swaps in a copy when the description
    changes so readers never observe a half-applied update.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Opaque identifier unique across the store")
    type: AssetKind = Field(..., description="Kind of the referenced asset")
    description: str = Field("", description="Free-text note, the only editable field")
    asset: str = Field(
        ..., description="JSON text of the asset exactly as supplied at creation"
    )
    created_at: datetime = Field(..., description="UTC timestamp of creation")

    def decoded_asset(self) -> dict[str, Any]:
        return json.loads(self.asset)


class FavouriteCreateRequest(BaseModel):
    """Body accepted by the create endpoint."""

    asset: Any = Field(
        ...,
        description=(
            "Type-tagged asset document. Validated by the asset schema validator"
            " rather than by FastAPI so failures carry domain error types."
        ),
    )


class FavouriteDescriptionUpdate(BaseModel):
    """Body accepted by the description update endpoint."""

    description: str = Field(..., description="Replacement description text")


class FavouriteRead(BaseModel):
    """Wire shape of a favourite; ``asset`` is emitted as the stored JSON text."""

    id: str
    type: AssetKind
    description: str
    created_at: datetime
    asset: dict[str, Any]


class FavouriteListResponse(BaseModel):
    """Container returned by the listing endpoint."""

    favourites: list[FavouriteRead]
    total: int = Field(..., ge=0, description="Number of favourites before paging")
    limit: int
    offset: int
