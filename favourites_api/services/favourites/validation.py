"""Asset schema validation for favourite payloads.

Validation runs in two phases. The first decodes only the envelope shared by
every asset (``type`` and ``description``) so the declared kind can be read
without knowing anything about the kind itself. The second re-decodes the same
document against the strict shape registered for that kind and applies its
required-field rules. Keeping the phases apart means a new kind only needs a
shape model and an entry in :data:`ASSET_SHAPES`, and lets callers tell a
malformed document, an unknown kind, and an incomplete asset apart.

The validator is a pure function. :class:`ValidatedAsset` carries both the
decoded document (the caller's own mapping when one was passed) and the JSON
text it came from, which is what gets stored.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from pydantic import ValidationError

from favourites_api.schemas.favourites import (
    AssetEnvelope,
    AssetKind,
    AssetShape,
    AudienceAsset,
    ChartAsset,
    InsightAsset,
)
from favourites_api.services.favourites.errors import (
    MalformedPayloadError,
    SchemaViolationError,
    UnknownAssetKindError,
)
from favourites_api.utils.raw_json import decoder

__all__ = [
    "ASSET_SHAPES",
    "RawAsset",
    "ValidatedAsset",
    "decode_payload",
    "validate_asset",
]

RawAsset: TypeAlias = bytes | bytearray | str | Mapping[str, Any]

ASSET_SHAPES: dict[AssetKind, type[AssetShape]] = {
    AssetKind.CHART: ChartAsset,
    AssetKind.INSIGHT: InsightAsset,
    AssetKind.AUDIENCE: AudienceAsset,
}


@dataclass(frozen=True, slots=True)
class ValidatedAsset:
    """Outcome of a successful validation."""

    kind: AssetKind
    description: str
    payload: dict[str, Any]
    raw: str


def _summarize(exc: ValidationError) -> str:
    """Collapse pydantic errors into a single ``loc: msg`` line."""

    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"]) or "asset"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def _as_text(raw: RawAsset) -> str:
    """Return the JSON text behind ``raw``, serialising mappings."""

    if isinstance(raw, str):
        return raw
    if isinstance(raw, (bytes, bytearray)):
        try:
            return bytes(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedPayloadError(f"asset is not valid UTF-8: {exc}") from exc
    try:
        return json.dumps(raw, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise MalformedPayloadError(f"asset is not JSON serialisable: {exc}") from exc


def decode_payload(raw: RawAsset) -> tuple[dict[str, Any], str]:
    """Return ``raw`` as a JSON object together with its JSON text.

    Text and bytes are decoded strictly: ``NaN`` and ``Infinity`` are not JSON
    and are rejected. A mapping is returned as is, alongside its serialisation.
    """

    text = _as_text(raw)
    if isinstance(raw, Mapping):
        decoded: Any = raw
    else:
        try:
            decoded = decoder.decode(text)
        except ValueError as exc:
            raise MalformedPayloadError(f"invalid asset json: {exc}") from exc

    if not isinstance(decoded, Mapping):
        raise MalformedPayloadError("asset must be a JSON object")
    if not isinstance(decoded, dict):
        decoded = dict(decoded)
    return decoded, text


def validate_asset(raw: RawAsset) -> ValidatedAsset:
    """Validate ``raw`` against the rules of the kind it declares.

    Raises :class:`MalformedPayloadError` when the document cannot be decoded
    or a field has the wrong type, :class:`UnknownAssetKindError` when
    ``type`` is missing or unsupported, and :class:`SchemaViolationError` when
    required fields are absent or empty.
    """

    payload, text = decode_payload(raw)

    try:
        envelope = AssetEnvelope.model_validate(payload)
    except ValidationError as exc:
        raise MalformedPayloadError(f"invalid asset: {_summarize(exc)}") from exc

    try:
        kind = AssetKind(envelope.type)
    except ValueError:
        raise UnknownAssetKindError(envelope.type) from None

    try:
        shape = ASSET_SHAPES[kind].model_validate(payload)
    except ValidationError as exc:
        raise MalformedPayloadError(f"invalid {kind.value}: {_summarize(exc)}") from exc

    missing = shape.missing_fields()
    if missing:
        raise SchemaViolationError(kind.value, missing)

    return ValidatedAsset(
        kind=kind,
        description=envelope.description or "",
        payload=payload,
        raw=text,
    )
