"""Unit tests for the two-phase asset schema validator."""

from __future__ import annotations

import json
from typing import Any

import pytest

from favourites_api.schemas.favourites import AssetKind
from favourites_api.services.favourites import (
    MalformedPayloadError,
    SchemaViolationError,
    UnknownAssetKindError,
    validate_asset,
)


def test_valid_assets_report_declared_kind(
    chart_payload: dict[str, Any],
    insight_payload: dict[str, Any],
    audience_payload: dict[str, Any],
) -> None:
    assert validate_asset(chart_payload).kind is AssetKind.CHART
    assert validate_asset(insight_payload).kind is AssetKind.INSIGHT
    assert validate_asset(audience_payload).kind is AssetKind.AUDIENCE


def test_description_comes_from_envelope_and_defaults_to_empty(
    chart_payload: dict[str, Any], audience_payload: dict[str, Any]
) -> None:
    assert validate_asset(chart_payload).description == "monthly sales"
    assert validate_asset(audience_payload).description == ""


def test_payload_is_returned_untouched(chart_payload: dict[str, Any]) -> None:
    """Unknown fields survive and the caller's document is not rewritten."""

    chart_payload["source"] = {"dashboard": "q3", "widgets": [1, 2]}
    before = json.dumps(chart_payload)

    result = validate_asset(chart_payload)

    assert result.payload is chart_payload
    assert json.dumps(result.payload) == before


def test_accepts_json_text_and_bytes(insight_payload: dict[str, Any]) -> None:
    text = json.dumps(insight_payload)

    from_text = validate_asset(text)
    from_bytes = validate_asset(text.encode("utf-8"))

    assert from_text.payload == insight_payload
    assert from_bytes.payload == insight_payload


def test_text_input_is_kept_verbatim() -> None:
    raw = '{"type":"chart","title":"t","data":[1.50,1e2,3.0]}'

    result = validate_asset(raw)

    assert result.raw == raw
    assert result.payload["data"] == [1.5, 100.0, 3.0]


def test_bytes_input_is_kept_as_utf8_text() -> None:
    raw = '{"type": "insight", "text": "crème brûlée"}'

    assert validate_asset(raw.encode("utf-8")).raw == raw


@pytest.mark.parametrize(
    "raw",
    [
        '{"type": "chart", "title": "t", "data": [NaN]}',
        '{"type": "chart", "title": "t", "data": [1, Infinity]}',
        b'{"type": "chart", "title": "t", "data": [-Infinity]}',
        '{"type": "audience", "gender": "f", "age_groups": ["18-24"], "hours_social_daily": NaN}',
    ],
)
def test_non_finite_numbers_in_text_are_malformed(raw: bytes | str) -> None:
    with pytest.raises(MalformedPayloadError):
        validate_asset(raw)


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "chart", "title": "t", "data": [float("nan")]},
        {"type": "chart", "title": "t", "data": [1, float("-inf")]},
        {"type": "audience", "gender": "f", "age_groups": ["18-24"], "hours_social_daily": float("inf")},
    ],
)
def test_non_finite_numbers_in_mappings_are_malformed(payload: dict[str, Any]) -> None:
    with pytest.raises(MalformedPayloadError):
        validate_asset(payload)


@pytest.mark.parametrize(
    "raw",
    [
        b"{not json",
        "",
        "[1, 2, 3]",
        '"chart"',
        b"\x80abc",
    ],
)
def test_undecodable_or_non_object_input_is_malformed(raw: bytes | str) -> None:
    with pytest.raises(MalformedPayloadError):
        validate_asset(raw)


def test_non_mapping_python_value_is_malformed() -> None:
    with pytest.raises(MalformedPayloadError):
        validate_asset(["chart"])  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "payload",
    [
        {"title": "Sales", "data": [1]},
        {"type": None, "text": "hello"},
        {"type": "graph", "title": "Sales", "data": [1]},
        {"type": "Chart", "title": "Sales", "data": [1]},
        {"type": "", "text": "hello"},
    ],
)
def test_missing_or_unsupported_type_is_unknown_kind(payload: dict[str, Any]) -> None:
    with pytest.raises(UnknownAssetKindError):
        validate_asset(payload)


def test_mistyped_envelope_is_malformed() -> None:
    with pytest.raises(MalformedPayloadError):
        validate_asset({"type": 7, "text": "hello"})
    with pytest.raises(MalformedPayloadError):
        validate_asset({"type": "insight", "description": 12, "text": "hello"})


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "chart", "title": "Sales", "data": ["1", "2"]},
        {"type": "chart", "title": "Sales", "data": 3},
        {"type": "chart", "title": 42, "data": [1]},
        {"type": "insight", "text": ["a", "b"]},
        {"type": "audience", "gender": "male", "age_groups": "18-24"},
        {"type": "audience", "gender": "male", "age_groups": [18]},
        {"type": "audience", "gender": "male", "age_groups": ["18-24"], "purchases_last_month": 1.5},
        {"type": "audience", "gender": "male", "age_groups": ["18-24"], "hours_social_daily": "3"},
    ],
)
def test_wrong_field_shapes_are_malformed(payload: dict[str, Any]) -> None:
    with pytest.raises(MalformedPayloadError):
        validate_asset(payload)


def test_integer_series_values_count_as_numbers() -> None:
    result = validate_asset({"type": "chart", "title": "Sales", "data": [1, 2, 3]})
    assert result.kind is AssetKind.CHART


@pytest.mark.parametrize(
    ("payload", "fields"),
    [
        ({"type": "chart", "title": "Sales", "data": []}, ("data",)),
        ({"type": "chart", "title": "   ", "data": [1]}, ("title",)),
        ({"type": "chart"}, ("title", "data")),
        ({"type": "insight", "text": ""}, ("text",)),
        ({"type": "insight"}, ("text",)),
        ({"type": "audience", "gender": "female", "age_groups": []}, ("age_groups",)),
        ({"type": "audience", "age_groups": ["18-24"]}, ("gender",)),
        ({"type": "audience"}, ("gender", "age_groups")),
    ],
)
def test_missing_required_fields_raise_schema_violation(
    payload: dict[str, Any], fields: tuple[str, ...]
) -> None:
    with pytest.raises(SchemaViolationError) as excinfo:
        validate_asset(payload)

    assert excinfo.value.fields == fields
    assert excinfo.value.kind == payload["type"]
    for name in fields:
        assert name in str(excinfo.value)


def test_optional_audience_fields_may_be_omitted() -> None:
    result = validate_asset({"type": "audience", "gender": "male", "age_groups": ["18-24"]})
    assert result.kind is AssetKind.AUDIENCE
