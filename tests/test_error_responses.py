"""Tests covering the helper utilities that construct error responses."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from favourites_api.schemas.error import ErrorType, ValidationErrorDetail
from favourites_api.utils import error_responses
from favourites_api.utils.error_responses import (
    build_error_response,
    build_validation_error_response,
    error_json_response,
)
from favourites_api.utils.request_context import bound_request_id


def _freeze_timestamp(monkeypatch: pytest.MonkeyPatch, fixed: datetime) -> None:
    """Override ``_current_timestamp`` to yield the provided ``datetime``."""

    monkeypatch.setattr(error_responses, "_current_timestamp", lambda: fixed)


def test_build_validation_error_response_includes_context_metadata(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """The helper should embed the request ID and a timezone-aware timestamp."""

    fixed_timestamp = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
    _freeze_timestamp(monkeypatch, fixed_timestamp)

    with bound_request_id("req-123"):
        errors = [
            ValidationErrorDetail(
                field="asset.title",
                message="Must not be empty",
                value=None,
            )
        ]

        response = build_validation_error_response(
            error_type=ErrorType.SCHEMA_VIOLATION,
            message="Asset failed schema validation",
            detail="chart requires non-empty title",
            status_code=422,
            path="/users/alice/favourites",
            errors=errors,
        )

        assert response.request_id == "req-123"
        assert response.timestamp == fixed_timestamp
        assert response.error_type == ErrorType.SCHEMA_VIOLATION
        assert response.errors == errors


def test_build_error_response_allows_request_id_override(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Explicit request identifiers should take precedence over context values."""

    fixed_timestamp = datetime(2024, 1, 2, 6, 30, 0, tzinfo=UTC)
    _freeze_timestamp(monkeypatch, fixed_timestamp)

    with bound_request_id("context-id"):
        response = build_error_response(
            error_type=ErrorType.NOT_FOUND,
            message="Favourite not found",
            detail="favourite not found",
            status_code=404,
            path="/users/alice/favourites/f1",
            request_id="override-id",
        )

    assert response.request_id == "override-id"
    assert response.timestamp == fixed_timestamp
    assert response.retry_after is None


def test_error_json_response_uses_status_and_headers(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _freeze_timestamp(monkeypatch, datetime(2024, 1, 3, tzinfo=UTC))

    response = error_json_response(
        build_error_response(
            error_type=ErrorType.RATE_LIMITED,
            message="Rate limit exceeded",
            detail="Too many requests for user:alice",
            status_code=429,
            path="/users/alice/favourites",
            retry_after=2,
        ),
        headers={"Retry-After": "2"},
    )

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "2"
    body = json.loads(response.body.decode())
    assert body["error_type"] == "rate_limited"
    assert body["retry_after"] == 2
    assert body["request_id"] is None
    assert body["timestamp"].startswith("2024-01-03T00:00:00")
