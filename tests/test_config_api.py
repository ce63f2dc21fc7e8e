from __future__ import annotations

# ruff: noqa: S101
from decimal import Decimal
from unittest.mock import patch

from django.test import Client
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response

from config.api.exceptions import (
    _flatten_message,
    _to_json_value,
    custom_exception_handler,
)
from config.api.responses import error_response, success_response


def test_error_response_payload() -> None:
    resp = error_response("Bad request", status_code=418)
    assert resp.status_code == 418
    assert resp.data == {"error": "Bad request"}


def test_success_response_passes_body_through() -> None:
    resp = success_response({"current": {}, "forecast": []})
    assert resp.status_code == 200
    assert resp.data == {"current": {}, "forecast": []}


def test_custom_exception_handler_returns_500_on_unhandled() -> None:
    with patch("rest_framework.views.exception_handler", return_value=None):
        resp = custom_exception_handler(Exception("boom"), {})
    assert resp.status_code == 500
    assert resp.data == {"error": "Internal server error"}


def test_custom_exception_handler_flattens_validation_errors() -> None:
    exc = ValidationError({"lon": ["A valid number is required."]})
    with patch(
        "rest_framework.views.exception_handler",
        return_value=Response(exc.detail, status=400),
    ):
        resp = custom_exception_handler(exc, {})
    assert resp.status_code == 400
    assert resp.data == {"error": "lon: A valid number is required."}


def test_custom_exception_handler_uses_detail() -> None:
    resp = custom_exception_handler(NotFound(), {})
    assert resp.status_code == 404
    assert resp.data == {"error": "Not found."}


def test_flatten_message_shapes() -> None:
    assert _flatten_message("plain") == "plain"
    assert _flatten_message(["a", "b"]) == "a b"
    assert _flatten_message({"non_field_errors": ["both"]}) == "both"
    assert _flatten_message(None) == ""


def test_to_json_value_handles_sequences() -> None:
    payload = ("ok", {"value": Decimal("1.25")})
    assert _to_json_value(payload) == ["ok", {"value": "1.25"}]


def test_home_view_returns_metadata() -> None:
    client = Client()
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["service"] == "skycast-weather"
    assert body["weather"] == "/weather"
    assert body["docs"] == "/api/docs/"


def test_metrics_endpoint_exposes_weather_counters() -> None:
    resp = Client().get("/metrics")
    assert resp.status_code == 200
    assert b"weather_upstream_requests_total" in resp.content


def test_openapi_schema_lists_weather_endpoint() -> None:
    resp = Client().get("/api/schema/", HTTP_ACCEPT="application/json")
    assert resp.status_code == 200
    assert b"/weather" in resp.content
