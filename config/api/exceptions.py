from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from rest_framework.response import Response


JSONValue: TypeAlias = (
    None
    | bool
    | int
    | float
    | str
    | list["JSONValue"]
    | dict[str, "JSONValue"]
)


def _to_json_value(value: object) -> JSONValue:
    if value is None or isinstance(value, str | int | float | bool):
        return value
    if isinstance(value, Mapping):
        return {str(k): _to_json_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_to_json_value(v) for v in value]
    return str(value)


def _flatten_message(detail: JSONValue) -> str:
    """Collapse DRF error detail into one message string.

    `{"lat": ["A valid number is required."]}` becomes
    `"lat: A valid number is required."`.
    """

    if isinstance(detail, str):
        return detail
    if isinstance(detail, list):
        parts = [_flatten_message(item) for item in detail]
        return " ".join(part for part in parts if part)
    if isinstance(detail, dict):
        if isinstance(detail.get("detail"), str):
            return str(detail["detail"])
        parts = []
        for key, value in detail.items():
            message = _flatten_message(value)
            if key == "non_field_errors":
                parts.append(message)
            else:
                parts.append(f"{key}: {message}")
        return " ".join(part for part in parts if part)
    return "" if detail is None else str(detail)


def custom_exception_handler(
    exc: Exception,
    context: dict[str, Any],
) -> Response:
    # Lazy imports: safe even if settings aren't configured at import time.
    from rest_framework import status
    from rest_framework.response import Response
    from rest_framework.views import exception_handler as drf_exception_handler

    response = drf_exception_handler(exc, context)

    if response is None:
        return Response(
            {"error": "Internal server error"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    message = _flatten_message(_to_json_value(response.data))
    response.data = {"error": message or "Request failed"}
    return response
