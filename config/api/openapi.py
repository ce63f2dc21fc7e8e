"""drf-spectacular helpers for documenting the project's error body.

The runtime helper `config.api.responses.error_response` and the global DRF
exception handler both answer failures with `{"error": <message>}`. This
builds the matching serializer for OpenAPI documentation.
"""

from __future__ import annotations

from drf_spectacular.utils import inline_serializer
from rest_framework import serializers
from rest_framework.serializers import Serializer


def error_body_serializer(name: str) -> Serializer:
    """Build an OpenAPI schema matching `error_response`."""

    return inline_serializer(
        name=name,
        fields={"error": serializers.CharField()},
    )
