from __future__ import annotations

from typing import ClassVar

from rest_framework import serializers

from config.api.responses import JSONValue

from .engines.types import WeatherSnapshot


class WeatherQueryParamsSerializer(serializers.Serializer):
    """Inbound `/weather` query: `city`, or `lat` + `lon`.

    Coordinates are only checked for being numbers; range checks belong to
    the upstream provider.
    """

    city: ClassVar[serializers.CharField] = serializers.CharField(
        required=False, allow_blank=True, allow_null=True
    )
    lat: ClassVar[serializers.FloatField] = serializers.FloatField(
        required=False, allow_null=True
    )
    lon: ClassVar[serializers.FloatField] = serializers.FloatField(
        required=False, allow_null=True
    )


class WeatherSnapshotSerializer(serializers.Serializer):
    current: ClassVar[serializers.JSONField] = serializers.JSONField()
    forecast: ClassVar[serializers.ListField] = serializers.ListField(
        child=serializers.JSONField()
    )


def serialize_snapshot(snapshot: WeatherSnapshot) -> dict[str, JSONValue]:
    """Return raw upstream current payload plus sampled forecast items."""

    return {
        "current": dict(snapshot.current.raw),
        "forecast": [dict(entry.raw) for entry in snapshot.forecast],
    }
