"""Weather API endpoint.

`GET /weather?city=<name>` or `GET /weather?lat=<f>&lon=<f>` answers with
`{"current": ..., "forecast": [...]}`; failures answer `{"error": ...}`.
"""

from __future__ import annotations

import logging

from asgiref.sync import async_to_sync
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiTypes,
    extend_schema,
)
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from config.api.openapi import error_body_serializer
from config.api.responses import error_response, success_response

from .errors import WeatherError
from .serializers import (
    WeatherQueryParamsSerializer,
    WeatherSnapshotSerializer,
    serialize_snapshot,
)
from .services import aggregate

logger = logging.getLogger(__name__)

weather_error_schema = error_body_serializer("WeatherErrorResponse")


class WeatherView(APIView):
    """Current conditions plus one forecast sample per day for a location.

    Auth: none. `city` takes priority when both city and coordinates are
    supplied.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[
            OpenApiParameter(
                name="city",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
            ),
            OpenApiParameter(
                name="lat",
                type=OpenApiTypes.FLOAT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Latitude, required with lon when no city",
            ),
            OpenApiParameter(
                name="lon",
                type=OpenApiTypes.FLOAT,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Longitude, required with lat when no city",
            ),
        ],
        responses={
            200: WeatherSnapshotSerializer,
            400: weather_error_schema,
            500: weather_error_schema,
        },
    )
    def get(self, request: Request) -> Response:
        serializer = WeatherQueryParamsSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        try:
            snapshot = async_to_sync(aggregate)(
                city=params.get("city"),
                lat=params.get("lat"),
                lon=params.get("lon"),
            )
        except WeatherError as exc:
            logger.info(
                "weather.request.failed kind=%s status_code=%s",
                exc.kind.value,
                exc.status_code,
            )
            return error_response(
                exc.public_message, status_code=exc.status_code
            )
        return success_response(serialize_snapshot(snapshot))
