"""Project-level non-DRF views.

This module contains the root landing endpoint used for quick service checks
and links to the weather endpoint and the API documentation.
"""

from __future__ import annotations

from django.http import HttpRequest, JsonResponse


def home(request: HttpRequest) -> JsonResponse:
    """Return basic service metadata and documentation links."""
    return JsonResponse(
        {
            "ok": True,
            "service": "skycast-weather",
            "weather": "/weather",
            "docs": "/api/docs/",
            "redoc": "/api/redoc/",
        }
    )
