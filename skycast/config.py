"""SkyCast client configuration loader.

Reads SKYCAST_* environment variables. The reverse-geocoding key is the
client's own credential and is never shared with the weather service.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .state import Theme, Unit


class ClientConfigError(Exception):
    """Raised when client configuration is invalid."""

    def __init__(self, message: str, *, code: str) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class ClientConfig:
    api_base_url: str = "http://localhost:8000"
    geocoding_base_url: str = "https://api.openweathermap.org/geo/1.0"
    geocoding_api_key: str = ""
    display_tz: str = "Asia/Kolkata"
    default_city: str = "Chennai"
    default_unit: Unit = Unit.FAHRENHEIT
    default_theme: Theme = Theme.DARK

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ClientConfig:
        source = os.environ if env is None else env
        defaults = cls()

        raw_unit = source.get("SKYCAST_DEFAULT_UNIT", "").strip().upper()
        try:
            unit = Unit(raw_unit) if raw_unit else defaults.default_unit
        except ValueError as exc:
            raise ClientConfigError(
                "SKYCAST_DEFAULT_UNIT must be C or F.", code="bad_unit"
            ) from exc

        display_tz = (
            source.get("SKYCAST_DISPLAY_TZ", "").strip() or defaults.display_tz
        )
        try:
            ZoneInfo(display_tz)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ClientConfigError(
                f"SKYCAST_DISPLAY_TZ '{display_tz}' is not a known timezone.",
                code="bad_timezone",
            ) from exc

        return cls(
            api_base_url=(
                source.get("SKYCAST_API_BASE_URL", "").strip()
                or defaults.api_base_url
            ).rstrip("/"),
            geocoding_base_url=(
                source.get("SKYCAST_GEOCODING_BASE_URL", "").strip()
                or defaults.geocoding_base_url
            ).rstrip("/"),
            geocoding_api_key=source.get(
                "SKYCAST_GEOCODING_API_KEY", ""
            ).strip(),
            display_tz=display_tz,
            default_city=(
                source.get("SKYCAST_DEFAULT_CITY", "").strip()
                or defaults.default_city
            ),
            default_unit=unit,
            default_theme=defaults.default_theme,
        )
