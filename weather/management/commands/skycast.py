from __future__ import annotations

import asyncio
from argparse import ArgumentParser
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from django.core.management.base import BaseCommand, CommandError

from skycast.api import WeatherApiClient
from skycast.config import ClientConfig, ClientConfigError
from skycast.geocoding import ReverseGeocoder
from skycast.geolocation import FixedGeolocator, Geolocator, IpGeolocator
from skycast.presentation import build_view, render_text
from skycast.resolution import LocationResolutionChain
from skycast.session import WeatherSession
from skycast.state import DisplayState, Theme, Unit


class Command(BaseCommand):
    help = (
        "Terminal SkyCast client: search a city or resolve the current "
        "location, then print the weather view from GET /weather."
    )

    def add_arguments(self, parser: ArgumentParser) -> None:
        parser.add_argument("--city", help="City to search for.")
        parser.add_argument(
            "--locate",
            action="store_true",
            help="Resolve the location instead of searching a city.",
        )
        parser.add_argument("--lat", type=float, help="Device latitude.")
        parser.add_argument("--lon", type=float, help="Device longitude.")
        parser.add_argument(
            "--ip-location",
            action="store_true",
            help="Use the public IP position when --lat/--lon are absent.",
        )
        parser.add_argument("--unit", choices=[u.value for u in Unit])
        parser.add_argument("--theme", choices=[t.value for t in Theme])
        parser.add_argument("--api-base-url", help="Weather service URL.")

    def handle(self, *args: object, **options: object) -> None:
        try:
            config = ClientConfig.from_env()
        except ClientConfigError as exc:
            raise CommandError(str(exc)) from exc

        geolocator: Geolocator | None = None
        lat, lon = options.get("lat"), options.get("lon")
        if isinstance(lat, float) and isinstance(lon, float):
            geolocator = FixedGeolocator(lat, lon)
        elif options.get("ip_location"):
            geolocator = IpGeolocator()

        base_url = options.get("api_base_url") or config.api_base_url
        chain = LocationResolutionChain(
            geolocator=geolocator,
            geocoder=ReverseGeocoder(
                base_url=config.geocoding_base_url,
                api_key=config.geocoding_api_key,
            ),
            api=WeatherApiClient(base_url=str(base_url)),
        )
        session = WeatherSession(
            chain,
            state=DisplayState(
                city_input=config.default_city,
                unit=config.default_unit,
                theme=config.default_theme,
            ),
        )

        if options.get("unit"):
            session.set_unit(Unit(str(options["unit"])))
        if options.get("theme") and options["theme"] != session.state.theme:
            session.toggle_theme()

        if options.get("locate"):
            state = asyncio.run(session.locate())
        else:
            city = options.get("city")
            state = asyncio.run(
                session.search(str(city) if city is not None else None)
            )

        view = build_view(
            state, now=datetime.now(UTC), tz=ZoneInfo(config.display_tz)
        )
        for line in render_text(state, view):
            self.stdout.write(line)
