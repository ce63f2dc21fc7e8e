from __future__ import annotations

from .engines.types import ByCity, ByCoordinates, LocationQuery
from .errors import MissingLocation


def normalize_query(
    city: str | None = None,
    lat: float | None = None,
    lon: float | None = None,
) -> LocationQuery:
    """Classify an inbound location as a city lookup or a coordinate pair.

    A non-blank city always wins over coordinates. Coordinates are passed on
    without range checks; out-of-range values are the upstream's to reject.
    """

    name = (city or "").strip()
    if name:
        return ByCity(name=name)
    if lat is None or lon is None:
        raise MissingLocation()
    return ByCoordinates(lat=float(lat), lon=float(lon))
