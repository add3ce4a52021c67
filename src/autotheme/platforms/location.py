"""Location providers: a fixed coordinate or IP geolocation."""

import logging

import requests

from ..core.location import AuthorizationLevel, Coordinate
from .base import LocationProvider

logger = logging.getLogger(__name__)


class StaticLocationProvider(LocationProvider):
    """Always answers with the configured coordinate (UNKNOWN when unset)."""

    name = "static"

    def __init__(self, coordinate: Coordinate = Coordinate.UNKNOWN):
        self.coordinate = coordinate

    def request(self, level: AuthorizationLevel) -> Coordinate:
        return self.coordinate


class IPLocationProvider(LocationProvider):
    """Approximate location from an ipinfo-style ``{"loc": "lat,lon"}`` endpoint."""

    name = "ip"

    def __init__(self, url: str = "https://ipinfo.io/json", timeout: float = 5.0):
        self.url = url
        self.timeout = timeout

    def request(self, level: AuthorizationLevel) -> Coordinate:
        logger.debug(f"Requesting location from {self.url} ({level.name.lower()})")
        try:
            res = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning(f"Location request failed: {e}")
            return Coordinate.UNKNOWN

        if res.status_code in (401, 403):
            return Coordinate.DENIED
        try:
            res.raise_for_status()
            lat, lon = map(float, res.json()["loc"].split(","))
        except (requests.HTTPError, ValueError, KeyError, AttributeError) as e:
            logger.warning(f"Unusable location response: {e}")
            return Coordinate.UNKNOWN
        return Coordinate(lat, lon)
