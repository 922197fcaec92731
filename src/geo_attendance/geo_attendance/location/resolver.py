"""Turn a client-supplied position into a Location with a readable address.

The device reports latitude/longitude; the address is either supplied by the
client or looked up through a reverse-geocoding service. A lookup never fails
the surrounding check-in: on any error the address falls back to the raw
coordinates.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol

import requests

from ..common.validators import require_float_in_range
from ..core.constants import DEFAULT_GEOCODER_TIMEOUT, DEFAULT_GEOCODER_URL
from ..core.exceptions import ValidationError
from .model import Location, format_coordinates

logger = logging.getLogger(__name__)


class ReverseGeocoder(Protocol):
    def lookup(self, latitude: float, longitude: float) -> Optional[str]:
        raise NotImplementedError


class NominatimGeocoder:
    """Reverse geocoding through the OpenStreetMap Nominatim API."""

    def __init__(
        self,
        *,
        url: str = DEFAULT_GEOCODER_URL,
        timeout: float = DEFAULT_GEOCODER_TIMEOUT,
        user_agent: str = "geo-attendance/1.0",
        session: Optional[requests.Session] = None,
    ):
        self._url = url
        self._timeout = float(timeout)
        self._headers = {"User-Agent": user_agent}
        self._session = session or requests.Session()

    def lookup(self, latitude: float, longitude: float) -> Optional[str]:
        response = self._session.get(
            self._url,
            params={"format": "json", "lat": latitude, "lon": longitude, "addressdetails": 1},
            headers=self._headers,
            timeout=self._timeout,
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            return None
        return data.get("display_name") or None


class LocationResolver:
    def __init__(self, geocoder: Optional[ReverseGeocoder] = None):
        self._geocoder = geocoder

    def resolve(self, payload: Optional[Mapping[str, Any]]) -> Location:
        if not payload or not isinstance(payload, Mapping):
            raise ValidationError("Location is required")

        latitude = require_float_in_range(payload.get("latitude"), "Latitude", -90.0, 90.0)
        longitude = require_float_in_range(payload.get("longitude"), "Longitude", -180.0, 180.0)

        address = (payload.get("address") or "").strip()
        if not address:
            address = self._lookup_address(latitude, longitude)

        return Location(latitude=latitude, longitude=longitude, address=address)

    def _lookup_address(self, latitude: float, longitude: float) -> str:
        fallback = format_coordinates(latitude, longitude)
        if self._geocoder is None:
            return fallback

        try:
            address = self._geocoder.lookup(latitude, longitude)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Reverse geocoding failed for %s: %s", fallback, e)
            return fallback

        return address or fallback
