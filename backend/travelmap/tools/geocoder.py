import logging
from typing import List, Protocol

import requests

from travelmap.core.errors import ResolutionError

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    """Place-name to coordinates lookup, returning the provider's raw records."""

    def search(self, query: str, limit: int = 5) -> List[dict]:
        ...


class NominatimGeocoder(Geocoder):
    """
    Geocoder backed by the OpenStreetMap Nominatim search API.
    Records carry at least `display_name`, `lat` and `lon` (coordinates as strings).
    """

    def __init__(self, base_url: str, user_agent: str, timeout: float = 8.0):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout

    def search(self, query: str, limit: int = 5) -> List[dict]:
        params = {"format": "json", "q": query, "limit": limit}
        headers = {"User-Agent": self.user_agent}
        try:
            resp = requests.get(
                f"{self.base_url}/search",
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            logger.warning("Nominatim request failed for %r: %s", query, exc)
            raise ResolutionError(f"Geocoding request failed: {exc}") from exc
        except ValueError as exc:
            logger.warning("Nominatim returned invalid JSON for %r", query)
            raise ResolutionError("Geocoding service returned invalid JSON") from exc

        if not isinstance(data, list):
            raise ResolutionError("Geocoding service returned an unexpected payload")
        return data
