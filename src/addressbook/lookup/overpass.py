import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import requests

from .base import AddressLookupError
from .models import AddressCandidate, coerce_coordinate

OVERPASS_ENDPOINTS = (
    "https://overpass-api.de/api/interpreter",
    "https://overpass.kumi.systems/api/interpreter",
    "https://maps.mail.ru/osm/tools/overpass/api/interpreter",
)

REQUEST_HEADERS = {
    "User-Agent": "AddressBook/1.0",
}

logger = logging.getLogger(__name__)


def build_overpass_query(post_code: str, house_number: str) -> str:
    """Build an Overpass API query matching housenumber and postcode."""
    post_code = _escape(post_code)
    house_number = _escape(house_number)
    return f"""
    [out:json][timeout:30];
    (
      node["addr:postcode"="{post_code}"]["addr:housenumber"="{house_number}"];
      way["addr:postcode"="{post_code}"]["addr:housenumber"="{house_number}"];
      relation["addr:postcode"="{post_code}"]["addr:housenumber"="{house_number}"];
    );
    out center tags;
    """


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class OverpassLookup:
    """Address lookup backed by the OpenStreetMap Overpass API.

    Endpoints are tried in order; rate limits, HTTP errors and broken
    payloads move on to the next one.
    """

    def __init__(
        self,
        endpoints: Sequence[str] = OVERPASS_ENDPOINTS,
        timeout: float = 45,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoints = tuple(endpoints)
        self.timeout = timeout
        self._session = session or requests.Session()

    async def search(self, post_code: str, house_number: str) -> List[AddressCandidate]:
        return await asyncio.to_thread(self.fetch_addresses, post_code, house_number)

    def fetch_addresses(self, post_code: str, house_number: str) -> List[AddressCandidate]:
        """Query Overpass for all addresses matching the postcode and house number."""
        query = build_overpass_query(post_code, house_number)

        for endpoint in self.endpoints:
            logger.debug("Querying Overpass endpoint %s", endpoint)
            try:
                response = self._session.get(
                    endpoint,
                    params={"data": query},
                    timeout=self.timeout,
                    headers=REQUEST_HEADERS,
                )
            except requests.RequestException as exc:
                logger.warning("Overpass endpoint %s failed: %s", endpoint, exc)
                continue

            if response.status_code == 429:
                logger.warning("Overpass endpoint %s is rate limiting", endpoint)
                continue

            if response.status_code >= 400:
                logger.warning("Overpass endpoint %s returned %s", endpoint, response.status_code)
                continue

            try:
                payload = response.json()
            except ValueError as exc:
                logger.warning("Overpass endpoint %s returned invalid JSON: %s", endpoint, exc)
                continue

            elements = payload.get("elements", []) if isinstance(payload, dict) else None
            if not isinstance(elements, list):
                logger.warning("Overpass endpoint %s returned an unexpected payload", endpoint)
                continue
            return _extract_matches(elements)

        raise AddressLookupError(
            "All Overpass API endpoints failed. "
            "Please retry in a few minutes or check your network connection."
        )


def _extract_matches(elements: List[Dict[str, Any]]) -> List[AddressCandidate]:
    """Normalize Overpass response elements into address candidates."""
    matches: List[AddressCandidate] = []
    for element in elements:
        if not isinstance(element, dict):
            logger.warning("Skipping non-object Overpass element: %r", element)
            continue

        osm_type = element.get("type")
        osm_id = element.get("id")
        if osm_type is None or osm_id is None:
            continue

        center = element.get("center")
        if not isinstance(center, dict):
            center = {}
        tags = element.get("tags")
        if not isinstance(tags, dict):
            tags = {}
        lat = element.get("lat") or center.get("lat")
        lon = element.get("lon") or center.get("lon")

        try:
            matches.append(
                AddressCandidate(
                    id=f"{osm_type}/{osm_id}",
                    street=tags.get("addr:street", "Unknown street"),
                    city=tags.get("addr:city"),
                    post_code=tags.get("addr:postcode"),
                    lat=coerce_coordinate(lat),
                    lon=coerce_coordinate(lon),
                )
            )
        except ValueError as exc:
            logger.warning("Skipping Overpass element %s/%s: %s", osm_type, osm_id, exc)
    return matches
