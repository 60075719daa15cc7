import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests

from .base import AddressLookupError
from .models import AddressCandidate

ADDRESSES_PATH = "/api/getAddresses"

REQUEST_HEADERS = {
    "User-Agent": "AddressBook/1.0",
    "Accept": "application/json",
}

logger = logging.getLogger(__name__)


class AddressApiLookup:
    """Client for the address book backend's ``getAddresses`` endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{ADDRESSES_PATH}"

    async def search(self, post_code: str, house_number: str) -> List[AddressCandidate]:
        return await asyncio.to_thread(self.fetch_addresses, post_code, house_number)

    def fetch_addresses(self, post_code: str, house_number: str) -> List[AddressCandidate]:
        """Blocking lookup; ``search`` runs this in a worker thread."""
        params = {"postcode": post_code, "streetnumber": house_number}
        logger.debug("Requesting %s with %s", self.endpoint, params)
        try:
            response = self._session.get(
                self.endpoint,
                params=params,
                timeout=self.timeout,
                headers=REQUEST_HEADERS,
            )
        except requests.RequestException as exc:
            logger.warning("Address lookup request failed: %s", exc)
            raise AddressLookupError(str(exc)) from exc

        if not response.ok:
            logger.warning(
                "Address lookup returned HTTP %s for %s", response.status_code, params
            )
            raise AddressLookupError("Failed to fetch addresses")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Address lookup returned invalid JSON: %s", exc)
            raise AddressLookupError("Address lookup returned invalid JSON payload.") from exc

        if not isinstance(payload, list):
            logger.warning("Address lookup payload is %s, expected a list", type(payload).__name__)
            raise AddressLookupError("Address lookup returned an unexpected payload.")

        return _extract_candidates(payload)


def _extract_candidates(items: List[Dict[str, Any]]) -> List[AddressCandidate]:
    candidates: List[AddressCandidate] = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object address item: %r", item)
            continue
        try:
            candidates.append(AddressCandidate.from_payload(item))
        except (TypeError, ValueError) as exc:
            logger.warning("Skipping address item %r: %s", item, exc)
    return candidates
