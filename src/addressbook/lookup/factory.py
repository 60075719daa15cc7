from ..config import Settings
from .address_api import AddressApiLookup
from .base import AddressLookupService
from .overpass import OverpassLookup


def create_lookup_service(settings: Settings) -> AddressLookupService:
    """Return the lookup backend named by ``settings.lookup_provider``."""
    if settings.lookup_provider == "api":
        return AddressApiLookup(settings.api_url, timeout=settings.lookup_timeout)
    if settings.lookup_provider == "overpass":
        return OverpassLookup(timeout=settings.lookup_timeout)
    raise ValueError(f"Unknown address lookup provider: {settings.lookup_provider!r}")
