from typing import List, Protocol

from .models import AddressCandidate


class AddressLookupError(Exception):
    """Lookup failure whose message is shown to the user as-is."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AddressLookupService(Protocol):
    """Finds candidate addresses for a postcode and house number.

    Implementations return the candidates (possibly none) or raise
    ``AddressLookupError``. Returned candidates do not need a house number;
    the workflow stamps it after the call.
    """

    async def search(self, post_code: str, house_number: str) -> List[AddressCandidate]:
        ...
