import logging
from typing import Iterator, List, Tuple

from .models import AddressBookEntry

logger = logging.getLogger(__name__)


class AddressBookStore:
    """Ordered, append-only collection of address book entries.

    Duplicates are kept; nothing is indexed or deduplicated.
    """

    def __init__(self) -> None:
        self._entries: List[AddressBookEntry] = []

    def append(self, entry: AddressBookEntry) -> None:
        self._entries.append(entry)
        logger.debug("Address book now holds %d entries", len(self._entries))

    def list_all(self) -> Tuple[AddressBookEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AddressBookEntry]:
        return iter(self.list_all())
