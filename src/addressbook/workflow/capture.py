import logging
from typing import List, Mapping, Optional

from ..book.models import AddressBookEntry, PersonalInfo
from ..book.store import AddressBookStore
from ..config import DEFAULT_FIELDS
from ..forms.fields import FieldStore
from ..lookup.base import AddressLookupError, AddressLookupService
from ..lookup.models import AddressCandidate
from .errors import (
    LOOKUP_FAILED,
    NAMES_REQUIRED,
    SELECTION_NOT_FOUND,
    SELECTION_REQUIRED,
    ValidationError,
)
from .state import Phase, WorkflowSnapshot

POST_CODE = "postCode"
HOUSE_NUMBER = "houseNumber"
FIRST_NAME = "firstName"
LAST_NAME = "lastName"
SELECTED_ADDRESS = "selectedAddress"
REQUIRED_FIELDS = (POST_CODE, HOUSE_NUMBER, FIRST_NAME, LAST_NAME, SELECTED_ADDRESS)

logger = logging.getLogger(__name__)


class AddressCaptureWorkflow:
    """Search for an address, pick one candidate, attach a person, commit.

    Action methods never raise for bad user input or failed lookups; the
    message lands in the single error slot of the snapshot instead. Only one
    search runs at a time, and a search response that arrives after
    ``clear_all`` is dropped.
    """

    def __init__(
        self,
        lookup: AddressLookupService,
        address_book: Optional[AddressBookStore] = None,
        defaults: Mapping[str, str] = DEFAULT_FIELDS,
    ) -> None:
        missing = [name for name in REQUIRED_FIELDS if name not in defaults]
        if missing:
            raise ValueError(f"Form defaults are missing fields: {', '.join(missing)}")

        self._lookup = lookup
        self._book = address_book if address_book is not None else AddressBookStore()
        self._fields = FieldStore(defaults)
        self._candidates: List[AddressCandidate] = []
        self._phase = Phase.IDLE
        self._loading = False
        self._error: Optional[str] = None
        self._generation = 0

    @property
    def address_book(self) -> AddressBookStore:
        return self._book

    def snapshot(self) -> WorkflowSnapshot:
        fields = self._fields.get_all()
        return WorkflowSnapshot(
            phase=self._phase,
            fields=fields,
            candidates=tuple(self._candidates),
            selected_id=fields.get(SELECTED_ADDRESS, ""),
            loading=self._loading,
            error_message=self._error,
        )

    def set_field(self, name: str, value: Optional[str]) -> None:
        self._fields.set(name, value)

    async def submit_search(self) -> bool:
        """Look up candidates for the current postcode and house number.

        Returns True when the lookup succeeded (even with zero candidates).
        """
        if self._loading:
            logger.warning("Address search already in progress, ignoring new request")
            return False

        self._generation += 1
        generation = self._generation
        self._candidates = []
        self._error = None
        self._loading = True
        self._phase = Phase.SEARCHING

        post_code = self._fields.get(POST_CODE)
        house_number = self._fields.get(HOUSE_NUMBER)
        logger.debug("Searching addresses for postcode=%r house number=%r", post_code, house_number)

        try:
            found = await self._lookup.search(post_code, house_number)
        except AddressLookupError as exc:
            if generation != self._generation:
                logger.info("Dropping failure of a superseded address search: %s", exc.message)
                return False
            logger.warning("Address search failed: %s", exc.message)
            self._error = exc.message
            return False
        except Exception:
            if generation != self._generation:
                logger.info("Dropping crash of a superseded address search")
                return False
            logger.exception("Address lookup crashed")
            self._error = LOOKUP_FAILED
            return False
        else:
            if generation != self._generation:
                logger.info("Dropping %d results of a superseded address search", len(found))
                return False
            self._candidates = [candidate.with_house_number(house_number) for candidate in found]
            self._phase = Phase.RESULTS_SHOWN
            logger.info("Address search returned %d candidates", len(self._candidates))
            return True
        finally:
            if generation == self._generation:
                self._loading = False
                if self._phase is Phase.SEARCHING:
                    self._phase = Phase.IDLE

    def select_candidate(self, candidate_id: str) -> bool:
        if self._find_candidate(candidate_id) is None:
            logger.debug("Ignoring selection of unknown candidate %r", candidate_id)
            return False
        self._fields.set(SELECTED_ADDRESS, candidate_id)
        self._error = None
        self._phase = Phase.SELECTED
        return True

    def submit_person(self) -> Optional[AddressBookEntry]:
        """Commit the selected candidate with the entered names.

        Stored names are trimmed. Returns the new entry, or None when
        validation failed.
        """
        try:
            entry = self._build_entry()
        except ValidationError as exc:
            logger.info("Address book entry rejected: %s", exc.message)
            self._error = exc.message
            return None

        self._book.append(entry)
        self._fields.reset()
        self._candidates = []
        self._error = None
        self._phase = Phase.IDLE
        logger.info("Added %s at address %s to the address book", entry.person.full_name, entry.address.id)
        return entry

    def clear_all(self) -> None:
        """Reset fields, results and errors, abandoning any running search."""
        self._generation += 1
        self._fields.reset()
        self._candidates = []
        self._error = None
        self._loading = False
        self._phase = Phase.IDLE

    def _build_entry(self) -> AddressBookEntry:
        # Order matters: names, then selection, then staleness.
        first_name = self._fields.get(FIRST_NAME).strip()
        last_name = self._fields.get(LAST_NAME).strip()
        if not first_name or not last_name:
            raise ValidationError(NAMES_REQUIRED)

        selected_id = self._fields.get(SELECTED_ADDRESS)
        if not selected_id or not self._candidates:
            raise ValidationError(SELECTION_REQUIRED)

        candidate = self._find_candidate(selected_id)
        if candidate is None:
            raise ValidationError(SELECTION_NOT_FOUND)

        return AddressBookEntry(
            address=candidate,
            person=PersonalInfo(first_name=first_name, last_name=last_name),
        )

    def _find_candidate(self, candidate_id: str) -> Optional[AddressCandidate]:
        return next(
            (candidate for candidate in self._candidates if candidate.id == candidate_id),
            None,
        )
