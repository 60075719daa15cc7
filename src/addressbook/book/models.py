from dataclasses import dataclass
from typing import Any, Dict

from ..lookup.models import AddressCandidate


@dataclass(frozen=True)
class PersonalInfo:
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class AddressBookEntry:
    """A committed address together with the person living there."""

    address: AddressCandidate
    person: PersonalInfo

    def to_dict(self) -> Dict[str, Any]:
        data = self.address.to_dict()
        data["firstName"] = self.person.first_name
        data["lastName"] = self.person.last_name
        return data
