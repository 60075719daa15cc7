from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

_POST_CODE_KEYS = ("postcode", "postCode")
_LON_KEYS = ("long", "lon", "lng")
_KNOWN_KEYS = {"id", "street", "city", "houseNumber", "lat", *_POST_CODE_KEYS, *_LON_KEYS}


@dataclass(frozen=True)
class AddressCandidate:
    """A single address returned by a lookup, not yet tied to a person."""

    id: str
    street: Optional[str] = None
    city: Optional[str] = None
    post_code: Optional[str] = None
    house_number: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AddressCandidate":
        """Build a candidate from one raw lookup item.

        Raises ``ValueError`` when the item carries no ``id``.
        """
        raw_id = payload.get("id")
        if raw_id is None or str(raw_id) == "":
            raise ValueError("Address item has no id")

        post_code = next(
            (payload[key] for key in _POST_CODE_KEYS if payload.get(key) is not None),
            None,
        )
        lon = next(
            (payload[key] for key in _LON_KEYS if payload.get(key) is not None),
            None,
        )
        lat = payload.get("lat")
        house_number = payload.get("houseNumber")

        return cls(
            id=str(raw_id),
            street=_optional_text(payload.get("street")),
            city=_optional_text(payload.get("city")),
            post_code=_optional_text(post_code),
            house_number=_optional_text(house_number),
            lat=coerce_coordinate(lat),
            lon=coerce_coordinate(lon),
            extra={key: value for key, value in payload.items() if key not in _KNOWN_KEYS},
        )

    def with_house_number(self, house_number: str) -> "AddressCandidate":
        return replace(self, house_number=house_number)

    def to_dict(self) -> Dict[str, Any]:
        """Flat mapping in the lookup API's camelCase shape; unset fields are left out."""
        data: Dict[str, Any] = dict(self.extra)
        data["id"] = self.id
        for key, value in (
            ("street", self.street),
            ("city", self.city),
            ("postcode", self.post_code),
            ("houseNumber", self.house_number),
            ("lat", self.lat),
            ("long", self.lon),
        ):
            if value is not None:
                data[key] = value
        return data

    def label(self) -> str:
        """Single line description used by the candidate picker."""
        street_line = " ".join(part for part in (self.street, self.house_number) if part)
        locality = " ".join(part for part in (self.post_code, self.city) if part)
        parts = [part for part in (street_line, locality) if part]
        return ", ".join(parts) or self.id


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def coerce_coordinate(value: Any) -> Optional[float]:
    """Parse a latitude/longitude value; ``ValueError`` when it is not a number."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"Coordinate must be a number, got {type(value).__name__}")
    return float(value)
