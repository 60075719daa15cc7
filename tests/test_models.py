"""Tests for candidate and address book entry models."""
import pytest

from addressbook.book.models import AddressBookEntry, PersonalInfo
from addressbook.book.store import AddressBookStore
from addressbook.lookup.models import AddressCandidate, coerce_coordinate


def test_from_payload_maps_known_keys_and_keeps_extras():
    candidate = AddressCandidate.from_payload(
        {
            "id": 7,
            "street": "Main St",
            "city": "Springfield",
            "postcode": "1345",
            "lat": "52.1",
            "long": 4.3,
            "province": "North",
        }
    )
    assert candidate.id == "7"
    assert candidate.post_code == "1345"
    assert candidate.lat == pytest.approx(52.1)
    assert candidate.lon == pytest.approx(4.3)
    assert candidate.house_number is None
    assert candidate.extra == {"province": "North"}


def test_from_payload_requires_id():
    with pytest.raises(ValueError):
        AddressCandidate.from_payload({"street": "Main St"})


def test_with_house_number_returns_stamped_copy(main_street):
    stamped = main_street.with_house_number("350")
    assert stamped.house_number == "350"
    assert main_street.house_number is None
    assert stamped.to_dict() == {"id": "A1", "street": "Main St", "houseNumber": "350"}


def test_label_falls_back_to_id():
    assert AddressCandidate(id="X9").label() == "X9"
    full = AddressCandidate(id="A1", street="Main St", house_number="350", post_code="1345", city="Oslo")
    assert full.label() == "Main St 350, 1345 Oslo"


def test_entry_to_dict_merges_person():
    entry = AddressBookEntry(
        address=AddressCandidate(id="A1", street="Main St", house_number="350"),
        person=PersonalInfo(first_name="Jane", last_name="Doe"),
    )
    assert entry.to_dict() == {
        "id": "A1",
        "street": "Main St",
        "houseNumber": "350",
        "firstName": "Jane",
        "lastName": "Doe",
    }


def test_address_book_keeps_order_and_duplicates():
    book = AddressBookStore()
    entry = AddressBookEntry(AddressCandidate(id="A1"), PersonalInfo("Jane", "Doe"))
    other = AddressBookEntry(AddressCandidate(id="B2"), PersonalInfo("John", "Roe"))
    book.append(entry)
    book.append(other)
    book.append(entry)

    assert len(book) == 3
    assert book.list_all() == (entry, other, entry)
    assert list(book) == [entry, other, entry]


def test_address_book_snapshot_is_detached():
    book = AddressBookStore()
    snapshot = book.list_all()
    book.append(AddressBookEntry(AddressCandidate(id="A1"), PersonalInfo("Jane", "Doe")))
    assert snapshot == ()


@pytest.mark.parametrize("value", [[59.9], {"lat": 1}, True, "north"])
def test_coerce_coordinate_rejects_non_numbers(value):
    with pytest.raises(ValueError):
        coerce_coordinate(value)


def test_coerce_coordinate_accepts_numbers_and_numeric_text():
    assert coerce_coordinate(None) is None
    assert coerce_coordinate(3) == 3.0
    assert coerce_coordinate("59.9") == pytest.approx(59.9)


def test_from_payload_rejects_list_coordinates():
    with pytest.raises(ValueError):
        AddressCandidate.from_payload({"id": "A1", "lat": [59.9]})
