"""
Pytest configuration and fixtures
"""
import pytest

from addressbook.lookup.models import AddressCandidate
from addressbook.workflow.capture import AddressCaptureWorkflow
from fakes import FakeLookup, GatedLookup


@pytest.fixture
def main_street() -> AddressCandidate:
    return AddressCandidate(id="A1", street="Main St")


@pytest.fixture
def lookup(main_street) -> FakeLookup:
    return FakeLookup(results=[main_street, AddressCandidate(id="B2", street="Side St")])


@pytest.fixture
def workflow(lookup) -> AddressCaptureWorkflow:
    return AddressCaptureWorkflow(lookup)


@pytest.fixture
def gated() -> GatedLookup:
    return GatedLookup()
