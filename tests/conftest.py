"""Shared fixtures for the star registry tests."""

import pytest

from starregistry.ownership.wallet import WalletKey
from tests.helpers import FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def wallet():
    return WalletKey.generate()


@pytest.fixture
def other_wallet():
    return WalletKey.generate()
