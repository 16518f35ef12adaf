"""
Pytest configuration and fixtures.

Shared fixtures for all tests.
"""

import pytest

from models.asset import AssetAllocation
from utils.market_assumptions import ASSUMPTIONS_PATH_ENV
from utils.synchronization import AllocationSession


@pytest.fixture(autouse=True)
def isolate_from_env(monkeypatch):
    """Keep a developer's assumptions file out of the tests."""
    monkeypatch.delenv(ASSUMPTIONS_PATH_ENV, raising=False)


@pytest.fixture
def allocation():
    """Empty allocation."""
    return AssetAllocation()


@pytest.fixture
def two_asset_allocation():
    """Equally weighted stocks (risk 20%) and bonds (risk 30%) with correlation 0.5."""
    allocation = AssetAllocation()
    allocation.append_asset("Stocks")
    allocation.append_asset("Bonds")
    allocation.find_asset("Stocks").set_risk(20)
    allocation.find_asset("Bonds").set_risk(30)
    allocation.set_investment("Stocks", 50)
    allocation.set_investment("Bonds", 50)
    allocation.set_correlation("Stocks", "Bonds", 0.5)
    return allocation


@pytest.fixture
def session(two_asset_allocation):
    """Editing session over the two asset allocation."""
    return AllocationSession(two_asset_allocation)
