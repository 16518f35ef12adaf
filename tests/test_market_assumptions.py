"""Tests for default assumptions and session seeding."""

import json
import logging

import pandas as pd
import pytest

from utils.market_assumptions import (
    ASSUMPTIONS_PATH_ENV, DEFAULT_ASSET_CLASSES, assumptions_to_allocation_data,
    build_default_session, get_market_assumptions
)


class TestGetMarketAssumptions:
    """Test loading assumptions."""

    def test_defaults(self):
        assumptions = get_market_assumptions()

        assert assumptions['asset_classes'] == DEFAULT_ASSET_CLASSES
        assert set(assumptions['expected_returns']) == set(DEFAULT_ASSET_CLASSES)
        assert set(assumptions['risks']) == set(DEFAULT_ASSET_CLASSES)
        assert isinstance(assumptions['correlations'], pd.DataFrame)
        assert sum(assumptions['investment'].values()) == 100.0

    def test_default_correlations_are_symmetric(self):
        correlations = get_market_assumptions()['correlations']
        pd.testing.assert_frame_equal(correlations, correlations.T)

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "assumptions.json"
        path.write_text(json.dumps({
            'asset_classes': ["Stocks", "Bonds"],
            'expected_returns': {"Stocks": 7.0, "Bonds": 2.0},
            'risks': {"Stocks": 16.0, "Bonds": 4.0},
            'correlations': {"Stocks": {"Stocks": 1.0, "Bonds": 0.1},
                             "Bonds": {"Stocks": 0.1, "Bonds": 1.0}},
            'investment': {"Stocks": 60.0, "Bonds": 40.0},
            'fee_percent': 0.2
        }))

        assumptions = get_market_assumptions(str(path))

        assert assumptions['asset_classes'] == ["Stocks", "Bonds"]
        assert isinstance(assumptions['correlations'], pd.DataFrame)
        assert assumptions['correlations'].loc["Stocks", "Bonds"] == 0.1
        assert assumptions['fee_percent'] == 0.2

    def test_load_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "assumptions.json"
        path.write_text(json.dumps({'fee_percent': 1.0}))
        monkeypatch.setenv(ASSUMPTIONS_PATH_ENV, str(path))

        assumptions = get_market_assumptions()

        assert assumptions['fee_percent'] == 1.0
        assert assumptions['asset_classes'] == DEFAULT_ASSET_CLASSES

    def test_bad_file_falls_back_to_defaults(self, tmp_path, caplog):
        path = tmp_path / "assumptions.json"
        path.write_text("{not json")

        with caplog.at_level(logging.ERROR):
            assumptions = get_market_assumptions(str(path))

        assert assumptions['asset_classes'] == DEFAULT_ASSET_CLASSES
        assert "Error loading market assumptions" in caplog.text

    def test_missing_file_falls_back_to_defaults(self, tmp_path):
        assumptions = get_market_assumptions(str(tmp_path / "missing.json"))
        assert assumptions['asset_classes'] == DEFAULT_ASSET_CLASSES


class TestBuildDefaultSession:
    """Test seeding a session from assumptions."""

    def test_default_session(self):
        session = build_default_session()
        allocation = session.allocation

        assert allocation.asset_names() == DEFAULT_ASSET_CLASSES
        assert allocation.total_investment() == 100.0
        assert allocation.fee == pytest.approx(0.005)
        assert allocation.get_correlation("Global Equity", "Core Bond") == -0.10
        assert allocation.get_correlation("Core Bond", "Global Equity") == -0.10
        assert session.ratio_sum == pytest.approx(100.0)
        assert session.total_invest_anchor == 100.0

    def test_default_totals(self):
        totals = build_default_session().recompute()
        assert totals.total_return > 0
        assert 0 < totals.total_risk < 0.18

    def test_each_call_builds_a_new_allocation(self):
        first = build_default_session()
        second = build_default_session()
        first.delete_asset("Global Equity")
        assert "Global Equity" in second.allocation

    def test_allocation_data(self):
        data = assumptions_to_allocation_data({
            'asset_classes': ["Stocks"],
            'expected_returns': {"Stocks": 7.0},
            'risks': {},
            'fee_percent': "bad"
        })

        assert data == {
            'fee': 0.0,
            'assets': [{'name': "Stocks", 'expected_return': 7.0, 'risk': 0.0, 'investment': 0.0}],
            'correlations': {}
        }
