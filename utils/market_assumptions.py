import json
import logging
import os

import pandas as pd

from models.asset import AssetAllocation
from utils.synchronization import AllocationSession
from utils.validation import parse_number

logger = logging.getLogger(__name__)

# Environment variable naming a JSON file that overrides the defaults
ASSUMPTIONS_PATH_ENV = 'ASSET_ALLOCATION_ASSUMPTIONS'

DEFAULT_FEE_PERCENT = 0.5

DEFAULT_ASSET_CLASSES = [
    'Global Equity',
    'Core Bond',
    'Short-Term Bond',
    'Global Credit',
    'Real Assets',
    'Liquid Alternatives'
]


def _default_assumptions():
    asset_classes = list(DEFAULT_ASSET_CLASSES)
    return {
        'asset_classes': asset_classes,
        # Percent per year
        'expected_returns': {
            'Global Equity': 6.7,
            'Core Bond': 2.3,
            'Short-Term Bond': 1.8,
            'Global Credit': 3.9,
            'Real Assets': 5.2,
            'Liquid Alternatives': 4.2
        },
        'risks': {
            'Global Equity': 18.0,
            'Core Bond': 4.6,
            'Short-Term Bond': 2.5,
            'Global Credit': 8.0,
            'Real Assets': 14.0,
            'Liquid Alternatives': 9.0
        },
        'correlations': pd.DataFrame(
            [
                [1.00, -0.10, -0.05, 0.50, 0.60, 0.40],
                [-0.10, 1.00, 0.80, 0.20, -0.10, -0.20],
                [-0.05, 0.80, 1.00, 0.15, -0.05, -0.10],
                [0.50, 0.20, 0.15, 1.00, 0.45, 0.35],
                [0.60, -0.10, -0.05, 0.45, 1.00, 0.25],
                [0.40, -0.20, -0.10, 0.35, 0.25, 1.00]
            ],
            index=asset_classes,
            columns=asset_classes
        ),
        'investment': {
            'Global Equity': 40.0,
            'Core Bond': 25.0,
            'Short-Term Bond': 5.0,
            'Global Credit': 10.0,
            'Real Assets': 10.0,
            'Liquid Alternatives': 10.0
        },
        'fee_percent': DEFAULT_FEE_PERCENT
    }


def get_market_assumptions(path=None):
    """
    Get market assumptions from file if it exists, otherwise use defaults.

    Parameters:
    -----------
    path : str, optional
        JSON file to read. Defaults to the file named by the
        ASSET_ALLOCATION_ASSUMPTIONS environment variable.

    Returns:
    --------
    dict
        Asset classes with expected returns and risks (percent), correlations
        (DataFrame), starting investments and the fee in percent
    """
    if path is None:
        path = os.environ.get(ASSUMPTIONS_PATH_ENV)

    if path and os.path.exists(path):
        try:
            with open(path, 'r') as f:
                assumptions = json.load(f)

            # Correlations are stored as a nested dictionary
            if isinstance(assumptions.get('correlations'), dict):
                assumptions['correlations'] = pd.DataFrame(assumptions['correlations'])

            defaults = _default_assumptions()
            for key, value in defaults.items():
                assumptions.setdefault(key, value)
            logger.info("Loaded market assumptions from %s", path)
            return assumptions
        except (OSError, ValueError, AttributeError) as e:
            logger.error("Error loading market assumptions from %s: %s", path, e)
    elif path:
        logger.warning("Market assumptions file %s not found, using defaults", path)

    return _default_assumptions()


def assumptions_to_allocation_data(assumptions):
    """
    Convert market assumptions to the dictionary form read by AssetAllocation.from_dict.

    Parameters:
    -----------
    assumptions : dict
        Market assumptions as returned by get_market_assumptions

    Returns:
    --------
    dict
        Allocation data with the fee as a fraction
    """
    asset_classes = assumptions['asset_classes']
    investment = assumptions.get('investment', {})
    correlations = assumptions.get('correlations')
    if isinstance(correlations, pd.DataFrame):
        correlations = correlations.to_dict(orient='index')

    fee_percent = parse_number(assumptions.get('fee_percent', 0.0)) or 0.0

    return {
        'fee': fee_percent / 100,
        'assets': [
            {
                'name': asset,
                'expected_return': assumptions['expected_returns'].get(asset, 0.0),
                'risk': assumptions['risks'].get(asset, 0.0),
                'investment': investment.get(asset, 0.0)
            }
            for asset in asset_classes
        ],
        'correlations': correlations or {}
    }


def build_default_session(assumptions=None):
    """
    Create an editing session seeded with market assumptions.

    Parameters:
    -----------
    assumptions : dict, optional
        Market assumptions. Loaded with get_market_assumptions if omitted.

    Returns:
    --------
    AllocationSession
        New session owning a new allocation
    """
    if assumptions is None:
        assumptions = get_market_assumptions()
    allocation = AssetAllocation.from_dict(assumptions_to_allocation_data(assumptions))
    return AllocationSession(allocation)
