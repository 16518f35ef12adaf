import logging
from collections import namedtuple

import pandas as pd

from models.correlation import CorrelationMatrix
from utils.validation import parse_number

logger = logging.getLogger(__name__)

# Rejection reasons reported through EditResult
INVALID_NUMBER = "invalid number"
NEGATIVE_AMOUNT = "negative amount"
EMPTY_NAME = "empty name"
DUPLICATE_NAME = "duplicate name"
UNKNOWN_ASSET = "unknown asset"
SELF_CORRELATION = "self correlation"
RATIO_SUM_MISMATCH = "ratio sum is not 100"
INVALID_ANCHOR = "invalid total investment"


class EditResult(namedtuple('EditResult', ['accepted', 'reason'])):
    """
    Outcome of an edit. Truthy when the edit was applied.

    Unpacks like ``(success, message)``; ``reason`` is None when accepted.
    """
    __slots__ = ()

    def __bool__(self):
        return bool(self.accepted)


ACCEPTED = EditResult(True, None)


def rejected(reason):
    return EditResult(False, reason)


class Asset:
    """
    Asset model representing an investable asset class.

    Attributes:
    -----------
    name : str
        Name of the asset class, fixed at creation
    expected_return : float
        Expected annual return in percent (5.0 means 5%)
    risk : float
        Annual standard deviation in percent
    correlations : dict
        Correlation coefficient to every other asset class of the owning
        allocation, keyed by name. Empty while the asset is detached.
    """

    def __init__(self, name, expected_return=0.0, risk=0.0):
        """
        Initialize an Asset object.

        Parameters:
        -----------
        name : str
            Name of the asset class
        expected_return : float
            Expected annual return in percent, default is 0
        risk : float
            Annual standard deviation in percent, default is 0
        """
        self._name = name
        self._expected_return = 0.0
        self._risk = 0.0
        self.set_expected_return(expected_return)
        self.set_risk(risk)

        # Set by the owning AssetAllocation
        self.slot = None
        self._allocation = None

    def __repr__(self):
        return (f"Asset(name={self._name!r}, expected_return={self._expected_return}, "
                f"risk={self._risk})")

    @property
    def name(self):
        return self._name

    @property
    def expected_return(self):
        return self._expected_return

    @property
    def risk(self):
        return self._risk

    @property
    def correlations(self):
        if self._allocation is None:
            return {}
        return self._allocation.correlations_of(self._name)

    def set_expected_return(self, value):
        """Set the expected return in percent. Invalid numbers keep the old value."""
        number = parse_number(value)
        if number is None:
            logger.debug("Rejected expected return %r for %s", value, self._name)
            return rejected(INVALID_NUMBER)
        self._expected_return = number
        return ACCEPTED

    def set_risk(self, value):
        """Set the risk in percent. Invalid numbers keep the old value."""
        number = parse_number(value)
        if number is None:
            logger.debug("Rejected risk %r for %s", value, self._name)
            return rejected(INVALID_NUMBER)
        self._risk = number
        return ACCEPTED

    def to_dict(self):
        """
        Convert asset object to dictionary.

        Returns:
        --------
        dict
            Asset data as dictionary
        """
        return {
            'name': self._name,
            'expected_return': self._expected_return,
            'risk': self._risk,
        }


class AssetAllocation:
    """
    Asset allocation model holding the asset classes of one portfolio session.

    Attributes:
    -----------
    assets : list of Asset
        Asset classes in insertion order
    investment : dict
        Invested amount per asset class name
    fee : float
        Management fee as a fractional rate (0.005 means 0.5%)
    """

    def __init__(self, fee=0.0):
        """
        Initialize an empty AssetAllocation.

        Parameters:
        -----------
        fee : float
            Management fee as a fractional rate, default is 0
        """
        self._assets = []
        self._investment = {}
        self._fee = 0.0
        self._correlations = CorrelationMatrix()
        self.set_fee(fee)

    def __len__(self):
        return len(self._assets)

    def __iter__(self):
        return iter(list(self._assets))

    def __contains__(self, name):
        return self.find_asset(name) is not None

    @property
    def assets(self):
        return list(self._assets)

    @property
    def investment(self):
        return dict(self._investment)

    @property
    def fee(self):
        return self._fee

    def asset_names(self):
        return [asset.name for asset in self._assets]

    def find_asset(self, name):
        """Return the asset with the given name, or None."""
        for asset in self._assets:
            if asset.name == name:
                return asset
        return None

    def set_fee(self, rate):
        """Set the fee as a fractional rate. Invalid numbers keep the old value."""
        number = parse_number(rate)
        if number is None:
            logger.debug("Rejected fee %r", rate)
            return rejected(INVALID_NUMBER)
        self._fee = number
        return ACCEPTED

    def set_investment(self, name, value):
        """
        Set the amount invested in an asset class.

        Parameters:
        -----------
        name : str
            Asset class name
        value : float
            Amount invested, must be a non-negative number

        Returns:
        --------
        EditResult
            Rejected without changes if the asset is unknown or the amount
            is not a non-negative number
        """
        if name not in self._investment:
            logger.debug("Rejected investment for unknown asset %r", name)
            return rejected(UNKNOWN_ASSET)
        number = parse_number(value)
        if number is None:
            logger.debug("Rejected investment %r for %s", value, name)
            return rejected(INVALID_NUMBER)
        if number < 0:
            logger.debug("Rejected negative investment %r for %s", value, name)
            return rejected(NEGATIVE_AMOUNT)
        self._investment[name] = number
        return ACCEPTED

    def get_investment(self, name):
        return self._investment.get(name, 0.0)

    def total_investment(self):
        """Sum of all invested amounts; 0 for an empty allocation."""
        return float(sum(self._investment.values()))

    def investment_ratio(self, name):
        """
        Fraction of the total investment placed in an asset class.

        Returns 0 for every asset while the total investment is 0.
        """
        total = self.total_investment()
        if total <= 0:
            return 0.0
        return self.get_investment(name) / total

    def append_asset(self, name):
        """
        Add a new asset class with zero return, risk and investment.

        The new asset starts with a zero correlation to every existing asset
        class in both directions.

        Parameters:
        -----------
        name : str
            Name of the asset class, must be non-empty and unused

        Returns:
        --------
        EditResult
        """
        if not isinstance(name, str) or not name.strip():
            logger.debug("Rejected empty asset name %r", name)
            return rejected(EMPTY_NAME)
        if self.find_asset(name) is not None:
            logger.debug("Rejected duplicate asset name %r", name)
            return rejected(DUPLICATE_NAME)

        asset = Asset(name)
        asset.slot = self._correlations.add_slot()
        asset._allocation = self
        self._assets.append(asset)
        self._investment[name] = 0.0
        logger.info("Added asset class %s", name)
        return ACCEPTED

    def delete_asset(self, name):
        """
        Remove an asset class together with its investment and correlations.

        Deleting an unknown name does nothing.
        """
        asset = self.find_asset(name)
        if asset is None:
            return rejected(UNKNOWN_ASSET)

        self._assets.remove(asset)
        self._investment.pop(name, None)
        self._correlations.remove_slot(asset.slot)
        asset.slot = None
        asset._allocation = None
        logger.info("Deleted asset class %s", name)
        return ACCEPTED

    def set_correlation(self, name_a, name_b, value):
        """
        Set the correlation coefficient between two asset classes.

        The value applies to both directions. Values outside [-1, 1] are
        accepted as given.
        """
        asset_a = self.find_asset(name_a)
        asset_b = self.find_asset(name_b)
        if asset_a is None or asset_b is None:
            logger.debug("Rejected correlation for unknown pair (%r, %r)", name_a, name_b)
            return rejected(UNKNOWN_ASSET)
        if asset_a is asset_b:
            return rejected(SELF_CORRELATION)
        number = parse_number(value)
        if number is None:
            logger.debug("Rejected correlation %r for (%s, %s)", value, name_a, name_b)
            return rejected(INVALID_NUMBER)
        self._correlations.set(asset_a.slot, asset_b.slot, number)
        return ACCEPTED

    def get_correlation(self, name_a, name_b):
        """Correlation between two asset classes, or None if either is unknown."""
        asset_a = self.find_asset(name_a)
        asset_b = self.find_asset(name_b)
        if asset_a is None or asset_b is None:
            return None
        return self._correlations.get(asset_a.slot, asset_b.slot)

    def correlations_of(self, name):
        """Correlations of one asset class to every other, keyed by name."""
        asset = self.find_asset(name)
        if asset is None:
            return {}
        return {
            other.name: self._correlations.get(asset.slot, other.slot)
            for other in self._assets
            if other is not asset
        }

    def correlation_array(self):
        """Correlation matrix as a numpy array in asset order."""
        return self._correlations.to_array([asset.slot for asset in self._assets])

    def correlation_matrix(self):
        """
        Correlation matrix labelled by asset class name.

        Returns:
        --------
        pandas.DataFrame
            Symmetric matrix with ones on the diagonal
        """
        names = self.asset_names()
        return pd.DataFrame(self.correlation_array(), index=names, columns=names)

    def to_dict(self):
        """
        Convert allocation object to dictionary.

        Returns:
        --------
        dict
            Allocation data as dictionary
        """
        return {
            'fee': self._fee,
            'assets': [
                dict(asset.to_dict(), investment=self.get_investment(asset.name))
                for asset in self._assets
            ],
            'correlations': {
                asset.name: self.correlations_of(asset.name) for asset in self._assets
            }
        }

    @classmethod
    def from_dict(cls, data):
        """
        Create an AssetAllocation object from dictionary data.

        Entries with invalid values are skipped the same way the setters
        reject them.

        Parameters:
        -----------
        data : dict
            Allocation data as dictionary

        Returns:
        --------
        AssetAllocation
            New AssetAllocation object
        """
        allocation = cls(fee=data.get('fee', 0.0))
        for asset_data in data.get('assets', []):
            name = asset_data.get('name')
            if not allocation.append_asset(name):
                continue
            asset = allocation.find_asset(name)
            asset.set_expected_return(asset_data.get('expected_return', 0.0))
            asset.set_risk(asset_data.get('risk', 0.0))
            allocation.set_investment(name, asset_data.get('investment', 0.0))

        for name, row in data.get('correlations', {}).items():
            for other, value in row.items():
                if name != other:
                    allocation.set_correlation(name, other, value)
        return allocation


AllocationStore = AssetAllocation
