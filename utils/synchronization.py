import logging

import numpy as np

from models.asset import (
    AssetAllocation, ACCEPTED, INVALID_ANCHOR, INVALID_NUMBER, NEGATIVE_AMOUNT,
    RATIO_SUM_MISMATCH, UNKNOWN_ASSET, rejected
)
from utils.aggregation import recompute
from utils.validation import parse_number

logger = logging.getLogger(__name__)

# Allowed distance of the ratio sum from 100 percent
RATIO_SUM_TOLERANCE = 1e-6


class AllocationSession:
    """
    Editing session over one AssetAllocation.

    An allocation can be edited either by investment amount per asset class
    or by allocation ratio (percent) per asset class together with a total
    investment anchor. The session keeps the displayed ratios, their sum and
    the anchor consistent with the allocation:

    - editing an amount re-derives ratios, ratio sum and anchor;
    - editing ratios only writes amounts once the ratios add up to 100;
    - editing the anchor is only accepted while the ratios add up to 100.

    Attributes:
    -----------
    allocation : AssetAllocation
        The allocation being edited
    """

    def __init__(self, allocation=None):
        """
        Initialize an AllocationSession.

        Parameters:
        -----------
        allocation : AssetAllocation, optional
            Allocation to edit. A new empty one is created if omitted.
        """
        self.allocation = allocation if allocation is not None else AssetAllocation()
        self._ratios = {}
        self._ratio_sum = 0.0
        self._anchor = 0.0
        self._sync_from_allocation()

    @property
    def ratios(self):
        """Displayed allocation ratio of each asset class, in percent."""
        return dict(self._ratios)

    @property
    def ratio_sum(self):
        return self._ratio_sum

    @property
    def total_invest_anchor(self):
        return self._anchor

    def is_ratio_complete(self):
        """Whether the displayed ratios add up to 100 percent."""
        return bool(np.isclose(self._ratio_sum, 100.0, rtol=0.0, atol=RATIO_SUM_TOLERANCE))

    def _sync_from_allocation(self):
        totals = recompute(self.allocation)
        self._ratios = {
            name: ratio * 100 for name, ratio in totals.investment_ratios.items()
        }
        self._ratio_sum = float(sum(self._ratios.values()))
        self._anchor = totals.total_investment

    def _redistribute(self):
        for name, percent in self._ratios.items():
            self.allocation.set_investment(name, self._anchor * percent / 100)

    def edit_ratio(self, name, percent):
        """Edit the allocation ratio of one asset class. See edit_ratios."""
        return self.edit_ratios({name: percent})

    def edit_ratios(self, percents):
        """
        Edit allocation ratios and redistribute the anchor when they sum to 100.

        The edited ratios stay displayed when the sum is off, but the
        investment amounts are left untouched.

        Parameters:
        -----------
        percents : dict
            New ratio in percent per asset class name

        Returns:
        --------
        EditResult
            Rejected if a name is unknown, a ratio is not a non-negative
            number, or the ratios do not add up to 100
        """
        parsed = {}
        for name, value in percents.items():
            if name not in self._ratios:
                return rejected(UNKNOWN_ASSET)
            number = parse_number(value)
            if number is None:
                logger.debug("Rejected ratio %r for %s", value, name)
                return rejected(INVALID_NUMBER)
            if number < 0:
                return rejected(NEGATIVE_AMOUNT)
            parsed[name] = number

        self._ratios.update(parsed)
        self._ratio_sum = float(sum(self._ratios.values()))
        if not self.is_ratio_complete():
            logger.debug("Ratios sum to %.4f, investments unchanged", self._ratio_sum)
            return rejected(RATIO_SUM_MISMATCH)

        self._redistribute()
        return ACCEPTED

    def edit_total_investment(self, value):
        """
        Edit the total investment anchor and redistribute it by the ratios.

        Only accepted while the displayed ratios add up to 100.
        """
        if not self.is_ratio_complete():
            logger.debug("Ignored total investment %r, ratios sum to %.4f",
                         value, self._ratio_sum)
            return rejected(RATIO_SUM_MISMATCH)
        number = parse_number(value)
        if number is None or number < 0:
            return rejected(INVALID_ANCHOR)

        self._anchor = number
        self._redistribute()
        return ACCEPTED

    def edit_investment(self, name, amount):
        """Edit the amount of one asset class; ratios follow from the amounts."""
        result = self.allocation.set_investment(name, amount)
        if result:
            self._sync_from_allocation()
        return result

    def append_asset(self, name):
        result = self.allocation.append_asset(name)
        if result:
            self._sync_from_allocation()
        return result

    def delete_asset(self, name):
        result = self.allocation.delete_asset(name)
        if result:
            self._sync_from_allocation()
        return result

    def set_expected_return(self, name, value):
        asset = self.allocation.find_asset(name)
        if asset is None:
            return rejected(UNKNOWN_ASSET)
        return asset.set_expected_return(value)

    def set_risk(self, name, value):
        asset = self.allocation.find_asset(name)
        if asset is None:
            return rejected(UNKNOWN_ASSET)
        return asset.set_risk(value)

    def set_correlation(self, name_a, name_b, value):
        return self.allocation.set_correlation(name_a, name_b, value)

    def set_fee_percent(self, percent):
        """Set the fee from a percentage (0.5 means 0.5%)."""
        number = parse_number(percent)
        if number is None:
            return rejected(INVALID_NUMBER)
        return self.allocation.set_fee(number / 100)

    def fee_percent(self):
        return self.allocation.fee * 100

    def recompute(self):
        """Totals for the current state of the allocation."""
        return recompute(self.allocation)
