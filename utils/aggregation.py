"""Portfolio totals for an AssetAllocation.

All functions are pure: they read the allocation and never modify it, so
calling them twice without an edit in between gives identical results.
"""

import logging
from collections import namedtuple

import numpy as np

logger = logging.getLogger(__name__)

AllocationTotals = namedtuple(
    'AllocationTotals',
    ['total_investment', 'total_return', 'total_risk', 'investment_ratios']
)


def total_investment(allocation):
    return allocation.total_investment()


def weights(allocation):
    """
    Investment weight of every asset class in asset order.

    Returns:
    --------
    numpy.ndarray
        Weights summing to 1, or all zeros while nothing is invested
    """
    amounts = np.array([allocation.get_investment(name) for name in allocation.asset_names()],
                       dtype=float)
    total = total_investment(allocation)
    if total <= 0:
        return np.zeros(len(amounts))
    return amounts / total


def total_return(allocation):
    """
    Weighted expected return net of the fee, as a fraction.

    A negative net return is reported as 0.
    """
    if total_investment(allocation) <= 0:
        return 0.0
    returns = np.array([asset.expected_return for asset in allocation.assets], dtype=float)
    net_return = float(np.dot(returns, weights(allocation))) / 100 - allocation.fee
    return max(net_return, 0.0)


def risk_contributions(allocation):
    """Weighted risk of each asset class as a decimal: weight * risk / 100."""
    risks = np.array([asset.risk for asset in allocation.assets], dtype=float)
    return weights(allocation) * risks / 100


def portfolio_variance(allocation):
    """
    Portfolio variance from weighted risks and pairwise correlations.

    Equivalent to sum(c_i^2) + 2 * sum_{i<j}(c_i * c_j * corr_ij).
    """
    if total_investment(allocation) <= 0:
        return 0.0
    contributions = risk_contributions(allocation)
    correlations = allocation.correlation_array()
    return float(contributions @ correlations @ contributions)


def total_risk(allocation):
    """Portfolio standard deviation as a fraction."""
    variance = portfolio_variance(allocation)
    if variance < 0:
        # Only reachable with correlations outside [-1, 1]
        logger.warning("Negative portfolio variance %.6g, reporting zero risk", variance)
        return 0.0
    return float(np.sqrt(variance))


def recompute(allocation):
    """
    Compute every total shown for an allocation.

    Parameters:
    -----------
    allocation : AssetAllocation
        Allocation to aggregate

    Returns:
    --------
    AllocationTotals
        Total investment, net return and risk (fractions), and the
        investment ratio of each asset class keyed by name
    """
    ratios = dict(zip(allocation.asset_names(), weights(allocation).tolist()))
    return AllocationTotals(
        total_investment=total_investment(allocation),
        total_return=total_return(allocation),
        total_risk=total_risk(allocation),
        investment_ratios=ratios,
    )
