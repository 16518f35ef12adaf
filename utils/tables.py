"""Table views of an AllocationSession and routing of edited cells back into it."""

import re

import pandas as pd

ASSET_COLUMN = "Asset Class"
INVESTMENT_COLUMN = "Investment"
RATIO_COLUMN = "Allocation (%)"
RETURN_COLUMN = "Expected Return (%)"
RISK_COLUMN = "Risk (%)"

ALLOCATION_COLUMNS = [ASSET_COLUMN, INVESTMENT_COLUMN, RATIO_COLUMN, RETURN_COLUMN, RISK_COLUMN]

# Characters not allowed in asset class names
_FORBIDDEN_NAME_CHARS = re.compile(r"[!\"#$%&'()*+,./:;<=>?@\[\\\]^`{|}~]")


def is_valid_asset_name(name):
    """Non-empty and free of ASCII punctuation other than - and _."""
    return bool(name) and not _FORBIDDEN_NAME_CHARS.search(name)


def allocation_frame(session):
    """
    Build the editable allocation table for a session.

    Parameters:
    -----------
    session : AllocationSession
        Session to display

    Returns:
    --------
    pandas.DataFrame
        One row per asset class in asset order
    """
    ratios = session.ratios
    rows = []
    for asset in session.allocation.assets:
        rows.append({
            ASSET_COLUMN: asset.name,
            INVESTMENT_COLUMN: session.allocation.get_investment(asset.name),
            RATIO_COLUMN: ratios.get(asset.name, 0.0),
            RETURN_COLUMN: asset.expected_return,
            RISK_COLUMN: asset.risk
        })
    return pd.DataFrame(rows, columns=ALLOCATION_COLUMNS)


def correlation_frame(allocation):
    """Correlation matrix of an allocation labelled by asset class name."""
    return allocation.correlation_matrix()


def _changed(old, new):
    if pd.isna(old) and pd.isna(new):
        return False
    if pd.isna(old) or pd.isna(new):
        return True
    return old != new


def apply_allocation_edits(session, before, after):
    """
    Apply the cells changed between two allocation tables to a session.

    Return and risk edits are applied first, then investment amounts, then
    all changed ratios as one batch so that several ratios can be moved
    together before the sum is checked.

    Parameters:
    -----------
    session : AllocationSession
        Session the tables were built from
    before : pandas.DataFrame
        Table as rendered by allocation_frame
    after : pandas.DataFrame
        Table as returned by the editor

    Returns:
    --------
    list of tuple
        (asset name, column, EditResult) for every changed cell, ratio
        edits reported with the result of the batch
    """
    before = before.set_index(ASSET_COLUMN)
    after = after.set_index(ASSET_COLUMN)
    results = []
    ratio_edits = {}

    for name in after.index:
        if name not in before.index:
            continue
        old_row = before.loc[name]
        new_row = after.loc[name]

        if _changed(old_row[RETURN_COLUMN], new_row[RETURN_COLUMN]):
            results.append((name, RETURN_COLUMN,
                            session.set_expected_return(name, new_row[RETURN_COLUMN])))
        if _changed(old_row[RISK_COLUMN], new_row[RISK_COLUMN]):
            results.append((name, RISK_COLUMN, session.set_risk(name, new_row[RISK_COLUMN])))
        if _changed(old_row[INVESTMENT_COLUMN], new_row[INVESTMENT_COLUMN]):
            results.append((name, INVESTMENT_COLUMN,
                            session.edit_investment(name, new_row[INVESTMENT_COLUMN])))
        if _changed(old_row[RATIO_COLUMN], new_row[RATIO_COLUMN]):
            ratio_edits[name] = new_row[RATIO_COLUMN]

    if ratio_edits:
        result = session.edit_ratios(ratio_edits)
        results.extend((name, RATIO_COLUMN, result) for name in ratio_edits)
    return results


def apply_correlation_edits(session, before, after):
    """
    Apply the cells changed between two correlation tables to a session.

    Each unordered pair is written once. When both mirror cells changed the
    upper triangle wins. Edits on the diagonal are ignored.

    Returns:
    --------
    list of tuple
        (name_a, name_b, EditResult) for every changed pair
    """
    results = []
    names = list(before.index)
    for i, name_a in enumerate(names):
        for name_b in names[i + 1:]:
            if not all(n in after.index and n in after.columns for n in (name_a, name_b)):
                continue
            if _changed(before.loc[name_a, name_b], after.loc[name_a, name_b]):
                value = after.loc[name_a, name_b]
            elif _changed(before.loc[name_b, name_a], after.loc[name_b, name_a]):
                value = after.loc[name_b, name_a]
            else:
                continue
            results.append((name_a, name_b, session.set_correlation(name_a, name_b, value)))
    return results
