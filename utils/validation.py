import numbers

import numpy as np


def parse_number(value):
    """
    Convert a raw input value to a finite float.

    Parameters:
    -----------
    value : any
        Number, numpy scalar or numeric string as typed into a table cell

    Returns:
    --------
    float or None
        The parsed value, or None if it is not a usable number
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return None

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            number = float(value)
        except ValueError:
            return None
    elif isinstance(value, numbers.Real):
        number = float(value)
    else:
        return None

    if not np.isfinite(number):
        return None
    return number
