import numpy as np

# Correlation used for a pair with no stored value
MISSING_CORRELATION = 0.0


def _pair_key(a, b):
    return (a, b) if a < b else (b, a)


class CorrelationMatrix:
    """
    Symmetric correlation matrix keyed by stable integer slot IDs.

    Only the upper triangle is stored, so the (a, b) and (b, a) entries can
    never disagree. Slot IDs are handed out in increasing order and are never
    reused after removal.

    Attributes:
    -----------
    slots : list of int
        Live slot IDs in the order they were added
    """

    def __init__(self):
        """Initialize an empty CorrelationMatrix."""
        self._next_slot = 0
        self._slots = []
        self._values = {}

    @property
    def slots(self):
        return list(self._slots)

    def __len__(self):
        return len(self._slots)

    def __contains__(self, slot):
        return slot in self._slots

    def add_slot(self):
        """
        Register a new slot with a zero correlation to every live slot.

        Returns:
        --------
        int
            The new slot ID
        """
        slot = self._next_slot
        self._next_slot += 1
        for other in self._slots:
            self._values[_pair_key(other, slot)] = 0.0
        self._slots.append(slot)
        return slot

    def remove_slot(self, slot):
        """
        Drop a slot and every pair that references it.

        Parameters:
        -----------
        slot : int
            Slot ID to remove. Unknown slots are ignored.
        """
        if slot not in self._slots:
            return
        self._slots.remove(slot)
        self._values = {
            key: value for key, value in self._values.items()
            if slot not in key
        }

    def get(self, a, b):
        """
        Correlation between two slots.

        The diagonal is always 1.0. A pair with no stored value resolves to
        MISSING_CORRELATION.
        """
        if a == b:
            return 1.0
        return self._values.get(_pair_key(a, b), MISSING_CORRELATION)

    def set(self, a, b, value):
        """
        Store the correlation for the unordered pair (a, b).

        Raises:
        -------
        ValueError
            If a and b are the same slot or either slot is not live
        """
        if a == b:
            raise ValueError(f"Cannot set the correlation of slot {a} with itself")
        if a not in self._slots or b not in self._slots:
            raise ValueError(f"Unknown slot in pair ({a}, {b})")
        self._values[_pair_key(a, b)] = float(value)

    def to_array(self, slots=None):
        """
        Dense symmetric matrix for the given slot order.

        Parameters:
        -----------
        slots : list of int, optional
            Slot order for rows and columns. Defaults to insertion order.

        Returns:
        --------
        numpy.ndarray
            n x n matrix with ones on the diagonal
        """
        if slots is None:
            slots = self._slots
        n = len(slots)
        matrix = np.eye(n)
        for i in range(n):
            for j in range(i + 1, n):
                matrix[i, j] = matrix[j, i] = self.get(slots[i], slots[j])
        return matrix
