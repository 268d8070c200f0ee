# polishing_simulator/core/numeric.py
"""
Guards for values crossing into or out of the vectorised computations.
"""

import math
import numbers
import operator

import numpy as np

from ..exceptions import DomainError, NumericDegeneracyError


def ensure_finite(what: str, *arrays) -> None:
    """Raises NumericDegeneracyError if any of the arrays holds NaN or inf."""
    for arr in arrays:
        if not np.all(np.isfinite(arr)):
            raise NumericDegeneracyError(f"Non-finite values in {what}")


def as_index(value, what: str) -> int:
    """
    Integer index from an int or an integer-valued number (e.g. 1.0 from a
    text field). Booleans, fractions and non-numbers raise DomainError.
    """
    if isinstance(value, bool):
        raise DomainError(f"{what} must be an integer, got {value!r}")
    try:
        return operator.index(value)
    except TypeError:
        pass
    if isinstance(value, numbers.Real) and math.isfinite(value) and int(value) == value:
        return int(value)
    raise DomainError(f"{what} must be an integer, got {value!r}")
