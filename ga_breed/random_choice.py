"""
Weighted choice among siblings.

A list of non-negative weights is turned into a cumulative table whose last
entry is exactly 1.0. Picking walks the table to the first entry whose upper
bound exceeds a uniform draw in [0, 1), so zero-weight entries are never
chosen and ties go to the earliest entry.
"""

from typing import Sequence

import numpy as np


def organize_distribution(weights: Sequence[float], allow_all_zeros: bool = True) -> np.ndarray:
    """
    Normalize weights into a cumulative distribution.

    Args:
        weights: Non-negative weights, one per choice
        allow_all_zeros: If True, all-zero weights become a uniform
            distribution; otherwise they are rejected

    Returns:
        Cumulative distribution (same length as weights, last entry 1.0)

    Raises:
        ValueError: If weights are empty, negative, non-finite, or all zero
            when that is not allowed
    """
    weights_array = np.asarray(weights, dtype=float)
    if weights_array.size == 0:
        raise ValueError("Distribution has no elements")
    if not np.all(np.isfinite(weights_array)):
        raise ValueError(f"Distribution has non-finite weights: {list(weights)}")
    if np.any(weights_array < 0):
        raise ValueError(f"Distribution has negative weights: {list(weights)}")

    total = weights_array.sum()
    if total == 0:
        if not allow_all_zeros:
            raise ValueError("Distribution has all zero weights")
        weights_array = np.ones_like(weights_array)
        total = weights_array.sum()

    cumulative = np.cumsum(weights_array / total)
    # trailing zero-weight entries must stay unreachable after rounding
    last_positive = np.flatnonzero(weights_array)[-1]
    cumulative[last_positive:] = 1.0
    return cumulative


def pick_from_distribution(cumulative: np.ndarray, draw: float) -> int:
    """
    Index of the first entry whose upper bound exceeds ``draw``.

    Args:
        cumulative: Table from ``organize_distribution``
        draw: Uniform value in [0, 1)

    Returns:
        Chosen index
    """
    index = int(np.searchsorted(cumulative, draw, side="right"))
    # draw == 1.0 can only come from a caller outside [0, 1)
    return min(index, len(cumulative) - 1)
