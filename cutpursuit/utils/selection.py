"""Median selection over index subsets.

The ``sort_*`` functions reorder the given index array in place by value, so
that a later call to the matching ``ranked_*`` function can read the median
off its rank without sorting again, provided the subset has not changed.
"""

from __future__ import annotations

import numpy as np


def _first_reaching(cumulative: np.ndarray, threshold: float) -> int:
    pos = int(np.searchsorted(cumulative, threshold, side="left"))
    return min(pos, len(cumulative) - 1)


def sort_weighted_median(indices: np.ndarray, values: np.ndarray, weights: np.ndarray, threshold: float | None = None) -> float:
    """Sort ``indices`` by ``values`` in place and return the weighted median.

    The weighted median is the first sorted value whose cumulative weight
    reaches ``threshold`` (half the total weight by default).
    """
    order = np.argsort(values[indices], kind="stable")
    indices[:] = indices[order]
    cumulative = np.cumsum(weights[indices])
    if threshold is None:
        threshold = 0.5 * cumulative[-1]
    return float(values[indices[_first_reaching(cumulative, threshold)]])


def ranked_weighted_median(indices: np.ndarray, values: np.ndarray, weights: np.ndarray, threshold: float) -> float:
    """Weighted median of ``indices`` already sorted by ``values``."""
    cumulative = np.cumsum(weights[indices])
    return float(values[indices[_first_reaching(cumulative, threshold)]])


def sort_median(indices: np.ndarray, values: np.ndarray) -> float:
    """Sort ``indices`` by ``values`` in place and return the upper median."""
    order = np.argsort(values[indices], kind="stable")
    indices[:] = indices[order]
    return float(values[indices[len(indices) // 2]])


def ranked_median(indices: np.ndarray, values: np.ndarray) -> float:
    """Upper median of ``indices`` already sorted by ``values``."""
    return float(values[indices[len(indices) // 2]])


def weighted_median(values, weights=None) -> float:
    """Weighted median of ``values``; plain upper median without weights."""
    values = np.asarray(values, dtype=float)
    indices = np.arange(values.shape[0])
    if weights is None:
        return sort_median(indices, values)
    return sort_weighted_median(indices, values, np.asarray(weights, dtype=float))
