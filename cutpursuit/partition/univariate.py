"""Closed-form solution when the whole graph is a single component."""

from __future__ import annotations

import numpy as np

from cutpursuit.operators import Diagonal, Direct, Full, Operator, observation_or_zeros
from cutpursuit.utils.selection import sort_median, sort_weighted_median
from cutpursuit.weights import PerElement, Uniform, Weights


def tightest_bounds(low_bnd: Weights, upp_bnd: Weights, indices=None) -> tuple[float, float]:
    """Largest lower bound and smallest upper bound over ``indices`` (all by default)."""
    if isinstance(low_bnd, PerElement):
        values = low_bnd.values if indices is None else low_bnd.values[indices]
        low = float(np.max(values)) if values.size else -np.inf
    else:
        low = float(low_bnd.value)
    if isinstance(upp_bnd, PerElement):
        values = upp_bnd.values if indices is None else upp_bnd.values[indices]
        upp = float(np.min(values)) if values.size else np.inf
    else:
        upp = float(upp_bnd.value)
    return low, upp


def solve_univertex_problem(
    operator: Operator,
    V: int,
    l1_weights: Weights = Uniform(0.0),
    Yl1: np.ndarray | None = None,
    low_bnd: Weights = Uniform(-np.inf),
    upp_bnd: Weights = Uniform(np.inf),
    comp_list: np.ndarray | None = None,
):
    """Minimize ``1/2 ||Y - A 1 x||^2 + wl1 |x - m| + box(x)`` over a scalar ``x``.

    ``m`` is the weighted median of the l1 targets: the result is exact only
    when targets are constant. ``comp_list`` is sorted in place by target so
    that the median rank can be reused later.

    Returns:
        ``(x, residual)`` where ``residual`` is ``Y - A 1 x`` for a direct
        operator and ``None`` otherwise.
    """
    if isinstance(operator, Direct):
        rA = operator.matrix.sum(axis=1)
        Y = observation_or_zeros(operator, operator.N)
        y = float(rA @ Y)
        aa = float(rA @ rA)
    else:
        y = 0.0 if operator.observation is None else float(np.sum(operator.observation))
        if isinstance(operator, Full):
            aa = float(operator.matrix.sum())
        elif isinstance(operator, Diagonal):
            aa = float(operator.diag.sum())
        else:
            aa = float(operator.scale) * V
            if not aa:
                y = 0.0

    wl1 = l1_weights.total(V)
    yl1 = 0.0
    if Yl1 is not None:
        if comp_list is None:
            comp_list = np.arange(V)
        if isinstance(l1_weights, PerElement):
            yl1 = sort_weighted_median(comp_list, Yl1, l1_weights.values, 0.5 * wl1)
        elif not l1_weights.is_zero():
            yl1 = sort_median(comp_list, Yl1)

    if y - wl1 > aa * yl1:
        x = (y - wl1) / aa
    elif y + wl1 < aa * yl1:
        x = (y + wl1) / aa
    else:
        x = yl1

    low, upp = tightest_bounds(low_bnd, upp_bnd)
    x = min(max(x, low), upp)

    residual = None
    if isinstance(operator, Direct):
        residual = Y - rA * x
    return x, residual
