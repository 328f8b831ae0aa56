"""Legacy aliases with the historical call signature."""

from __future__ import annotations

import warnings

from cutpursuit.orchestrator import run_cut_pursuit


def CP_quadratic_l1(Y, source, target, edge_weights=1.0, A=1.0, l1_weights=None, positivity=False, **kwargs):
    """Backward-compatible alias for :func:`cutpursuit.run_cut_pursuit`.

    ``positivity`` constrains every value to be non-negative.
    """
    warnings.warn(
        "`cutpursuit.legacy.notebook_compat.CP_quadratic_l1` is deprecated. "
        "Use `cutpursuit.run_cut_pursuit`.",
        DeprecationWarning,
        stacklevel=2,
    )
    if positivity:
        kwargs.setdefault("low_bnd", 0.0)
    return run_cut_pursuit(Y, source, target, edge_weights=edge_weights, A=A, l1_weights=l1_weights, **kwargs)
