"""Pyomo solver helpers for the exact reduced-problem delegate."""

from __future__ import annotations

from typing import Any, Sequence

# solvers accepting a convex quadratic objective with linear constraints
QP_SOLVERS = ("ipopt", "appsi_highs", "gurobi_direct")

_DEFAULT_SOLVER = None


def create_solver(solver_name: str = "ipopt", **solver_kwargs: Any):
    """Create a pyomo solver instance.

    Gurobi-based solvers pick their license up from ``GRB_LICENSE_FILE``.
    """
    try:
        from pyomo.opt import SolverFactory
    except Exception as exc:  # pragma: no cover - optional dependency
        raise ImportError("pyomo is required to create solver instances. Install the 'pyomo' extra.") from exc
    return SolverFactory(solver_name, **solver_kwargs)


def solver_available(solver) -> bool:
    """Whether a pyomo solver instance can actually run."""
    try:
        return bool(solver.available(exception_flag=False))
    except Exception:
        return False


def find_qp_solver(candidates: Sequence[str] = QP_SOLVERS):
    """First available solver among ``candidates``.

    Raises:
        RuntimeError: if none of them is installed.
    """
    for name in candidates:
        solver = create_solver(name)
        if solver is not None and solver_available(solver):
            return solver
    raise RuntimeError(f"No QP-capable pyomo solver available (tried {', '.join(candidates)}).")


def set_default_solver(solver: Any) -> None:
    """Set the process-wide pyomo solver used on reduced problems."""
    global _DEFAULT_SOLVER
    _DEFAULT_SOLVER = solver


def get_default_solver():
    """Return the configured default solver, looking one up on first use."""
    global _DEFAULT_SOLVER
    if _DEFAULT_SOLVER is None:
        _DEFAULT_SOLVER = find_qp_solver()
    return _DEFAULT_SOLVER
