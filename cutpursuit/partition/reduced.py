"""Reduced problem: one unknown per component, solved by a delegated solver."""

from __future__ import annotations

import numpy as np

from cutpursuit.operators import Diagonal, Direct, Full, Operator, ScaledIdentity
from cutpursuit.proximal import make_reduced_solver
from cutpursuit.utils.graph import membership_matrix
from cutpursuit.utils.selection import ranked_median, ranked_weighted_median, sort_median, sort_weighted_median
from cutpursuit.weights import PerElement, Weights


def premultiply_reduced(N: int, rV: int, solver_iterations: int) -> bool:
    """Whether a direct operator should be reduced to ``rA^t rA``.

    Without premultiplication the solver pays about ``2 N rV`` operations per
    iteration; with it, ``N rV^2`` once and ``rV^2`` per iteration.
    """
    return rV < (2.0 * N * solver_iterations) / (N + solver_iterations)


def mirror_upper(M: np.ndarray) -> np.ndarray:
    """Symmetric matrix built from the upper triangle of ``M``."""
    return np.triu(M) + np.triu(M, 1).T


def reduce_operator(operator: Operator, comp_assign, rV: int, solver_iterations: int):
    """Aggregate the operator over components.

    Returns:
        ``(reduced_operator, rA)`` where ``rA`` (``N x rV``, column sums of
        ``A`` per component) is kept for direct operators to refresh the
        residual, ``None`` otherwise.
    """
    P = membership_matrix(comp_assign, rV)
    if isinstance(operator, Direct):
        rA = np.asarray(P.T @ operator.matrix.T).T
        if premultiply_reduced(operator.N, rV, solver_iterations):
            rY = None if operator.observation is None else rA.T @ operator.observation
            return Full(mirror_upper(rA.T @ rA), rY), rA
        return Direct(rA, operator.observation), rA

    if isinstance(operator, ScaledIdentity) and not operator.scale:
        return ScaledIdentity(0.0), None
    rY = None if operator.observation is None else np.asarray(P.T @ operator.observation)
    if isinstance(operator, Full):
        PtM = np.asarray(P.T @ operator.matrix)
        rAA = np.asarray(P.T @ PtM.T).T
        return Full(mirror_upper(rAA), rY), None
    if isinstance(operator, Diagonal):
        return Diagonal(np.asarray(P.T @ operator.diag), rY), None
    sizes = np.asarray(P.sum(axis=0)).ravel()
    return Diagonal(float(operator.scale) * sizes, rY), None


def reduce_l1(l1_weights: Weights, Yl1, comp_list, first_vertex, saturation, reuse_median_rank=True, eps=1e-15):
    """Summed l1 weights and (weighted) median targets per component.

    Non-saturated components are sorted by target inside ``comp_list``;
    saturated ones read the median off the rank found at the previous call
    when ``reuse_median_rank`` is set.

    Returns:
        ``(rl1_weights, rYl1)``, either possibly ``None``.
    """
    if not isinstance(l1_weights, PerElement) and l1_weights.is_zero():
        return None, None
    rl1_weights = l1_weights.component_sum(comp_list, first_vertex)
    if Yl1 is None:
        return rl1_weights, None
    rV = len(first_vertex) - 1
    rYl1 = np.empty(rV)
    for rv in range(rV):
        segment = comp_list[first_vertex[rv]:first_vertex[rv + 1]]
        reuse = reuse_median_rank and bool(saturation[rv])
        if isinstance(l1_weights, PerElement):
            if reuse:
                # the segment is still sorted; pad against rounding in the sums
                threshold = 0.5 * rl1_weights[rv] + len(segment) * eps
                rYl1[rv] = ranked_weighted_median(segment, Yl1, l1_weights.values, threshold)
            else:
                rYl1[rv] = sort_weighted_median(segment, Yl1, l1_weights.values, 0.5 * rl1_weights[rv])
        elif reuse:
            rYl1[rv] = ranked_median(segment, Yl1)
        else:
            rYl1[rv] = sort_median(segment, Yl1)
    return rl1_weights, rYl1


def reduce_bounds(low_bnd: Weights, upp_bnd: Weights, comp_list, first_vertex):
    """Tightest bounds per component: max of lowers, min of uppers."""
    if isinstance(low_bnd, PerElement):
        low_bnd = PerElement(np.maximum.reduceat(low_bnd.values[comp_list], first_vertex[:-1]))
    if isinstance(upp_bnd, PerElement):
        upp_bnd = PerElement(np.minimum.reduceat(upp_bnd.values[comp_list], first_vertex[:-1]))
    return low_bnd, upp_bnd


def solve_reduced_problem(cp) -> int:
    """Solve the reduced problem of ``cp`` (a :class:`CutPursuitD1Ql1b`).

    Writes ``cp.rX`` and, for a direct operator, ``cp.R``. Returns the number
    of iterations used by the delegated solver.
    """
    cfg = cp.config
    reduced_operator, rA = reduce_operator(cp.operator, cp.comp_assign, cp.rV, cp.solver_iterations)
    rl1_weights, rYl1 = reduce_l1(
        cp.l1_weights, cp.Yl1, cp.comp_list, cp.first_vertex, cp.saturation,
        reuse_median_rank=cfg.reuse_median_rank, eps=cfg.eps,
    )
    rlow_bnd, rupp_bnd = reduce_bounds(cp.low_bnd, cp.upp_bnd, cp.comp_list, cp.first_vertex)

    solver = make_reduced_solver(cfg.reduced_solver, cp.rV, cp.reduced_edges)
    solver.set_edge_weights(cp.reduced_edge_weights)
    solver.set_quadratic(reduced_operator)
    solver.set_l1(0.0 if rl1_weights is None else rl1_weights, rYl1)
    solver.set_bounds(rlow_bnd, rupp_bnd)
    solver.set_conditioning_param(cfg.pfdr.cond_min, cfg.pfdr.dif_rcd)
    solver.set_relaxation(cfg.pfdr.rho)
    solver.set_algo_param(cfg.pfdr_dif_tol(), cfg.pfdr.it_max, cfg.verbosity > 1)

    solver.set_iterate(np.empty(cp.rV))
    solver.initialize_iterate()
    solver_iterations = solver.precond_proximal_splitting()
    cp.rX = solver.release_iterate()
    cp.solver_iterations = solver_iterations

    if rA is not None:
        cp.R = cp.observation() - rA @ cp.rX
    return solver_iterations
