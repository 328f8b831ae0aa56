"""Objective value at the current partition and component values."""

from __future__ import annotations

import numpy as np

from cutpursuit.operators import Diagonal, Direct, Full, Operator
from cutpursuit.utils.graph import membership_matrix
from cutpursuit.weights import PerElement, Weights


def quadratic_term(operator: Operator, rX: np.ndarray, comp_assign: np.ndarray, R: np.ndarray | None = None) -> float:
    """``1/2 ||Y - A X||^2`` for a direct operator.

    Premultiplied operators give ``1/2 <X, A^t A X> - <X, A^t Y>``, which
    differs from the former by the constant ``1/2 ||Y||^2``.
    """
    if isinstance(operator, Direct):
        return 0.5 * float(R @ R)
    rV = rX.shape[0]
    P = membership_matrix(comp_assign, rV)
    rY = np.zeros(rV) if operator.observation is None else np.asarray(P.T @ operator.observation)
    if isinstance(operator, Full):
        PtM = np.asarray(P.T @ operator.matrix)
        rAA = np.asarray(P.T @ PtM.T).T
        # strict upper triangle counted once, diagonal halved
        cross = float(rX @ (np.triu(rAA, 1) @ rX))
        return cross + float(np.sum(0.5 * np.diag(rAA) * rX ** 2 - rX * rY))
    if isinstance(operator, Diagonal):
        rAA = np.asarray(P.T @ operator.diag)
    elif operator.scale:
        rAA = float(operator.scale) * np.bincount(comp_assign, minlength=rV)
    else:
        return 0.0
    return float(np.sum(rX * (0.5 * rAA * rX - rY)))


def l1_term(x: np.ndarray, l1_weights: Weights, Yl1: np.ndarray | None = None) -> float:
    if not isinstance(l1_weights, PerElement) and l1_weights.is_zero():
        return 0.0
    deviation = np.abs(x if Yl1 is None else x - Yl1)
    if isinstance(l1_weights, PerElement):
        return float(np.sum(l1_weights.values * deviation))
    return float(l1_weights.value) * float(np.sum(deviation))


def compute_objective(cp) -> float:
    """Quadratic + total variation + l1 objective of ``cp`` (a :class:`CutPursuitD1Ql1b`)."""
    obj = quadratic_term(cp.operator, cp.rX, cp.comp_assign, cp.R)
    obj += cp.compute_graph_d1()
    obj += l1_term(cp.vertex_values(), cp.l1_weights, cp.Yl1)
    return obj
