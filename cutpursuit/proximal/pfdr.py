"""Preconditioned proximal splitting for quadratic + d1 + l1 + box problems.

Minimizes, over ``x`` in ``R^V``::

    F(x) + sum_e w_e |x_u - x_v| + sum_v (l_v |x_v - y_v| + i_[low_v, upp_v](x_v))

where ``F`` is the quadratic term of an operator variant. The smooth part is
handled with a forward (gradient) step and the nonsmooth terms with
Douglas-Rachford-like backward steps on auxiliary copies of the iterate, one
per edge endpoint and one per vertex (generalized forward-backward). Steps are
preconditioned by the inverse absolute row sums of ``A^t A``, so that the
preconditioned gradient is 1-Lipschitz.
"""

from __future__ import annotations

import numpy as np

from cutpursuit.config import ConfigurationError
from cutpursuit.operators import Diagonal, Direct, Full, Operator, ScaledIdentity, observation_or_zeros
from cutpursuit.weights import Uniform, Weights, as_weights


class PfdrD1Ql1b:
    """Proximal solver on a graph of ``V`` vertices and ``edges`` (shape ``(E, 2)``)."""

    def __init__(self, V: int, edges) -> None:
        self.V = int(V)
        edges = np.asarray(edges, dtype=np.int64).reshape(-1, 2)
        self.heads = edges[:, 0]
        self.tails = edges[:, 1]
        self.edge_weights: Weights = Uniform(1.0)
        self.operator: Operator = ScaledIdentity(0.0)
        self.l1_weights: Weights = Uniform(0.0)
        self.Yl1 = None
        self.low_bnd: Weights = Uniform(-np.inf)
        self.upp_bnd: Weights = Uniform(np.inf)
        self.cond_min = 1e-3
        self.dif_rcd = 0.0
        self.rho = 1.0
        self.dif_tol = 1e-6
        self.it_max = 10000
        self.verbose = False
        self.eps = 1e-15
        self.X = None

    # ------------------------------ configuration -----------------------------
    def set_edge_weights(self, edge_weights) -> None:
        self.edge_weights = as_weights(edge_weights, default=1.0)

    def set_quadratic(self, operator: Operator) -> None:
        size = {
            Direct: lambda op: op.V,
            Full: lambda op: op.V,
            Diagonal: lambda op: op.V,
            ScaledIdentity: lambda op: self.V,
        }[type(operator)](operator)
        if size != self.V:
            raise ConfigurationError(f"Operator acts on {size} unknowns, expected {self.V}.", size)
        self.operator = operator

    def set_l1(self, l1_weights, Yl1=None) -> None:
        weights = as_weights(l1_weights)
        if np.any(weights.full(self.V) < 0.0):
            raise ConfigurationError("Negative l1 penalization.", l1_weights)
        self.l1_weights = weights
        self.Yl1 = None if Yl1 is None else np.asarray(Yl1, dtype=float)

    def set_bounds(self, low_bnd=None, upp_bnd=None) -> None:
        low = as_weights(low_bnd, default=-np.inf)
        upp = as_weights(upp_bnd, default=np.inf)
        if np.any(low.full(self.V) > upp.full(self.V)):
            raise ConfigurationError("Lower bound greater than upper bound.", (low_bnd, upp_bnd))
        self.low_bnd, self.upp_bnd = low, upp

    def set_conditioning_param(self, cond_min: float, dif_rcd: float = 0.0) -> None:
        self.cond_min = float(cond_min)
        self.dif_rcd = float(dif_rcd)

    def set_relaxation(self, rho: float) -> None:
        self.rho = float(rho)

    def set_algo_param(self, dif_tol: float, it_max: int, verbose: bool = False) -> None:
        self.dif_tol = float(dif_tol)
        self.it_max = int(it_max)
        self.verbose = verbose

    # ------------------------------ iterate handoff ---------------------------
    def set_iterate(self, X: np.ndarray) -> None:
        """Take ownership of ``X``; the solution is written into it in place."""
        self.X = X

    def release_iterate(self) -> np.ndarray:
        """Return the iterate buffer; the solver keeps no reference to it."""
        X, self.X = self.X, None
        return X

    # ------------------------------ numerics ----------------------------------
    def _targets(self) -> np.ndarray:
        return np.zeros(self.V) if self.Yl1 is None else self.Yl1

    def _gradient(self, x: np.ndarray) -> np.ndarray:
        op = self.operator
        if isinstance(op, Direct):
            return op.matrix.T @ (op.matrix @ x - observation_or_zeros(op, op.N))
        Y = observation_or_zeros(op, self.V)
        if isinstance(op, Full):
            return op.matrix @ x - Y
        if isinstance(op, Diagonal):
            return op.diag * x - Y
        if not op.scale:
            return np.zeros(self.V)
        return op.scale * x - Y

    def _curvature_diag(self) -> tuple[np.ndarray, np.ndarray]:
        """Diagonal of ``A^t A`` and ``A^t Y``."""
        op = self.operator
        if isinstance(op, Direct):
            return np.einsum("nv,nv->v", op.matrix, op.matrix), op.matrix.T @ observation_or_zeros(op, op.N)
        Y = observation_or_zeros(op, self.V)
        if isinstance(op, Full):
            return np.diag(op.matrix).copy(), Y
        if isinstance(op, Diagonal):
            return op.diag, Y
        return np.full(self.V, float(op.scale)), Y

    def _lipschitz_rows(self) -> np.ndarray:
        op = self.operator
        if isinstance(op, Direct):
            absA = np.abs(op.matrix)
            rows = absA.T @ absA.sum(axis=1)
        elif isinstance(op, Full):
            rows = np.abs(op.matrix).sum(axis=1)
        elif isinstance(op, Diagonal):
            rows = np.abs(op.diag).astype(float)
        else:
            rows = np.full(self.V, abs(float(op.scale)))
        rmax = rows.max() if rows.size else 0.0
        if rmax <= 0.0:
            return np.ones(self.V)
        return np.maximum(rows, self.cond_min * rmax)

    def initialize_iterate(self) -> None:
        """Separable approximation: ignore d1 and off-diagonal couplings."""
        if self.X is None:
            self.X = np.empty(self.V)
        d, b = self._curvature_diag()
        y = self._targets()
        l1 = self.l1_weights.full(self.V)
        x = y.copy()
        pos = d > 0.0
        ls = b[pos] / d[pos]
        th = l1[pos] / d[pos]
        x[pos] = y[pos] + np.sign(ls - y[pos]) * np.maximum(np.abs(ls - y[pos]) - th, 0.0)
        self.X[:] = np.clip(x, self.low_bnd.full(self.V), self.upp_bnd.full(self.V))

    def _splitting_weights(self, x: np.ndarray | None, r: np.ndarray):
        """Weights of the vertex term and of both edge endpoints; they sum to one per vertex."""
        V, u, v = self.V, self.heads, self.tails
        if x is None:
            cg = np.ones(V)
            ce = np.ones(len(u))
        else:
            floor = self.cond_min * max(float(np.max(np.abs(x))) if x.size else 0.0, 1.0)
            w = self.edge_weights.full(len(u)) if len(u) else np.zeros(0)
            ce = w / np.maximum(np.abs(x[u] - x[v]), floor) + self.eps
            l1 = self.l1_weights.full(V)
            cg = r + l1 / np.maximum(np.abs(x - self._targets()), floor)
        total = cg + np.bincount(u, weights=ce, minlength=V) + np.bincount(v, weights=ce, minlength=V)
        return cg / total, ce / total[u], ce / total[v]

    def compute_objective(self, x: np.ndarray | None = None) -> float:
        x = self.X if x is None else x
        op = self.operator
        if isinstance(op, Direct):
            res = observation_or_zeros(op, op.N) - op.matrix @ x
            obj = 0.5 * float(res @ res)
        else:
            Y = observation_or_zeros(op, self.V)
            AAx = self._gradient(x) + Y
            obj = float(x @ (0.5 * AAx - Y))
        if len(self.heads):
            obj += float(np.sum(self.edge_weights.full(len(self.heads)) * np.abs(x[self.heads] - x[self.tails])))
        obj += float(np.sum(self.l1_weights.full(self.V) * np.abs(x - self._targets())))
        return obj

    def precond_proximal_splitting(self) -> int:
        """Run the splitting from the current iterate; returns the iterations used."""
        if self.X is None:
            self.initialize_iterate()
        V, u, v = self.V, self.heads, self.tails
        x = np.array(self.X, dtype=float)
        r = self._lipschitz_rows()
        Ga = 1.0 / r
        y = self._targets()
        l1 = self.l1_weights.full(V)
        low, upp = self.low_bnd.full(V), self.upp_bnd.full(V)
        w = self.edge_weights.full(len(u)) if len(u) else np.zeros(0)
        dif_rcd = self.dif_rcd

        Wg, Wu, Wv = self._splitting_weights(None, r)
        Zg, Zu, Zv = x.copy(), x[u].copy(), x[v].copy()

        it, dif = 0, np.inf
        while it < self.it_max:
            common = 2.0 * x - Ga * self._gradient(x)

            # vertex terms: l1 toward targets and box constraints
            alpha = Wg * r
            p = common - Zg
            shrink = np.maximum(np.abs(p - y) - l1 / alpha, 0.0)
            Zg += self.rho * (np.clip(y + np.sign(p - y) * shrink, low, upp) - x)

            # edge terms: d1 penalty on pairs of coordinates
            if len(u):
                au, av = Wu * r[u], Wv * r[v]
                pu, pv = common[u] - Zu, common[v] - Zv
                d = pu - pv
                fused = np.abs(d) <= w * (1.0 / au + 1.0 / av)
                s = np.sign(d)
                mean = (au * pu + av * pv) / (au + av)
                Zu += self.rho * (np.where(fused, mean, pu - s * w / au) - x[u])
                Zv += self.rho * (np.where(fused, mean, pv + s * w / av) - x[v])

            x_new = Wg * Zg
            if len(u):
                x_new += np.bincount(u, weights=Wu * Zu, minlength=V)
                x_new += np.bincount(v, weights=Wv * Zv, minlength=V)
            it += 1

            amp = np.sqrt(x_new @ x_new)
            dif = np.sqrt((x_new - x) @ (x_new - x))
            dif = dif / amp if amp > self.eps else dif / self.eps
            x = x_new
            if dif <= self.dif_tol:
                break
            if dif_rcd > 0.0 and dif <= dif_rcd:
                Wg, Wu, Wv = self._splitting_weights(x, r)
                Zg, Zu, Zv = x.copy(), x[u].copy(), x[v].copy()
                dif_rcd *= 0.1

        if self.verbose:
            print(f"[PFDR] {it} iterations, relative evolution {dif:.2e}")
        self.X[:] = x
        return it
