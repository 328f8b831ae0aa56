"""Reduced problem as a convex QP solved through pyomo."""

from __future__ import annotations

import numpy as np

from cutpursuit.operators import Diagonal, Direct, Full, ScaledIdentity, observation_or_zeros
from cutpursuit.proximal.pfdr import PfdrD1Ql1b
from cutpursuit.solvers import get_default_solver

try:
    from pyomo.environ import (
        ConcreteModel,
        Constraint,
        NonNegativeReals,
        Objective,
        RangeSet,
        TerminationCondition,
        Var,
        minimize,
        value,
    )
except Exception:  # pragma: no cover - optional dependency
    ConcreteModel = None


def _require_pyomo():
    if ConcreteModel is None:
        raise ImportError("pyomo is required for the QP reduced solver. Install the 'pyomo' extra.")


def _finite_or_none(bound: float):
    return float(bound) if np.isfinite(bound) else None


class PyomoD1Ql1b(PfdrD1Ql1b):
    """Drop-in replacement for :class:`PfdrD1Ql1b` solving the problem exactly.

    Absolute values are lifted into nonnegative auxiliary variables, which
    turns the problem into a QP for any QP-capable pyomo solver (ipopt,
    gurobi, ...). Relaxation and conditioning parameters are accepted and
    ignored.
    """

    def __init__(self, V: int, edges, solver=None) -> None:
        super().__init__(V, edges)
        self.solver = solver

    def build_model(self):
        _require_pyomo()
        V, u, v = self.V, self.heads, self.tails
        E = len(u)
        op = self.operator
        # plain floats keep numpy scalars out of pyomo expressions
        u, v = u.tolist(), v.tolist()
        y = self._targets().tolist()
        l1 = np.asarray(self.l1_weights.full(V), dtype=float).tolist()
        w = self.edge_weights.full(E).tolist() if E else []
        low, upp = self.low_bnd.full(V).tolist(), self.upp_bnd.full(V).tolist()

        model = ConcreteModel()
        model.V = RangeSet(0, V - 1)
        model.x = Var(model.V, bounds=lambda mdl, i: (_finite_or_none(low[i]), _finite_or_none(upp[i])))
        if self.X is not None:
            for i in model.V:
                model.x[i].value = float(self.X[i])

        if E:
            model.E = RangeSet(0, E - 1)
            model.t = Var(model.E, domain=NonNegativeReals)
            model.EdgeUp = Constraint(model.E, rule=lambda mdl, e: mdl.t[e] >= mdl.x[u[e]] - mdl.x[v[e]])
            model.EdgeDown = Constraint(model.E, rule=lambda mdl, e: mdl.t[e] >= mdl.x[v[e]] - mdl.x[u[e]])

        penalized = [i for i in range(V) if l1[i] > 0.0]
        if penalized:
            model.L = RangeSet(0, len(penalized) - 1)
            model.s = Var(model.L, domain=NonNegativeReals)
            model.L1Up = Constraint(model.L, rule=lambda mdl, k: mdl.s[k] >= mdl.x[penalized[k]] - y[penalized[k]])
            model.L1Down = Constraint(model.L, rule=lambda mdl, k: mdl.s[k] >= y[penalized[k]] - mdl.x[penalized[k]])

        def objective_rule(mdl):
            if isinstance(op, ScaledIdentity) and not op.scale:
                quad = 0.0
            elif isinstance(op, Direct):
                A = op.matrix.tolist()
                Y = observation_or_zeros(op, op.N).tolist()
                quad = 0.5 * sum(
                    (Y[n] - sum(A[n][i] * mdl.x[i] for i in mdl.V if A[n][i] != 0.0)) ** 2
                    for n in range(op.N)
                )
            else:
                Y = np.asarray(observation_or_zeros(op, V), dtype=float).tolist()
                if isinstance(op, Full):
                    M = op.matrix.tolist()
                    quad = 0.5 * sum(M[i][j] * mdl.x[i] * mdl.x[j] for i in mdl.V for j in mdl.V if M[i][j] != 0.0)
                else:
                    d = op.diag.tolist() if isinstance(op, Diagonal) else [float(op.scale)] * V
                    quad = 0.5 * sum(d[i] * mdl.x[i] ** 2 for i in mdl.V)
                quad = quad - sum(Y[i] * mdl.x[i] for i in mdl.V)
            d1 = sum(w[e] * mdl.t[e] for e in mdl.E) if E else 0.0
            l1_term = sum(l1[penalized[k]] * mdl.s[k] for k in mdl.L) if penalized else 0.0
            return quad + d1 + l1_term

        model.OBJ = Objective(rule=objective_rule, sense=minimize)
        return model

    def precond_proximal_splitting(self) -> int:
        model = self.build_model()
        solver = get_default_solver() if self.solver is None else self.solver
        res = solver.solve(model, tee=bool(self.verbose is True))
        if self.verbose and res.solver.termination_condition != TerminationCondition.optimal:
            print(f"[QP] termination condition: {res.solver.termination_condition}")
        if self.X is None:
            self.X = np.empty(self.V)
        self.X[:] = [value(model.x[i]) for i in model.V]
        return 1
