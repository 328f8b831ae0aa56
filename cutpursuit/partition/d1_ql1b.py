"""Cut-pursuit for quadratic + d1 + l1 + box problems.

Minimizes, over ``x`` in ``R^V``::

    1/2 ||Y - A x||^2 + sum_e w_e |x_u - x_v| + sum_v (l_v |x_v - y_v| + i_[low_v, upp_v](x_v))

The quadratic term is given by an operator variant of
:mod:`cutpursuit.operators`; premultiplied variants replace it by
``1/2 <x, A^t A x> - <x, A^t Y>``.
"""

from __future__ import annotations

import numpy as np

from cutpursuit.config import ConfigurationError, CutPursuitConfig
from cutpursuit.operators import Diagonal, Direct, Full, Operator, ScaledIdentity, make_operator, observation_or_zeros
from cutpursuit.partition import evolution, objective, reduced, split, univariate
from cutpursuit.partition.engine import CutPursuit
from cutpursuit.weights import PerElement, Uniform, Weights, as_weights


class CutPursuitD1Ql1b(CutPursuit):
    """Cut-pursuit solver with a quadratic data term, l1 penalty and box constraints.

    Attributes
    ----------
    operator : Operator
        Active operator variant, ``ScaledIdentity(0.0)`` (no quadratic term)
        until :meth:`set_quadratic` is called.
    R : np.ndarray or None
        Residual ``Y - A X``, owned by the solver and only kept for a direct
        operator.
    solver_iterations : int
        Iterations used by the last reduced solve; drives the choice of
        premultiplying the next reduced operator.
    """

    def __init__(self, V: int, first_edge, adj_vertices, config: CutPursuitConfig | None = None) -> None:
        super().__init__(V, first_edge, adj_vertices, config=config)
        self.operator: Operator = ScaledIdentity(0.0)
        self.R: np.ndarray | None = None
        self.l1_weights: Weights = Uniform(0.0)
        self.Yl1: np.ndarray | None = None
        self.low_bnd: Weights = Uniform(-np.inf)
        self.upp_bnd: Weights = Uniform(np.inf)
        self.solver_iterations = int(self.config.pfdr.it_max)

    # ------------------------------ configuration -----------------------------
    def set_quadratic(self, A=None, Y=None, premultiplied: bool = False) -> None:
        """Set the quadratic term.

        Args:
            A: An operator variant, or loosely typed input understood by
                :func:`cutpursuit.operators.make_operator`.
            Y: Observation (``A^t Y`` when premultiplied).
            premultiplied: Interpret a 2-D ``A`` as ``A^t A``.
        """
        operator = make_operator(A, Y, premultiplied=premultiplied)
        if isinstance(operator, Direct):
            if operator.V != self.V:
                raise ConfigurationError(f"Operator has {operator.V} columns, expected {self.V}.", operator.matrix.shape)
            expected = operator.N
        elif isinstance(operator, Full):
            if operator.matrix.shape != (self.V, self.V):
                raise ConfigurationError(f"A^t A must be {self.V} x {self.V}.", operator.matrix.shape)
            expected = self.V
        elif isinstance(operator, Diagonal):
            if operator.V != self.V:
                raise ConfigurationError(f"Diagonal of A^t A must have {self.V} entries.", operator.diag.shape)
            expected = self.V
        else:
            if operator.scale < 0.0:
                raise ConfigurationError("Negative identity coefficient.", operator.scale)
            expected = self.V
        if operator.observation is not None and operator.observation.shape != (expected,):
            raise ConfigurationError(f"Observation must have {expected} entries.", operator.observation.shape)

        self.operator = operator
        # the residual is reallocated whenever the operator changes
        self.R = np.array(observation_or_zeros(operator, expected), dtype=float) if isinstance(operator, Direct) else None

    def set_l1(self, l1_weights=None, Yl1=None, homo_l1_weight: float = 0.0) -> None:
        """Per-vertex l1 weights (or ``homo_l1_weight``) and optional targets ``Yl1``."""
        weights = as_weights(l1_weights, default=homo_l1_weight)
        if isinstance(weights, PerElement):
            if weights.values.shape != (self.V,):
                raise ConfigurationError(f"Expected {self.V} l1 weights.", weights.values.shape)
            if np.any(weights.values < 0.0):
                raise ConfigurationError("Negative l1 penalization weight.", l1_weights)
        elif weights.value < 0.0:
            raise ConfigurationError(f"Negative homogeneous l1 weight ({weights.value}).", weights.value)
        if Yl1 is not None:
            Yl1 = np.asarray(Yl1, dtype=float)
            if Yl1.shape != (self.V,):
                raise ConfigurationError(f"Expected {self.V} l1 targets.", Yl1.shape)
        self.l1_weights = weights
        self.Yl1 = Yl1

    def set_bounds(self, low_bnd=None, upp_bnd=None, homo_low_bnd: float = -np.inf, homo_upp_bnd: float = np.inf) -> None:
        """Per-vertex box bounds, or homogeneous ones where arrays are missing."""
        low = as_weights(low_bnd, default=homo_low_bnd)
        upp = as_weights(upp_bnd, default=homo_upp_bnd)
        for bound in (low, upp):
            if isinstance(bound, PerElement) and bound.values.shape != (self.V,):
                raise ConfigurationError(f"Expected {self.V} bounds.", bound.values.shape)
        if isinstance(low, Uniform) and isinstance(upp, Uniform):
            if low.value > upp.value:
                raise ConfigurationError(
                    f"Homogeneous lower bound ({low.value}) greater than upper bound ({upp.value}).",
                    (low.value, upp.value),
                )
        elif np.any(low.full(self.V) > upp.full(self.V)):
            raise ConfigurationError("Lower bound greater than upper bound.", (low_bnd, upp_bnd))
        self.low_bnd, self.upp_bnd = low, upp

    def set_pfdr_param(
        self,
        rho: float | None = None,
        cond_min: float | None = None,
        dif_rcd: float | None = None,
        it_max: int | None = None,
        dif_tol: float | None = None,
    ) -> None:
        """Parameters of the reduced-problem solver; unchanged where ``None``."""
        pfdr = self.config.pfdr
        previous = (pfdr.rho, pfdr.cond_min, pfdr.dif_rcd, pfdr.it_max, pfdr.dif_tol)
        if rho is not None:
            pfdr.rho = rho
        if cond_min is not None:
            pfdr.cond_min = cond_min
        if dif_rcd is not None:
            pfdr.dif_rcd = dif_rcd
        if it_max is not None:
            pfdr.it_max = it_max
        if dif_tol is not None:
            pfdr.dif_tol = dif_tol
        try:
            pfdr.validate()
        except ConfigurationError:
            pfdr.rho, pfdr.cond_min, pfdr.dif_rcd, pfdr.it_max, pfdr.dif_tol = previous
            raise

    @property
    def N(self) -> int:
        return self.operator.N if isinstance(self.operator, Direct) else self.V

    def observation(self) -> np.ndarray:
        return observation_or_zeros(self.operator, self.N)

    # ------------------------------ cut-pursuit steps -------------------------
    def solve_univertex_problem(self) -> None:
        x, residual = univariate.solve_univertex_problem(
            self.operator, self.V, self.l1_weights, self.Yl1, self.low_bnd, self.upp_bnd, comp_list=self.comp_list,
        )
        self.rX = np.array([x])
        if residual is not None:
            self.R = residual
        self.solver_iterations = int(self.config.pfdr.it_max)

    def solve_reduced_problem(self) -> int:
        return reduced.solve_reduced_problem(self)

    def split(self) -> int:
        return split.split(self)

    def compute_evolution(self, compute_dif: bool = True) -> tuple[float, int]:
        return evolution.compute_evolution(
            self.rX, self.last_rX, self.last_comp_assign, self.comp_list, self.first_vertex,
            self.saturation, self.config.dif_tol, compute_dif=compute_dif, eps=self.config.eps,
        )

    def compute_objective(self) -> float:
        return objective.compute_objective(self)
