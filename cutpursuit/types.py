"""Core types and protocols for cutpursuit."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

import numpy as np


class ReducedSolver(Protocol):
    """Protocol for solvers of reduced problems (one unknown per component)."""

    def set_edge_weights(self, edge_weights: Any) -> None: ...

    def set_quadratic(self, operator: Any) -> None: ...

    def set_l1(self, l1_weights: Any, Yl1: Optional[np.ndarray] = None) -> None: ...

    def set_bounds(self, low_bnd: Any = None, upp_bnd: Any = None) -> None: ...

    def set_conditioning_param(self, cond_min: float, dif_rcd: float = 0.0) -> None: ...

    def set_relaxation(self, rho: float) -> None: ...

    def set_algo_param(self, dif_tol: float, it_max: int, verbose: bool = False) -> None: ...

    def set_iterate(self, X: np.ndarray) -> None: ...

    def release_iterate(self) -> np.ndarray: ...

    def initialize_iterate(self) -> None: ...

    def precond_proximal_splitting(self) -> int: ...


class MinCutGraph(Protocol):
    """Protocol for flow networks used by the split step."""

    def set_term_capacities(self, capacities: np.ndarray) -> None: ...

    def add_term_capacities(self, capacities: np.ndarray) -> None: ...

    def set_edge_capacities(self, heads: np.ndarray, tails: np.ndarray, capacities: np.ndarray) -> None: ...

    def maxflow(self) -> float: ...

    def sink_side(self) -> np.ndarray: ...


@dataclass
class IterationRecord:
    """Structured record for one cut-pursuit iteration."""

    iteration: int
    num_components: int
    activation: int
    solver_iterations: Optional[int] = None
    evolution: Optional[float] = None
    saturated: Optional[int] = None
    objective: Optional[float] = None
    time: float = 0.0


@dataclass
class CutPursuitResult:
    """Container for the final partition, component values and iteration records."""

    comp_assign: np.ndarray
    rX: np.ndarray
    records: List[IterationRecord] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def X(self) -> np.ndarray:
        """One value per vertex."""
        return self.rX[self.comp_assign]

    @property
    def num_components(self) -> int:
        return int(self.rX.shape[0])
