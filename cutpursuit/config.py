"""Configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


class ConfigurationError(ValueError):
    """Invalid configuration; ``value`` holds the offending input."""

    def __init__(self, message: str, value: Any = None) -> None:
        super().__init__(message)
        self.value = value


@dataclass
class PFDRConfig:
    """Parameters of the proximal solver used on reduced problems.

    ``rho`` is the relaxation factor, ``cond_min`` the floor of the diagonal
    preconditioner relative to its largest entry, ``dif_rcd`` the iterate
    evolution under which the splitting weights are recomputed (``0`` disables
    reconditioning), ``it_max`` the iteration cap and ``dif_tol`` the
    tolerance on the relative iterate evolution; ``None`` ties it to the
    cut-pursuit tolerance (see :meth:`CutPursuitConfig.pfdr_dif_tol`).
    """

    rho: float = 1.0
    cond_min: float = 1e-3
    dif_rcd: float = 0.0
    it_max: int = 10000
    dif_tol: Optional[float] = None

    def validate(self) -> "PFDRConfig":
        # unit preconditioned step: relaxation must stay below 2 - 1/2
        if not 0.0 < self.rho < 1.5:
            raise ConfigurationError(f"Relaxation parameter must lie in (0, 1.5) ({self.rho}).", self.rho)
        if not 0.0 < self.cond_min <= 1.0:
            raise ConfigurationError(f"Conditioning floor must lie in (0, 1] ({self.cond_min}).", self.cond_min)
        if self.dif_rcd < 0.0:
            raise ConfigurationError(f"Negative reconditioning criterion ({self.dif_rcd}).", self.dif_rcd)
        if int(self.it_max) < 1:
            raise ConfigurationError(f"Iteration cap must be positive ({self.it_max}).", self.it_max)
        if self.dif_tol is not None and self.dif_tol < 0.0:
            raise ConfigurationError(f"Negative tolerance ({self.dif_tol}).", self.dif_tol)
        return self


@dataclass
class CutPursuitConfig:
    """Configuration container for :class:`cutpursuit.partition.d1_ql1b.CutPursuitD1Ql1b`.

    ``dif_tol`` bounds the relative evolution of the solution between two
    iterations and doubles as the saturation tolerance; ``it_max`` caps the
    number of cut-pursuit iterations. ``reuse_median_rank`` lets saturated
    components reuse the weighted-median position of the previous iteration
    instead of recomputing it. ``min_ops_per_thread`` and ``max_workers`` tune
    parallel dispatch.
    """

    dif_tol: float = 1e-4
    it_max: int = 10
    monitor_evolution: bool = True
    compute_objective: bool = False
    reuse_median_rank: bool = True
    reduced_solver: str = "pfdr"
    pfdr: PFDRConfig = field(default_factory=PFDRConfig)
    min_ops_per_thread: int = 10000
    max_workers: Optional[int] = None
    eps: float = 1e-15
    verbosity: int = 1

    def validate(self) -> "CutPursuitConfig":
        if self.dif_tol < 0.0:
            raise ConfigurationError(f"Negative tolerance ({self.dif_tol}).", self.dif_tol)
        if int(self.it_max) < 0:
            raise ConfigurationError(f"Negative iteration cap ({self.it_max}).", self.it_max)
        if self.max_workers is not None and int(self.max_workers) < 1:
            raise ConfigurationError(f"Worker count must be positive ({self.max_workers}).", self.max_workers)
        if self.eps <= 0.0:
            raise ConfigurationError(f"Numerical floor must be positive ({self.eps}).", self.eps)
        self.pfdr.validate()
        return self

    def pfdr_dif_tol(self) -> float:
        """Tolerance of reduced solves, a thousandth of ``dif_tol`` unless set."""
        if self.pfdr.dif_tol is not None:
            return self.pfdr.dif_tol
        return 1e-3 * self.dif_tol
