"""cutpursuit: graph total-variation regularized least squares by cut-pursuit."""

from cutpursuit.config import ConfigurationError, CutPursuitConfig, PFDRConfig
from cutpursuit.operators import Diagonal, Direct, Full, ScaledIdentity, make_operator
from cutpursuit.orchestrator import QuadraticCutPursuit, run_cut_pursuit
from cutpursuit.partition.d1_ql1b import CutPursuitD1Ql1b
from cutpursuit.proximal.pfdr import PfdrD1Ql1b
from cutpursuit.solvers import create_solver
from cutpursuit.types import CutPursuitResult, IterationRecord
from cutpursuit.weights import PerElement, Uniform


def run_evaluation(*args, **kwargs):
    """Run benchmark evaluations using :mod:`cutpursuit.evaluation.runner`.

    This lazy import keeps optional evaluation dependencies out of import-time
    paths for users who only need the solver APIs.
    """
    from cutpursuit.evaluation.runner import run_evaluation as _run_evaluation

    return _run_evaluation(*args, **kwargs)


__all__ = [
    "ConfigurationError",
    "CutPursuitConfig",
    "CutPursuitD1Ql1b",
    "CutPursuitResult",
    "Diagonal",
    "Direct",
    "Full",
    "IterationRecord",
    "PFDRConfig",
    "PerElement",
    "PfdrD1Ql1b",
    "QuadraticCutPursuit",
    "ScaledIdentity",
    "Uniform",
    "create_solver",
    "make_operator",
    "run_cut_pursuit",
    "run_evaluation",
]
