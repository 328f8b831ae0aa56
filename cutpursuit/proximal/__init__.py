"""Solvers for reduced problems."""

from cutpursuit.proximal.pfdr import PfdrD1Ql1b


def make_reduced_solver(name: str, V: int, edges):
    """Instantiate the reduced solver registered under ``name`` on a reduced graph."""
    if name == "pfdr":
        return PfdrD1Ql1b(V, edges)
    if name == "pyomo":
        from cutpursuit.proximal.pyomo_qp import PyomoD1Ql1b

        return PyomoD1Ql1b(V, edges)
    raise NotImplementedError(f"Unknown reduced solver: {name}")


__all__ = ["PfdrD1Ql1b", "make_reduced_solver"]
