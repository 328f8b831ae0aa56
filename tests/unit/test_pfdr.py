import numpy as np
import pytest

from cutpursuit.config import ConfigurationError
from cutpursuit.operators import Direct, Full, ScaledIdentity
from cutpursuit.proximal import PfdrD1Ql1b, make_reduced_solver


def _solve(solver):
    solver.set_algo_param(1e-10, 100000)
    solver.set_iterate(np.empty(solver.V))
    solver.initialize_iterate()
    it = solver.precond_proximal_splitting()
    return solver.release_iterate(), it


def test_strong_coupling_fuses_both_vertices():
    solver = PfdrD1Ql1b(2, [[0, 1]])
    solver.set_edge_weights(2.0)
    solver.set_quadratic(ScaledIdentity(1.0, np.array([3.0, 1.0])))
    x, it = _solve(solver)
    assert it >= 1
    assert np.allclose(x, [2.0, 2.0], atol=1e-5)


def test_weak_coupling_shrinks_difference():
    solver = PfdrD1Ql1b(2, [[0, 1]])
    solver.set_edge_weights(0.25)
    solver.set_quadratic(ScaledIdentity(1.0, np.array([3.0, 1.0])))
    x, _ = _solve(solver)
    assert np.allclose(x, [2.75, 1.25], atol=1e-5)


def test_l1_and_bounds_without_edges():
    solver = PfdrD1Ql1b(3, np.zeros((0, 2)))
    solver.set_quadratic(ScaledIdentity(1.0, np.array([5.0, -0.5, 3.0])))
    solver.set_l1(1.0)
    solver.set_bounds(None, 2.0)
    x, _ = _solve(solver)
    assert np.allclose(x, [2.0, 0.0, 2.0], atol=1e-6)


def test_direct_and_premultiplied_forms_share_minimizer():
    rng = np.random.default_rng(3)
    A = rng.standard_normal((6, 3))
    Y = rng.standard_normal(6)
    edges = [[0, 1], [1, 2]]

    direct = PfdrD1Ql1b(3, edges)
    direct.set_edge_weights(0.1)
    direct.set_quadratic(Direct(A, Y))
    x_direct, _ = _solve(direct)

    full = PfdrD1Ql1b(3, edges)
    full.set_edge_weights(0.1)
    full.set_quadratic(Full(A.T @ A, A.T @ Y))
    x_full, _ = _solve(full)
    assert np.allclose(x_direct, x_full, atol=1e-4)
    assert direct.compute_objective(x_direct) == pytest.approx(
        full.compute_objective(x_full) + 0.5 * Y @ Y, abs=1e-6
    )


def test_reconditioning_reaches_same_solution():
    solver = PfdrD1Ql1b(3, [[0, 1], [1, 2]])
    solver.set_edge_weights(3.0)
    solver.set_quadratic(ScaledIdentity(1.0, np.array([10.0, 0.0, 10.0])))
    solver.set_l1(0.5)
    solver.set_conditioning_param(1e-2, dif_rcd=1e-2)
    x, _ = _solve(solver)
    assert np.allclose(x, [6.5, 5.5, 6.5], atol=1e-4)


def test_setters_reject_invalid_input():
    solver = PfdrD1Ql1b(2, [[0, 1]])
    with pytest.raises(ConfigurationError):
        solver.set_quadratic(Direct(np.ones((3, 4))))
    with pytest.raises(ConfigurationError):
        solver.set_l1(-1.0)
    with pytest.raises(ConfigurationError):
        solver.set_bounds(1.0, 0.0)


def test_iterate_handoff_returns_the_lent_buffer():
    solver = make_reduced_solver("pfdr", 1, np.zeros((0, 2)))
    buffer = np.empty(1)
    solver.set_quadratic(ScaledIdentity(2.0, np.array([4.0])))
    solver.set_iterate(buffer)
    solver.initialize_iterate()
    solver.precond_proximal_splitting()
    assert solver.release_iterate() is buffer
    assert solver.X is None
    assert buffer[0] == pytest.approx(2.0)


def test_unknown_reduced_solver():
    with pytest.raises(NotImplementedError):
        make_reduced_solver("admm", 2, [[0, 1]])
