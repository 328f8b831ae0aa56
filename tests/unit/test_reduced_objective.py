import numpy as np
import pytest

from cutpursuit.config import CutPursuitConfig, PFDRConfig
from cutpursuit.operators import Diagonal, Direct, Full, ScaledIdentity
from cutpursuit.orchestrator import QuadraticCutPursuit
from cutpursuit.partition.reduced import mirror_upper, premultiply_reduced, reduce_bounds, reduce_l1, reduce_operator
from cutpursuit.weights import PerElement, Uniform


def _path_solver(V, activate=(), **kwargs):
    config = CutPursuitConfig(verbosity=0, pfdr=PFDRConfig(dif_tol=1e-10, it_max=100000))
    cp = QuadraticCutPursuit(config).build(source=np.arange(V - 1), target=np.arange(1, V), V=V, **kwargs)
    cp.active[list(activate)] = True
    cp.compute_connected_components()
    cp.compute_reduced_graph()
    return cp


def test_premultiply_heuristic():
    assert premultiply_reduced(N=100, rV=3, solver_iterations=1000)
    assert not premultiply_reduced(N=100, rV=3, solver_iterations=1)
    assert not premultiply_reduced(N=2, rV=5, solver_iterations=1000)


def test_mirror_upper_is_symmetric():
    M = np.array([[1.0, 2.0], [99.0, 3.0]])
    assert np.allclose(mirror_upper(M), [[1.0, 2.0], [2.0, 3.0]])


def test_reduce_operator_shapes():
    comp_assign = np.array([0, 0, 1])
    A = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    Y = np.array([1.0, 1.0])

    op, rA = reduce_operator(Direct(A, Y), comp_assign, 2, solver_iterations=1)
    assert isinstance(op, Direct)
    assert np.allclose(rA, [[3.0, 3.0], [9.0, 6.0]])

    op, rA = reduce_operator(Direct(A, Y), comp_assign, 2, solver_iterations=10000)
    assert isinstance(op, Full)
    assert np.allclose(op.matrix, rA.T @ rA)
    assert np.allclose(op.observation, rA.T @ Y)

    op, rA = reduce_operator(Full(A.T @ A, A.T @ Y), comp_assign, 2, solver_iterations=1)
    assert rA is None
    P = np.array([[1.0, 0.0], [1.0, 0.0], [0.0, 1.0]])
    assert np.allclose(op.matrix, P.T @ A.T @ A @ P)

    op, _ = reduce_operator(Diagonal(np.array([1.0, 2.0, 3.0]), np.ones(3)), comp_assign, 2, solver_iterations=1)
    assert np.allclose(op.diag, [3.0, 3.0])
    assert np.allclose(op.observation, [2.0, 1.0])

    op, _ = reduce_operator(ScaledIdentity(2.0, np.ones(3)), comp_assign, 2, solver_iterations=1)
    assert isinstance(op, Diagonal)
    assert np.allclose(op.diag, [4.0, 2.0])


def test_reduce_bounds_tightest():
    comp_list = np.array([0, 2, 1, 3])
    first_vertex = np.array([0, 2, 4])
    low, upp = reduce_bounds(PerElement(np.array([0.0, -1.0, 2.0, -3.0])), Uniform(5.0), comp_list, first_vertex)
    assert np.allclose(low.values, [2.0, -1.0])
    assert upp == Uniform(5.0)


def test_reduce_l1_rank_reuse_matches_recompute():
    rng = np.random.default_rng(1)
    Yl1 = rng.standard_normal(10)
    weights = PerElement(rng.uniform(0.5, 2.0, size=10))
    first_vertex = np.array([0, 4, 10])
    comp_list = rng.permutation(10)
    saturation = np.array([False, False])

    rl1, fresh = reduce_l1(weights, Yl1, comp_list, first_vertex, saturation)
    saturation[:] = True
    rl1_again, reused = reduce_l1(weights, Yl1, comp_list, first_vertex, saturation)
    _, recomputed = reduce_l1(weights, Yl1, comp_list.copy(), first_vertex, saturation, reuse_median_rank=False)
    assert np.allclose(rl1, rl1_again)
    assert np.allclose(fresh, reused)
    assert np.allclose(reused, recomputed)


def test_reduce_l1_without_penalty():
    assert reduce_l1(Uniform(0.0), None, np.arange(3), np.array([0, 3]), np.array([False])) == (None, None)


def test_premultiplied_and_direct_reduced_solves_agree():
    rng = np.random.default_rng(7)
    A = rng.standard_normal((18, 9))
    Y = rng.standard_normal(18)
    cp = _path_solver(9, activate=(2, 5), A=A, Y=Y, edge_weights=0.05, l1_weights=0.02)
    assert cp.rV == 3

    cp.solver_iterations = 1
    cp.solve_reduced_problem()
    x_direct, R_direct = cp.rX.copy(), cp.R.copy()

    cp.solver_iterations = 100000
    cp.solve_reduced_problem()
    assert np.allclose(cp.rX, x_direct, atol=1e-4)
    assert np.allclose(cp.R, R_direct, atol=1e-3)
    assert np.allclose(cp.R, Y - A @ cp.vertex_values())


def test_objective_direct_matches_brute_force():
    A = np.array([[1.0, 0.5, 0.0], [0.0, 1.0, 2.0], [1.0, 1.0, 1.0]])
    Y = np.array([1.0, -2.0, 0.5])
    l1 = np.array([0.1, 0.2, 0.3])
    Yl1 = np.array([0.0, 1.0, -1.0])
    cp = _path_solver(3, A=A, Y=Y, edge_weights=[1.0, 2.0], l1_weights=l1, Yl1=Yl1)
    cp.solve_univertex_problem()

    x = np.full(3, cp.rX[0])
    expected = 0.5 * np.sum((Y - A @ x) ** 2) + np.sum(l1 * np.abs(x - Yl1))
    assert np.isfinite(cp.compute_objective())
    assert cp.compute_objective() == pytest.approx(expected)


def test_objective_premultiplied_matches_brute_force():
    rng = np.random.default_rng(2)
    B = rng.standard_normal((5, 3))
    M, b = B.T @ B, B.T @ rng.standard_normal(5)
    cp = _path_solver(3, activate=(1,), A=M, Y=b, premultiplied=True, edge_weights=[1.0, 2.0], l1_weights=0.5)
    cp.rX = np.array([0.3, -1.2])

    x = cp.vertex_values()
    expected = 0.5 * x @ M @ x - x @ b + 2.0 * abs(x[1] - x[2]) + 0.5 * np.sum(np.abs(x))
    assert cp.compute_objective() == pytest.approx(expected)
