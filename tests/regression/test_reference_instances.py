import numpy as np
import pytest

from cutpursuit import CutPursuitConfig, PFDRConfig, run_cut_pursuit
from cutpursuit.case_studies import build_blurred_path, build_grid_image, build_piecewise_path
from cutpursuit.evaluation.metrics import ari_sklearn


def _config(**kwargs):
    return CutPursuitConfig(verbosity=0, pfdr=PFDRConfig(dif_tol=1e-8, it_max=100000), **kwargs)


def test_three_vertex_toy_example():
    result = run_cut_pursuit(
        np.array([10.0, 0.0, 10.0]), [0, 1], [1, 2], edge_weights=3.0, A=1.0, l1_weights=0.5, config=_config(),
    )
    assert np.allclose(result.X, [6.5, 5.5, 6.5], atol=1e-3)
    assert result.num_components == 3


def test_toy_example_with_upper_bound():
    result = run_cut_pursuit(
        np.array([10.0, 0.0, 10.0]), [0, 1], [1, 2], edge_weights=3.0, l1_weights=0.5, upp_bnd=6.0, config=_config(),
    )
    assert np.all(result.X <= 6.0 + 1e-9)
    assert np.allclose(result.X, [6.0, 5.5, 6.0], atol=1e-3)


def test_heavy_d1_weight_gives_single_component():
    Y = np.array([1.0, 2.0, 3.0, 4.0])
    result = run_cut_pursuit(Y, [0, 1, 2], [1, 2, 3], edge_weights=10.0, config=_config())
    assert result.num_components == 1
    assert result.X == pytest.approx(np.full(4, 2.5))
    assert result.records == []


def test_piecewise_path_recovery():
    G, Y, X, labels = build_piecewise_path(num_segments=4, segment_length=25, noise=0.05, seed=0)
    result = run_cut_pursuit(Y, graph=G, edge_weights=0.5, config=_config())
    assert ari_sklearn(labels, result.comp_assign) > 0.8
    assert np.max(np.abs(result.X - X)) < 0.2


def test_grid_image_recovery():
    G, Y, X, labels = build_grid_image(shape=(8, 8), blocks=(2, 2), noise=0.05, seed=0)
    result = run_cut_pursuit(Y, graph=G, edge_weights=0.2, config=_config())
    assert ari_sklearn(labels, result.comp_assign) > 0.8
    assert np.linalg.norm(result.X - X) / np.linalg.norm(X) < 0.2


def test_premultiplied_operator_matches_direct():
    G, A, Y, _, _ = build_blurred_path(num_segments=3, segment_length=6, noise=0.01, seed=3)
    direct = run_cut_pursuit(Y, graph=G, A=A, edge_weights=0.05, config=_config())
    premultiplied = run_cut_pursuit(A.T @ Y, graph=G, A=A.T @ A, premultiplied=True, edge_weights=0.05, config=_config())
    assert np.allclose(direct.X, premultiplied.X, atol=5e-3)
    assert direct.metadata["objective"] == pytest.approx(
        premultiplied.metadata["objective"] + 0.5 * Y @ Y, rel=1e-3
    )
