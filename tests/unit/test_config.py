import numpy as np
import pytest

from cutpursuit.config import ConfigurationError, CutPursuitConfig, PFDRConfig
from cutpursuit.partition.d1_ql1b import CutPursuitD1Ql1b


def _solver(V=3):
    first_edge = np.array([0, 1, 2, 2])
    adj_vertices = np.array([1, 2])
    return CutPursuitD1Ql1b(V, first_edge, adj_vertices, config=CutPursuitConfig(verbosity=0))


def test_negative_homogeneous_l1_weight_is_rejected_with_value():
    cp = _solver()
    with pytest.raises(ConfigurationError) as excinfo:
        cp.set_l1(homo_l1_weight=-0.5)
    assert excinfo.value.value == -0.5


def test_negative_per_vertex_l1_weight_is_rejected():
    with pytest.raises(ConfigurationError):
        _solver().set_l1(np.array([1.0, -1.0, 0.0]))


def test_inverted_homogeneous_bounds_are_rejected():
    cp = _solver()
    with pytest.raises(ConfigurationError) as excinfo:
        cp.set_bounds(homo_low_bnd=1.0, homo_upp_bnd=0.0)
    assert excinfo.value.value == (1.0, 0.0)
    cp.set_bounds(homo_low_bnd=0.0, homo_upp_bnd=0.0)


def test_inverted_per_vertex_bounds_are_rejected():
    with pytest.raises(ConfigurationError):
        _solver().set_bounds(np.array([0.0, 2.0, 0.0]), 1.0)


def test_operator_shape_mismatch():
    cp = _solver()
    with pytest.raises(ConfigurationError):
        cp.set_quadratic(np.ones((4, 2)), np.zeros(4))
    with pytest.raises(ConfigurationError):
        cp.set_quadratic(np.ones((3, 3)), np.zeros(2), premultiplied=True)
    with pytest.raises(ConfigurationError):
        cp.set_quadratic(-1.0)
    cp.set_quadratic(np.ones((4, 3)), np.zeros(4))
    assert cp.R.shape == (4,)
    cp.set_quadratic(np.ones(3), np.zeros(3))
    assert cp.R is None


def test_edge_weights_validation():
    cp = _solver()
    with pytest.raises(ConfigurationError):
        cp.set_edge_weights(np.array([1.0, 2.0, 3.0]))
    with pytest.raises(ConfigurationError):
        cp.set_edge_weights(homo_edge_weight=-1.0)


def test_pfdr_parameters_are_validated_and_restored():
    cp = _solver()
    with pytest.raises(ConfigurationError):
        cp.set_pfdr_param(rho=2.0)
    assert cp.config.pfdr.rho == 1.0
    cp.set_pfdr_param(rho=1.2, cond_min=0.1, dif_rcd=1e-3, it_max=50, dif_tol=1e-5)
    assert cp.config.pfdr == PFDRConfig(rho=1.2, cond_min=0.1, dif_rcd=1e-3, it_max=50, dif_tol=1e-5)


@pytest.mark.parametrize(
    "config",
    [
        CutPursuitConfig(dif_tol=-1.0),
        CutPursuitConfig(max_workers=0),
        CutPursuitConfig(eps=0.0),
        CutPursuitConfig(pfdr=PFDRConfig(cond_min=0.0)),
        CutPursuitConfig(pfdr=PFDRConfig(it_max=0)),
    ],
)
def test_invalid_configs(config):
    with pytest.raises(ConfigurationError):
        config.validate()


def test_graph_shape_is_checked():
    with pytest.raises(ConfigurationError):
        CutPursuitD1Ql1b(3, np.array([0, 1, 2]), np.array([1, 2]))
    with pytest.raises(ConfigurationError):
        CutPursuitD1Ql1b(3, np.array([0, 1, 2, 3]), np.array([1, 2]))


def test_cut_pursuit_parameters_are_validated():
    cp = _solver()
    cp.set_cp_param(dif_tol=1e-3, it_max=5, verbosity=2)
    assert (cp.config.dif_tol, cp.config.it_max, cp.config.verbosity) == (1e-3, 5, 2)
    with pytest.raises(ConfigurationError):
        cp.set_cp_param(dif_tol=-1.0)


def test_reduced_solver_defaults_follow_cut_pursuit_tolerance():
    config = CutPursuitConfig(dif_tol=1e-4)
    assert config.pfdr.cond_min == 1e-3
    assert config.pfdr_dif_tol() == pytest.approx(1e-7)
    config.pfdr.dif_tol = 1e-5
    assert config.pfdr_dif_tol() == 1e-5
