import numpy as np
import pytest

from cutpursuit.operators import Diagonal, Direct, Full, ScaledIdentity, is_premultiplied, make_operator
from cutpursuit.weights import PerElement, Uniform, as_weights


def test_as_weights_resolves_scalar_array_and_none():
    assert as_weights(None, default=2.0) == Uniform(2.0)
    assert as_weights(0.5) == Uniform(0.5)
    w = as_weights([1.0, 2.0, 3.0])
    assert isinstance(w, PerElement)
    assert np.allclose(w.full(3), [1.0, 2.0, 3.0])


def test_component_sums():
    comp_list = np.array([0, 2, 1, 3])
    first_vertex = np.array([0, 2, 4])
    assert np.allclose(Uniform(0.5).component_sum(comp_list, first_vertex), [1.0, 1.0])
    w = PerElement(np.array([1.0, 2.0, 3.0, 4.0]))
    assert np.allclose(w.component_sum(comp_list, first_vertex), [4.0, 6.0])
    assert w.total(4) == 10.0
    assert Uniform(0.0).is_zero()
    assert not w.is_zero()


def test_make_operator_variants():
    assert make_operator(None) == ScaledIdentity(0.0)
    assert isinstance(make_operator(2.0, [1.0, 2.0]), ScaledIdentity)
    assert isinstance(make_operator(np.ones(3)), Diagonal)
    op = make_operator(np.ones((4, 3)), np.zeros(4))
    assert isinstance(op, Direct)
    assert (op.N, op.V) == (4, 3)
    full = make_operator(np.eye(3), np.zeros(3), premultiplied=True)
    assert isinstance(full, Full)
    assert is_premultiplied(full)
    assert not is_premultiplied(op)


@pytest.mark.parametrize("A", [np.eye(2), np.ones(2), 1.0])
def test_make_operator_passes_variants_through(A):
    op = make_operator(A, np.ones(2), premultiplied=True)
    assert make_operator(op) is op
