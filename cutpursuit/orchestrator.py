"""High-level cut-pursuit driver."""

from __future__ import annotations

import copy
from dataclasses import replace
from typing import Any

import networkx as nx
import numpy as np

from cutpursuit.config import ConfigurationError, CutPursuitConfig
from cutpursuit.operators import Direct, make_operator
from cutpursuit.partition.d1_ql1b import CutPursuitD1Ql1b
from cutpursuit.types import CutPursuitResult
from cutpursuit.utils.graph import edge_list_to_forward_star, graph_to_forward_star


class QuadraticCutPursuit:
    """Driver that wires configuration, graph input and problem terms to the solver."""

    def __init__(self, config: CutPursuitConfig | None = None) -> None:
        self.config = config or CutPursuitConfig()

    def build(
        self,
        Y=None,
        source=None,
        target=None,
        edge_weights=1.0,
        A=1.0,
        l1_weights=None,
        Yl1=None,
        low_bnd=None,
        upp_bnd=None,
        premultiplied: bool = False,
        graph: nx.Graph | None = None,
        V: int | None = None,
        **overrides: Any,
    ) -> CutPursuitD1Ql1b:
        """Configured solver, ready for :meth:`CutPursuitD1Ql1b.cut_pursuit`.

        The graph is either ``graph`` (edge attribute ``weight``, nodes
        ``0..V-1``) or the edge list ``source``/``target``. ``A`` follows
        :func:`cutpursuit.operators.make_operator`; the default ``1.0`` is the
        identity. Scalars for ``l1_weights``, ``low_bnd`` and ``upp_bnd`` are
        homogeneous values.
        """
        config = replace(copy.deepcopy(self.config), **overrides)
        operator = make_operator(A, Y, premultiplied=premultiplied)

        if graph is not None:
            first_edge, adj_vertices, weights = graph_to_forward_star(graph)
            V = graph.number_of_nodes()
        else:
            if source is None or target is None:
                raise ConfigurationError("Either a graph or source/target edge lists are required.", None)
            if V is None:
                if isinstance(operator, Direct):
                    V = operator.V
                elif Y is not None:
                    V = len(Y)
                else:
                    V = int(max(np.max(source, initial=-1), np.max(target, initial=-1))) + 1
            first_edge, adj_vertices, order = edge_list_to_forward_star(V, source, target)
            weights = edge_weights if np.ndim(edge_weights) == 0 else np.asarray(edge_weights, dtype=float)[order]

        cp = CutPursuitD1Ql1b(V, first_edge, adj_vertices, config=config)
        cp.set_edge_weights(weights)
        cp.set_quadratic(operator)
        cp.set_l1(l1_weights, Yl1)
        cp.set_bounds(low_bnd, upp_bnd)
        return cp

    def run(self, Y=None, source=None, target=None, **kwargs: Any) -> CutPursuitResult:
        """Solve and return the partition, component values and iteration records."""
        cp = self.build(Y, source, target, **kwargs)
        result = cp.cut_pursuit()
        result.metadata["objective"] = cp.compute_objective()
        result.metadata["solver_iterations"] = cp.solver_iterations
        return result


def run_cut_pursuit(
    Y=None,
    source=None,
    target=None,
    edge_weights=1.0,
    A=1.0,
    l1_weights=None,
    Yl1=None,
    low_bnd=None,
    upp_bnd=None,
    premultiplied: bool = False,
    config: CutPursuitConfig | None = None,
    **kwargs: Any,
) -> CutPursuitResult:
    """Convenience wrapper for one-shot cut-pursuit runs."""
    driver = QuadraticCutPursuit(config=config)
    return driver.run(
        Y,
        source,
        target,
        edge_weights=edge_weights,
        A=A,
        l1_weights=l1_weights,
        Yl1=Yl1,
        low_bnd=low_bnd,
        upp_bnd=upp_bnd,
        premultiplied=premultiplied,
        **kwargs,
    )
