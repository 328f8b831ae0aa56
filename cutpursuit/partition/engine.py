"""Generic cut-pursuit engine: graph, partition and outer loop."""

from __future__ import annotations

import time

import numpy as np
from tqdm.auto import tqdm

from cutpursuit.config import ConfigurationError, CutPursuitConfig
from cutpursuit.types import CutPursuitResult, IterationRecord
from cutpursuit.utils.graph import contract_edges, edge_heads, group_vertices_by_component, label_components
from cutpursuit.weights import Weights, as_weights


class CutPursuit:
    """Partition bookkeeping shared by cut-pursuit variants.

    The graph is given in forward-star form: the outgoing edges of vertex
    ``v`` are ``first_edge[v]:first_edge[v + 1]`` and ``adj_vertices[e]`` is
    the target of edge ``e``. Components are the connected pieces of the graph
    restricted to inactive edges; each holds one value ``rX[rv]``.

    Subclasses implement ``solve_univertex_problem``, ``solve_reduced_problem``,
    ``split``, ``compute_evolution`` and ``compute_objective``.

    Attributes
    ----------
    comp_assign : np.ndarray
        Component of each vertex.
    comp_list, first_vertex : np.ndarray
        Vertices grouped by component, component ``rv`` being
        ``comp_list[first_vertex[rv]:first_vertex[rv + 1]]``.
    saturation : np.ndarray
        Per-component flag, true when the last split found nothing to cut.
    last_rX, last_comp_assign : np.ndarray
        Values and assignment before the last partition refinement.
    """

    def __init__(self, V: int, first_edge, adj_vertices, config: CutPursuitConfig | None = None) -> None:
        self.V = int(V)
        self.first_edge = np.asarray(first_edge, dtype=np.int64)
        self.adj_vertices = np.asarray(adj_vertices, dtype=np.int64)
        if self.first_edge.shape != (self.V + 1,):
            raise ConfigurationError(f"first_edge must have V + 1 = {self.V + 1} entries.", self.first_edge.shape)
        if self.first_edge[-1] != self.adj_vertices.shape[0]:
            raise ConfigurationError("first_edge[V] must equal the number of edges.", int(self.first_edge[-1]))
        self.E = int(self.adj_vertices.shape[0])
        self.heads = edge_heads(self.first_edge)
        self.config = (config or CutPursuitConfig()).validate()
        self.edge_weights: Weights = as_weights(1.0)
        self.active = np.zeros(self.E, dtype=bool)
        self.rX = None
        self.last_rX = None
        self.last_comp_assign = None
        self.reduced_edges = np.zeros((0, 2), dtype=np.int64)
        self.reduced_edge_weights = np.zeros(0)
        self.single_connected_component()

    @property
    def verbose(self) -> bool:
        return self.config.verbosity > 0

    def set_edge_weights(self, edge_weights=None, homo_edge_weight: float = 1.0) -> None:
        """Per-edge d1 weights, or ``homo_edge_weight`` for every edge."""
        weights = as_weights(edge_weights, default=homo_edge_weight)
        if np.ndim(edge_weights) == 1 and len(edge_weights) != self.E:
            raise ConfigurationError(f"Expected {self.E} edge weights.", len(edge_weights))
        if np.any(weights.full(self.E) < 0.0):
            raise ConfigurationError("Negative d1 edge weight.", edge_weights if edge_weights is not None else homo_edge_weight)
        self.edge_weights = weights

    def set_cp_param(self, dif_tol: float | None = None, it_max: int | None = None, verbosity: int | None = None) -> None:
        if dif_tol is not None:
            self.config.dif_tol = dif_tol
        if it_max is not None:
            self.config.it_max = it_max
        if verbosity is not None:
            self.config.verbosity = verbosity
        self.config.validate()

    # ------------------------------ accessors ---------------------------------
    def is_active(self, e):
        return self.active[e]

    def set_active(self, e) -> None:
        self.active[e] = True

    def is_saturated(self, rv: int) -> bool:
        return bool(self.saturation[rv])

    def set_saturation(self, rv: int, saturated: bool) -> None:
        self.saturation[rv] = saturated

    def component(self, rv: int) -> np.ndarray:
        """View on the vertices of component ``rv`` inside ``comp_list``."""
        return self.comp_list[self.first_vertex[rv]:self.first_vertex[rv + 1]]

    def component_edges(self, vertices: np.ndarray) -> np.ndarray:
        """Outgoing edges of ``vertices``."""
        starts, ends = self.first_edge[vertices], self.first_edge[vertices + 1]
        counts = ends - starts
        total = int(counts.sum())
        if total == 0:
            return np.zeros(0, dtype=np.int64)
        return np.repeat(starts - np.cumsum(counts) + counts, counts) + np.arange(total)

    def vertex_values(self) -> np.ndarray:
        return self.rX[self.comp_assign]

    # ------------------------------ partition ---------------------------------
    def single_connected_component(self) -> None:
        self.rV = 1
        self.comp_assign = np.zeros(self.V, dtype=np.int64)
        self.comp_list = np.arange(self.V, dtype=np.int64)
        self.first_vertex = np.array([0, self.V], dtype=np.int64)
        self.saturation = np.zeros(1, dtype=bool)

    def compute_connected_components(self) -> None:
        """Recompute components from inactive edges.

        Components untouched by the last split keep their saturation and the
        order of their vertices in ``comp_list``.
        """
        self.last_comp_assign = self.comp_assign.copy()
        rV, comp_assign = label_components(self.V, self.heads, self.adj_vertices, mask=~self.active)
        previous = np.zeros(rV, dtype=np.int64)
        previous[comp_assign] = self.last_comp_assign
        self.saturation = self.saturation[previous]
        self.comp_list, self.first_vertex = group_vertices_by_component(comp_assign, rV, self.comp_list)
        self.comp_assign = comp_assign
        self.rV = rV

    def compute_reduced_graph(self) -> None:
        """Reduced edges between adjacent components, weights summed."""
        self.reduced_edges, self.reduced_edge_weights = contract_edges(
            self.comp_assign, self.heads, self.adj_vertices, self.edge_weights.full(self.E)
        )

    def compute_graph_d1(self) -> float:
        """Total variation of the current values over active edges."""
        if not np.any(self.active):
            return 0.0
        x = self.vertex_values()
        e = np.flatnonzero(self.active)
        return float(np.sum(self.edge_weights.at(e) * np.abs(x[self.heads[e]] - x[self.adj_vertices[e]])))

    # ------------------------------ main loop ---------------------------------
    def cut_pursuit(self, init: bool = True) -> CutPursuitResult:
        """Alternate partition refinement and reduced solves until stable."""
        cfg = self.config
        records = []
        start = time.time()
        if init:
            self.single_connected_component()
            self.active[:] = False
            self.rX = np.empty(1)
            self.solve_univertex_problem()
            self.compute_reduced_graph()

        with tqdm(total=cfg.it_max, disable=not self.verbose) as pbar:
            for iteration in range(1, cfg.it_max + 1):
                activation = self.split()
                if self.verbose:
                    print(f"\nIteration {iteration}: {activation} new active edges")
                if activation == 0:
                    if self.verbose:
                        print("No component can be split further; stopping cut-pursuit.")
                    break

                self.last_rX = self.rX.copy()
                self.compute_connected_components()
                self.compute_reduced_graph()
                solver_iterations = self.solve_reduced_problem()
                dif, saturated = self.compute_evolution(compute_dif=cfg.monitor_evolution)
                objective = self.compute_objective() if cfg.compute_objective else None

                records.append(
                    IterationRecord(
                        iteration=iteration,
                        num_components=self.rV,
                        activation=activation,
                        solver_iterations=solver_iterations,
                        evolution=dif if cfg.monitor_evolution else None,
                        saturated=saturated,
                        objective=objective,
                        time=time.time() - start,
                    )
                )
                if self.verbose:
                    print(f"{self.rV} components, {saturated} saturated, relative evolution {dif:.2e}")
                pbar.update(1)

                if cfg.monitor_evolution and dif <= cfg.dif_tol:
                    if self.verbose:
                        print(f"Relative evolution below {cfg.dif_tol:.2g}; stopping cut-pursuit.")
                    break

        return CutPursuitResult(
            comp_assign=self.comp_assign.copy(),
            rX=self.rX.copy(),
            records=records,
            metadata={"n_iterations": len(records), "time": time.time() - start},
        )

    def solve_univertex_problem(self) -> None:
        raise NotImplementedError

    def solve_reduced_problem(self) -> int:
        raise NotImplementedError

    def split(self) -> int:
        raise NotImplementedError

    def compute_evolution(self, compute_dif: bool = True) -> tuple[float, int]:
        raise NotImplementedError

    def compute_objective(self) -> float:
        raise NotImplementedError
