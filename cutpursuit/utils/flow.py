"""Source/sink flow networks over a vertex subset, cut with networkx."""

from __future__ import annotations

import networkx as nx
import numpy as np
from networkx.algorithms.flow import boykov_kolmogorov

SOURCE = "source"
SINK = "sink"


class FlowGraph:
    """Flow network restricted to ``vertices`` of a larger graph.

    Terminal capacities follow the sign convention of the split step: a
    positive capacity links the vertex to the source, a negative one to the
    sink, and an infinite one pins the vertex to that terminal's side. Each
    instance is private to one task; nothing is shared between instances.
    """

    def __init__(self, vertices) -> None:
        self.vertices = np.asarray(vertices)
        self.local = {int(v): i for i, v in enumerate(self.vertices)}
        self.term = np.zeros(len(self.vertices))
        self.edges: dict[tuple[int, int], float] = {}
        self.sink_side_: np.ndarray | None = None
        self.flow_value_: float | None = None

    def set_term_capacities(self, capacities) -> None:
        self.term = np.asarray(capacities, dtype=float).copy()

    def add_term_capacities(self, capacities) -> None:
        self.term += capacities

    def set_edge_capacities(self, heads, tails, capacities) -> None:
        """Symmetric capacities on the edges ``(heads[k], tails[k])``."""
        self.edges = {}
        for u, v, c in zip(heads, tails, capacities):
            if c <= 0.0:
                continue
            key = (self.local[int(u)], self.local[int(v)])
            self.edges[key] = self.edges.get(key, 0.0) + float(c)

    def _build(self) -> nx.DiGraph:
        G = nx.DiGraph()
        G.add_nodes_from(range(len(self.vertices)))
        G.add_nodes_from((SOURCE, SINK))
        for i, cap in enumerate(self.term):
            if cap > 0.0:
                if np.isinf(cap):
                    G.add_edge(SOURCE, i)
                else:
                    G.add_edge(SOURCE, i, capacity=float(cap))
            elif cap < 0.0:
                if np.isinf(cap):
                    G.add_edge(i, SINK)
                else:
                    G.add_edge(i, SINK, capacity=float(-cap))
        for (u, v), cap in self.edges.items():
            for a, b in ((u, v), (v, u)):
                if G.has_edge(a, b):
                    G[a][b]["capacity"] += cap
                else:
                    G.add_edge(a, b, capacity=cap)
        return G

    def maxflow(self) -> float:
        """Compute a minimum cut; returns its value."""
        G = self._build()
        # networkx puts on the sink side exactly the nodes that can still reach
        # the sink in the residual graph; all other nodes go with the source
        cut_value, (_, sink_nodes) = nx.minimum_cut(G, SOURCE, SINK, flow_func=boykov_kolmogorov)
        sink_side = np.zeros(len(self.vertices), dtype=bool)
        for node in sink_nodes:
            if node != SINK:
                sink_side[node] = True
        self.sink_side_ = sink_side
        self.flow_value_ = float(cut_value)
        return self.flow_value_

    def is_sink(self, v: int) -> bool:
        return bool(self.sink_side_[self.local[int(v)]])

    def sink_side(self) -> np.ndarray:
        """Boolean mask over ``vertices``, true on the sink side of the cut."""
        return self.sink_side_
