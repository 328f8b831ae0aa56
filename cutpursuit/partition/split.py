"""Partition refinement: gradients turned into flow capacities, cut per component."""

from __future__ import annotations

import numpy as np

from cutpursuit.operators import Diagonal, Direct, Full, Operator, observation_or_zeros
from cutpursuit.utils.flow import FlowGraph
from cutpursuit.utils.parallel import num_workers, parallel_map
from cutpursuit.weights import PerElement, Uniform, Weights


def has_l1(l1_weights: Weights) -> bool:
    return isinstance(l1_weights, PerElement) or not l1_weights.is_zero()


def has_bounds(low_bnd: Weights, upp_bnd: Weights) -> bool:
    return not (
        isinstance(low_bnd, Uniform) and low_bnd.value == -np.inf
        and isinstance(upp_bnd, Uniform) and upp_bnd.value == np.inf
    )


def compute_gradient(
    operator: Operator,
    x: np.ndarray,
    heads: np.ndarray,
    tails: np.ndarray,
    active: np.ndarray,
    edge_weights: Weights,
    l1_weights: Weights,
    Yl1: np.ndarray | None = None,
    R: np.ndarray | None = None,
) -> np.ndarray:
    """Gradient of the differentiable part of the objective at vertex values ``x``.

    Sums the quadratic gradient, the contribution of active d1 edges and the
    l1 term away from its targets (zero exactly at a target).
    """
    V = x.shape[0]
    if isinstance(operator, Direct):
        grad = -(operator.matrix.T @ R)
    elif isinstance(operator, Full):
        grad = operator.matrix @ x - observation_or_zeros(operator, V)
    elif isinstance(operator, Diagonal):
        grad = operator.diag * x - observation_or_zeros(operator, V)
    elif operator.scale:
        grad = operator.scale * x - observation_or_zeros(operator, V)
    else:
        grad = np.zeros(V)
    grad = np.array(grad, dtype=float)

    e = np.flatnonzero(active)
    if e.size:
        u, v = heads[e], tails[e]
        w = edge_weights.at(e)
        grad_d1 = np.where(x[u] > x[v], w, -w)
        np.add.at(grad, u, grad_d1)
        np.subtract.at(grad, v, grad_d1)

    if has_l1(l1_weights):
        targets = np.zeros(V) if Yl1 is None else Yl1
        grad += l1_weights.full(V) * np.sign(x - targets)
    return grad


def split_component(
    vertices: np.ndarray,
    owners: np.ndarray,
    tails: np.ndarray,
    inactive: np.ndarray,
    edge_weights: np.ndarray,
    grad: np.ndarray,
    l1_at_target: np.ndarray | None = None,
    at_upper: np.ndarray | None = None,
    at_lower: np.ndarray | None = None,
    single_cut: bool = False,
) -> np.ndarray:
    """Edges of one component to activate, from one or two minimum cuts.

    Edge-indexed arrays (``owners``, ``tails``, ``inactive``, ``edge_weights``)
    describe the outgoing edges of ``vertices``; ``owners`` holds the position
    in ``vertices`` of each edge's head. Vertex-indexed arrays are aligned
    with ``vertices``: ``grad`` the gradient, ``l1_at_target`` the l1 weight
    where the value sits exactly on its target (zero elsewhere), ``at_upper``
    and ``at_lower`` the vertices pinned by their bounds.

    The first cut tests increasing a subset of the component, the second
    decreasing it. Edges activated by the first cut are left out of the
    second.

    Returns:
        Positions of newly activated edges in the edge-indexed arrays.
    """
    graph = FlowGraph(vertices)
    local = graph.local
    # active edges may leave the component; only inactive tails are local
    tail_pos = np.zeros(len(tails), dtype=np.int64)
    tail_pos[inactive] = [local[int(v)] for v in tails[inactive]]
    inactive = inactive.copy()
    activated = np.zeros(len(tails), dtype=bool)

    for direction, pinned in ((1.0, at_upper), (-1.0, at_lower)):
        graph.set_term_capacities(grad)
        if l1_at_target is not None:
            graph.add_term_capacities(direction * l1_at_target)
        if pinned is not None and np.any(pinned):
            graph.term[pinned] = direction * np.inf
        graph.set_edge_capacities(vertices[owners[inactive]], tails[inactive], edge_weights[inactive])
        graph.maxflow()
        sink = graph.sink_side()
        cut = inactive & (sink[owners] != sink[tail_pos])
        activated |= cut
        inactive &= ~cut
        if single_cut:
            break
    return np.flatnonzero(activated)


def split(cp) -> int:
    """Refine the partition of ``cp`` (a :class:`CutPursuitD1Ql1b`).

    Non-saturated components are cut independently, possibly on a thread
    pool. Components with no new active edge become saturated.

    Returns:
        Number of newly activated edges.
    """
    x = cp.vertex_values()
    grad = compute_gradient(
        cp.operator, x, cp.heads, cp.adj_vertices, cp.active,
        cp.edge_weights, cp.l1_weights, cp.Yl1, cp.R,
    )
    with_l1 = has_l1(cp.l1_weights)
    single_cut = not with_l1 and not has_bounds(cp.low_bnd, cp.upp_bnd)
    edge_weights = cp.edge_weights.full(cp.E)
    if with_l1:
        l1_weights = cp.l1_weights.full(cp.V)
        targets = np.zeros(cp.V) if cp.Yl1 is None else cp.Yl1
        l1_at_target = np.where(x == targets, l1_weights, 0.0)
    # values pinned by a bound cannot move past it
    at_upper = x == cp.upp_bnd.full(cp.V)
    at_lower = x == cp.low_bnd.full(cp.V)

    def task(rv: int):
        vertices = cp.component(rv)
        edges = cp.component_edges(vertices)
        degrees = cp.first_edge[vertices + 1] - cp.first_edge[vertices]
        owners = np.repeat(np.arange(len(vertices)), degrees)
        inner = ~cp.active[edges]
        edges, owners = edges[inner], owners[inner]
        new = split_component(
            vertices,
            owners,
            cp.adj_vertices[edges],
            np.ones(edges.size, dtype=bool),
            edge_weights[edges],
            grad[vertices],
            l1_at_target=l1_at_target[vertices] if with_l1 else None,
            at_upper=at_upper[vertices],
            at_lower=at_lower[vertices],
            single_cut=single_cut,
        )
        return rv, edges[new]

    pending = np.flatnonzero(~cp.saturation)
    workers = num_workers(
        2 * cp.V + 5 * cp.E, len(pending),
        min_ops_per_thread=cp.config.min_ops_per_thread, max_workers=cp.config.max_workers,
    )
    activation = 0
    for rv, new_edges in parallel_map(task, pending, workers=workers):
        cp.set_active(new_edges)
        cp.set_saturation(rv, new_edges.size == 0)
        activation += int(new_edges.size)
    return activation
