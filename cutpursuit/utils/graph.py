"""Graph and partition utilities."""

from __future__ import annotations

import networkx as nx
import numpy as np
from scipy import sparse
from scipy.sparse.csgraph import connected_components


def edge_list_to_forward_star(V, source, target):
    """Sort an edge list by source vertex into forward-star (CSR) arrays.

    Returns:
        ``(first_edge, adj_vertices, order)`` where ``order`` maps the sorted
        edges back to the input positions, to reorder per-edge data.
    """
    source = np.asarray(source, dtype=np.int64)
    target = np.asarray(target, dtype=np.int64)
    if source.shape != target.shape:
        raise ValueError(f"Source and target lists differ in length ({len(source)} vs {len(target)}).")
    order = np.argsort(source, kind="stable")
    counts = np.bincount(source, minlength=V)
    first_edge = np.zeros(V + 1, dtype=np.int64)
    np.cumsum(counts, out=first_edge[1:])
    return first_edge, target[order], order


def graph_to_forward_star(G: nx.Graph):
    """Forward-star arrays and edge weights from a networkx graph.

    Nodes are numbered in ``G.nodes`` order; each undirected edge is stored
    once. Missing ``weight`` attributes default to 1.
    """
    index = {node: i for i, node in enumerate(G.nodes())}
    edges = [(index[u], index[v], d.get("weight", 1.0)) for u, v, d in G.edges(data=True)]
    if edges:
        source, target, weight = (np.array(col) for col in zip(*edges))
    else:
        source = target = np.zeros(0, dtype=np.int64)
        weight = np.zeros(0)
    first_edge, adj_vertices, order = edge_list_to_forward_star(len(index), source, target)
    return first_edge, adj_vertices, np.asarray(weight, dtype=float)[order]


def edge_heads(first_edge) -> np.ndarray:
    """Source vertex of every edge of a forward-star graph."""
    first_edge = np.asarray(first_edge)
    return np.repeat(np.arange(len(first_edge) - 1), np.diff(first_edge))


def label_components(V, heads, tails, mask=None):
    """Connected components of the undirected graph made of the masked edges.

    Returns:
        ``(num_components, labels)``.
    """
    heads = np.asarray(heads)
    tails = np.asarray(tails)
    if mask is not None:
        heads, tails = heads[mask], tails[mask]
    adjacency = sparse.csr_matrix(
        (np.ones(len(heads), dtype=np.int8), (heads, tails)), shape=(V, V)
    )
    n, labels = connected_components(adjacency, directed=False)
    return int(n), labels.astype(np.int64)


def group_vertices_by_component(comp_assign, rV, comp_list=None):
    """Lay out vertices component after component.

    Vertices keep the relative order they have in ``comp_list`` (identity by
    default), so the ordering inside an unchanged component is preserved.

    Returns:
        ``(comp_list, first_vertex)``.
    """
    comp_assign = np.asarray(comp_assign)
    if comp_list is None:
        comp_list = np.arange(len(comp_assign))
    order = np.argsort(comp_assign[comp_list], kind="stable")
    comp_list = np.asarray(comp_list)[order]
    first_vertex = np.zeros(rV + 1, dtype=np.int64)
    np.cumsum(np.bincount(comp_assign, minlength=rV), out=first_vertex[1:])
    return comp_list, first_vertex


def contract_edges(comp_assign, heads, tails, weights):
    """Contract a weighted graph along a vertex partition.

    Edges inside a component vanish; parallel edges between two components
    are merged and their weights summed.

    Returns:
        ``(reduced_edges, reduced_weights)`` with ``reduced_edges`` of shape
        ``(rE, 2)``, lower component id first.
    """
    comp_assign = np.asarray(comp_assign)
    cu = comp_assign[np.asarray(heads)]
    cv = comp_assign[np.asarray(tails)]
    weights = np.broadcast_to(np.asarray(weights, dtype=float), cu.shape)
    inter = cu != cv
    if not np.any(inter):
        return np.zeros((0, 2), dtype=np.int64), np.zeros(0)
    pairs = np.stack((np.minimum(cu, cv), np.maximum(cu, cv)), axis=1)[inter]
    reduced_edges, inverse = np.unique(pairs, axis=0, return_inverse=True)
    reduced_weights = np.zeros(len(reduced_edges))
    np.add.at(reduced_weights, np.ravel(inverse), weights[inter])
    return reduced_edges.astype(np.int64), reduced_weights


def expand_values(rX, comp_assign) -> np.ndarray:
    """Expand one value per component back to one value per vertex."""
    return np.asarray(rX)[np.asarray(comp_assign)]


def membership_matrix(comp_assign, rV) -> sparse.csr_matrix:
    """CSR indicator matrix of shape ``(V, rV)``."""
    comp_assign = np.asarray(comp_assign)
    V = comp_assign.shape[0]
    data = np.ones(V, dtype=float)
    return sparse.csr_matrix((data, (np.arange(V), comp_assign)), shape=(V, rV))
