import os

import networkx as nx
import numpy as np

from cutpursuit.utils.flow import FlowGraph
from cutpursuit.utils.graph import (
    contract_edges,
    edge_heads,
    edge_list_to_forward_star,
    graph_to_forward_star,
    group_vertices_by_component,
    label_components,
    membership_matrix,
)
from cutpursuit.utils.parallel import num_workers, parallel_map


def test_forward_star_from_edge_list():
    first_edge, adj, order = edge_list_to_forward_star(4, [2, 0, 1, 0], [3, 1, 2, 3])
    assert list(first_edge) == [0, 2, 3, 4, 4]
    assert list(edge_heads(first_edge)) == [0, 0, 1, 2]
    assert list(adj) == [1, 3, 2, 3]
    assert list(order) == [1, 3, 2, 0]


def test_forward_star_from_networkx_graph_keeps_weights():
    G = nx.path_graph(3)
    nx.set_edge_attributes(G, {(0, 1): 2.0, (1, 2): 5.0}, "weight")
    first_edge, adj, weights = graph_to_forward_star(G)
    assert list(first_edge) == [0, 1, 2, 2]
    assert list(adj) == [1, 2]
    assert list(weights) == [2.0, 5.0]


def test_components_and_stable_grouping():
    heads = np.array([0, 1, 2, 3])
    tails = np.array([1, 2, 3, 4])
    mask = np.array([True, False, True, True])
    n, labels = label_components(5, heads, tails, mask=mask)
    assert n == 2
    assert labels[0] == labels[1] != labels[2] == labels[3] == labels[4]

    comp_list, first_vertex = group_vertices_by_component(labels, n, np.array([1, 0, 4, 3, 2]))
    assert list(first_vertex) == [0, 2, 5]
    assert list(comp_list[first_vertex[labels[0]]:first_vertex[labels[0] + 1]]) == [1, 0]
    assert list(comp_list[first_vertex[labels[4]]:first_vertex[labels[4] + 1]]) == [4, 3, 2]


def test_contract_edges_sums_parallel_edges():
    comp_assign = np.array([0, 0, 1, 1])
    heads = np.array([0, 1, 0, 2])
    tails = np.array([2, 3, 1, 3])
    edges, weights = contract_edges(comp_assign, heads, tails, np.array([1.0, 2.0, 4.0, 8.0]))
    assert edges.tolist() == [[0, 1]]
    assert weights.tolist() == [3.0]


def test_membership_matrix_columns_are_components():
    P = membership_matrix(np.array([1, 0, 1]), 2)
    assert P.shape == (3, 2)
    assert np.allclose(P.toarray(), [[0, 1], [1, 0], [0, 1]])


def test_flow_graph_cuts_cheapest_edge():
    graph = FlowGraph(np.array([10, 11, 12]))
    graph.set_term_capacities(np.array([5.0, -5.0, 0.0]))
    graph.set_edge_capacities([10], [11], [1.0])
    assert graph.maxflow() == 1.0
    # vertex 12 has no capacity at all and stays with the source
    assert graph.sink_side().tolist() == [False, True, False]
    assert graph.is_sink(11)


def test_flow_graph_infinite_capacity_pins_vertex():
    graph = FlowGraph(np.array([0, 1]))
    graph.set_term_capacities(np.array([-1.0, -1.0]))
    graph.term[0] = np.inf
    graph.set_edge_capacities([0], [1], [0.5])
    graph.maxflow()
    assert graph.sink_side().tolist() == [False, True]


def test_num_workers_estimator():
    assert num_workers(100, 8, min_ops_per_thread=10000) == 1
    assert num_workers(10**6, 0) == 1
    assert num_workers(10**6, 4, min_ops_per_thread=10000, max_workers=2) == min(2, os.cpu_count() or 1)


def test_parallel_map_preserves_order():
    assert parallel_map(lambda k: k * k, range(5), workers=3) == [0, 1, 4, 9, 16]
    assert parallel_map(lambda k: k + 1, [1, 2], workers=1) == [2, 3]
