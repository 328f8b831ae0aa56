"""Graph, selection, flow and dispatch utilities used across cutpursuit."""

from cutpursuit.utils.flow import FlowGraph
from cutpursuit.utils.graph import (
    contract_edges,
    edge_list_to_forward_star,
    expand_values,
    graph_to_forward_star,
    group_vertices_by_component,
    label_components,
    membership_matrix,
)
from cutpursuit.utils.parallel import num_workers, parallel_map
from cutpursuit.utils.selection import ranked_median, ranked_weighted_median, sort_median, sort_weighted_median, weighted_median

__all__ = [
    "FlowGraph",
    "contract_edges",
    "edge_list_to_forward_star",
    "expand_values",
    "graph_to_forward_star",
    "group_vertices_by_component",
    "label_components",
    "membership_matrix",
    "num_workers",
    "parallel_map",
    "ranked_median",
    "ranked_weighted_median",
    "sort_median",
    "sort_weighted_median",
    "weighted_median",
]
