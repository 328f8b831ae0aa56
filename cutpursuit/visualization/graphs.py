"""Graph visualization helpers."""

from __future__ import annotations


def draw_partition(G, comp_assign, values=None, show=True, save_path=None, figsize=None):
    """Draw a graph with nodes colored by component, or by value when ``values`` is given.

    Active edges (endpoints in different components) are drawn dashed.
    """
    import matplotlib.pyplot as plt
    import networkx as nx
    import numpy as np

    comp_assign = np.asarray(comp_assign)
    pos = nx.spring_layout(G, seed=42)
    if figsize:
        plt.figure(figsize=figsize)

    if values is None:
        num_components = int(comp_assign.max()) + 1 if comp_assign.size else 1
        cmap = plt.get_cmap("tab10" if num_components <= 10 else "tab20")
        node_color = [cmap(int(comp_assign[i]) % cmap.N) for i in range(G.number_of_nodes())]
    else:
        node_color = np.asarray(values)[comp_assign]
    nx.draw_networkx_nodes(G, pos, node_color=node_color, node_size=120, cmap="viridis")

    nodes = list(G.nodes())
    index = {node: i for i, node in enumerate(nodes)}
    cut = [(u, v) for u, v in G.edges() if comp_assign[index[u]] != comp_assign[index[v]]]
    kept = [(u, v) for u, v in G.edges() if comp_assign[index[u]] == comp_assign[index[v]]]
    nx.draw_networkx_edges(G, pos, edgelist=kept, edge_color="#000000", alpha=0.6)
    nx.draw_networkx_edges(G, pos, edgelist=cut, edge_color="#bfbfbf", style="--", alpha=0.6)
    plt.title(f"Partition into {len(np.unique(comp_assign))} components")
    plt.axis("off")
    if save_path:
        plt.savefig(save_path, bbox_inches="tight")
    if show:
        plt.show()
    plt.close()
