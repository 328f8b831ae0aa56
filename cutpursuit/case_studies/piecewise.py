"""Piecewise-constant signals on path and grid graphs."""

import networkx as nx
import numpy as np


def _segment_levels(num_segments, rng, spread):
    levels = rng.uniform(-spread, spread, size=num_segments)
    # adjacent segments must differ so that they form distinct components
    for k in range(1, num_segments):
        while abs(levels[k] - levels[k - 1]) < 0.25 * spread:
            levels[k] = rng.uniform(-spread, spread)
    return levels


def build_piecewise_path(num_segments=4, segment_length=25, noise=0.1, seed=0, spread=1.0):
    """Build a noisy piecewise-constant signal on a path graph.

    Args:
        num_segments: Number of constant pieces.
        segment_length: Number of vertices per piece.
        noise: Standard deviation of the additive Gaussian noise.
        seed: Seed of the random generator.
        spread: Levels are drawn uniformly in ``[-spread, spread]``.

    Returns:
        Tuple of ``(graph, observation, ground_truth, labels)``; every edge
        carries ``weight=1``.
    """
    rng = np.random.default_rng(seed)
    V = num_segments * segment_length
    G = nx.path_graph(V)
    nx.set_edge_attributes(G, 1.0, "weight")

    labels = np.repeat(np.arange(num_segments), segment_length)
    X = _segment_levels(num_segments, rng, spread)[labels]
    Y = X + noise * rng.standard_normal(V)
    return G, Y, X, labels


def build_grid_image(shape=(12, 12), blocks=(2, 2), noise=0.1, seed=0, spread=1.0):
    """Build a noisy image made of constant rectangular blocks on a 4-connected grid.

    Vertices are numbered row by row.

    Returns:
        Tuple of ``(graph, observation, ground_truth, labels)``.
    """
    rng = np.random.default_rng(seed)
    rows, cols = shape
    G = nx.convert_node_labels_to_integers(nx.grid_2d_graph(rows, cols))
    nx.set_edge_attributes(G, 1.0, "weight")

    block_rows = np.minimum(np.arange(rows) * blocks[0] // rows, blocks[0] - 1)
    block_cols = np.minimum(np.arange(cols) * blocks[1] // cols, blocks[1] - 1)
    labels = (block_rows[:, None] * blocks[1] + block_cols[None, :]).ravel()
    levels = rng.permutation(np.linspace(-spread, spread, blocks[0] * blocks[1]))
    X = levels[labels]
    Y = X + noise * rng.standard_normal(X.shape[0])
    return G, Y, X, labels


def build_blurred_path(num_segments=3, segment_length=10, num_observations=None, noise=0.05, seed=0, spread=1.0):
    """Piecewise-constant path signal observed through a random linear operator.

    ``A`` has i.i.d. Gaussian entries scaled by ``1 / sqrt(N)``.

    Returns:
        Tuple of ``(graph, A, observation, ground_truth, labels)``.
    """
    G, _, X, labels = build_piecewise_path(num_segments, segment_length, noise=0.0, seed=seed, spread=spread)
    rng = np.random.default_rng(seed + 1)
    V = X.shape[0]
    N = num_observations or 2 * V
    A = rng.standard_normal((N, V)) / np.sqrt(N)
    Y = A @ X + noise * rng.standard_normal(N)
    return G, A, Y, X, labels
