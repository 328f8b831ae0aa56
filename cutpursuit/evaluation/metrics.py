"""Evaluation metrics for recovered partitions and signals."""
from __future__ import annotations

from typing import Dict, Tuple

import networkx as nx
import numpy as np
from sklearn.metrics import (
    adjusted_rand_score,
    mutual_info_score,
    normalized_mutual_info_score,
)


def _relabel_consecutive(labels: np.ndarray) -> np.ndarray:
    _, inv = np.unique(labels, return_inverse=True)
    return inv.astype(int)

def _contingency(labels_a: np.ndarray, labels_b: np.ndarray) -> np.ndarray:
    labels_a = _relabel_consecutive(np.asarray(labels_a))
    labels_b = _relabel_consecutive(np.asarray(labels_b))
    M = np.zeros((int(labels_a.max()) + 1, int(labels_b.max()) + 1), dtype=np.int64)
    np.add.at(M, (labels_a, labels_b), 1)
    return M

def nmi_sklearn(labels_gt, labels_sol) -> float:
    """Compute normalized mutual information via scikit-learn."""
    return float(normalized_mutual_info_score(labels_gt, labels_sol, average_method="arithmetic"))

def ari_sklearn(labels_gt, labels_sol) -> float:
    """Compute adjusted Rand index via scikit-learn."""
    return float(adjusted_rand_score(labels_gt, labels_sol))

def vi_sklearn(labels_gt, labels_sol, log_base=2.0) -> float:
    """Compute variation of information using sklearn mutual information."""
    # sklearn MI uses natural log
    mi = mutual_info_score(labels_gt, labels_sol) / np.log(log_base)
    def H(x):
        _, c = np.unique(x, return_counts=True)
        p = c / c.sum()
        return float(-(p * (np.log(p) / np.log(log_base))).sum())
    return max(0.0, float(H(labels_gt) + H(labels_sol) - 2.0 * mi))

def relative_error(X_ref, X_sol, eps: float = 1e-15) -> float:
    """``||X_sol - X_ref|| / ||X_ref||``, the denominator floored at ``eps``."""
    X_ref = np.asarray(X_ref, dtype=float)
    diff = np.linalg.norm(np.asarray(X_sol, dtype=float) - X_ref)
    return float(diff / max(np.linalg.norm(X_ref), eps))

def permuted_accuracy(labels_gt: np.ndarray, labels_sol: np.ndarray) -> Tuple[float, Dict[int, int]]:
    """
    Maximum fraction of correctly labelled vertices under label permutation.
    Uses maximum-weight bipartite matching on the contingency table.
    Returns: (best_accuracy, mapping sol_label -> gt_label for matched labels).
    """
    cont = _contingency(labels_gt, labels_sol)
    kg, ks = cont.shape
    n = int(cont.sum())

    G = nx.Graph()
    G.add_nodes_from((("g", i) for i in range(kg)), bipartite=0)
    G.add_nodes_from((("s", j) for j in range(ks)), bipartite=1)
    for i, j in zip(*np.nonzero(cont)):
        G.add_edge(("g", int(i)), ("s", int(j)), weight=int(cont[i, j]))

    matched_sum = 0
    mapping: Dict[int, int] = {}
    for u, v in nx.algorithms.matching.max_weight_matching(G, maxcardinality=False, weight="weight"):
        (gi, sj) = (u[1], v[1]) if u[0] == "g" else (v[1], u[1])
        matched_sum += int(cont[gi, sj])
        mapping[sj] = gi
    return float(matched_sum / n if n > 0 else 1.0), mapping
