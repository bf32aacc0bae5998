"""
Graph functions for topicsum.

This module contains the sentence similarity graph construction (top-k
nearest-neighbor sparsification and max-symmetrization), eigenvector
centrality ranking, and the assembly of the ranked sentences into a summary.
"""

import logging
import networkx as nx
import numpy as np
from scipy.sparse import csr_matrix
from typing import Dict, Hashable, List, Mapping, Optional, Sequence

from .exceptions import DegenerateGraphError

logger = logging.getLogger(__name__)

SIMILARITY_SCALE = 100.0


# ============================================================================
# Similarity Graph Construction
# ============================================================================

def similarity_matrix(divergence: np.ndarray) -> np.ndarray:
    """Convert a [0, 1] divergence matrix to [0, 100] similarities with a zero diagonal."""
    divergence = np.asarray(divergence, dtype=np.float64)
    sim = (1.0 - np.clip(divergence, 0.0, 1.0)) * SIMILARITY_SCALE
    np.fill_diagonal(sim, 0.0)
    return sim


def sparsify_top_k(similarity: np.ndarray, k: int = 3) -> np.ndarray:
    """
    Keep only the k largest positive entries of each row, zeroing the rest.

    Rows are handled independently, so the result is generally not symmetric.
    Equal values are ranked by lower column index.
    """
    if k < 1:
        raise ValueError(f"k must be at least 1, got {k}")
    sparse = np.zeros_like(similarity, dtype=np.float64)
    for i, row in enumerate(similarity):
        order = np.argsort(-row, kind="stable")
        top = [j for j in order[:k] if row[j] > 0]
        sparse[i, top] = row[top]
    return sparse


def symmetrize_max(sparse: np.ndarray) -> np.ndarray:
    """Edge (i, j) survives if either endpoint kept it; weight is the larger of the two."""
    return np.maximum(sparse, sparse.T)


def build_similarity_graph(divergence: np.ndarray, k: int = 3,
                           node_ids: Optional[Sequence[Hashable]] = None) -> nx.Graph:
    """
    Build the undirected weighted nearest-neighbor graph over sentences.

    Args:
        divergence: Symmetric (n, n) divergence matrix with values in [0, 1]
        k: Neighbors kept per node before symmetrization
        node_ids: Node labels in matrix order, defaults to range(n)

    Returns:
        networkx Graph with all n nodes (isolated nodes kept), edge attribute 'weight'
    """
    n = divergence.shape[0]
    if node_ids is None:
        node_ids = list(range(n))
    if len(node_ids) != n:
        raise ValueError(f"Got {len(node_ids)} node ids for a {n}x{n} matrix")

    adjacency = symmetrize_max(sparsify_top_k(similarity_matrix(divergence), k=k))
    graph = nx.from_scipy_sparse_array(csr_matrix(adjacency), edge_attribute="weight")
    graph.remove_edges_from(nx.selfloop_edges(graph))
    graph = nx.relabel_nodes(graph, dict(enumerate(node_ids)))

    logger.debug(f"Similarity graph: {graph.number_of_nodes()} nodes, {graph.number_of_edges()} edges")
    return graph


# ============================================================================
# Centrality Ranking
# ============================================================================

def eigenvector_centrality_scores(graph: nx.Graph, max_iter: int = 1000, tol: float = 1e-6) -> Dict[Hashable, float]:
    """
    Weighted eigenvector centrality; scores have unit Euclidean norm (networkx convention).

    Raises:
        DegenerateGraphError: for an empty graph or when power iteration does not converge
    """
    if graph.number_of_nodes() == 0:
        raise DegenerateGraphError("Cannot rank an empty graph")
    try:
        scores = nx.eigenvector_centrality(graph, max_iter=max_iter, tol=tol, weight="weight")
    except nx.PowerIterationFailedConvergence as e:
        raise DegenerateGraphError(f"Eigenvector centrality did not converge in {max_iter} iterations") from e
    return {node: float(score) for node, score in scores.items()}


def rank_top_n(scores: Mapping[int, float], n: int = 2) -> List[int]:
    """Top n nodes by score, highest first; exact ties go to the lower index."""
    ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
    return [node for node, _ in ranked[:n]]


# ============================================================================
# Summary Assembly
# ============================================================================

def assemble_summary(sentences_by_idx: Mapping[int, str], selected: Sequence[int], separator: str = " ") -> str:
    """Join the selected sentences in document order."""
    return separator.join(sentences_by_idx[i] for i in sorted(selected))
