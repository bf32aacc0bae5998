"""
Mathematical functions for topicsum.

This module contains the topic-space sentence embedding and the Hellinger
divergence computations used to compare sentences.
"""

import logging
import numpy as np
from typing import List, Sequence, Tuple

from .datatypes import Sentence
from .exceptions import InsufficientVocabularyError, MalformedInputError
from .term_topic_matrix import TermTopicMatrix

logger = logging.getLogger(__name__)


# ============================================================================
# Topic Embedding
# ============================================================================

def shared_vocabulary(sentences: Sequence[Sentence], term_topic_matrix: TermTopicMatrix) -> List[str]:
    """
    Sorted intersection of the sentences' terms and the matrix's terms.

    Raises:
        InsufficientVocabularyError: if the intersection is empty
    """
    doc_terms = set()
    for s in sentences:
        doc_terms.update(s.term_counts)
    vocabulary = sorted(t for t in doc_terms if t in term_topic_matrix)
    if not vocabulary:
        raise InsufficientVocabularyError("No terms shared between document and term-topic matrix")
    return vocabulary


def term_distributions(sentences: Sequence[Sentence], vocabulary: Sequence[str]) -> np.ndarray:
    """
    Per-sentence term distributions restricted to the vocabulary.

    Counts are divided by each sentence's own total before restriction, so rows
    of the result sum to the share of the sentence's mass inside the vocabulary.
    """
    col = {term: j for j, term in enumerate(vocabulary)}
    dist = np.zeros((len(sentences), len(vocabulary)), dtype=np.float64)
    for i, s in enumerate(sentences):
        total = s.n_terms
        if total == 0:
            continue
        for term, count in s.term_counts.items():
            j = col.get(term)
            if j is not None:
                dist[i, j] = count / total
    return dist


def embed_sentences(distributions: np.ndarray, restricted_matrix: np.ndarray) -> np.ndarray:
    """Project (n_sentences, n_vocab) distributions onto (n_topics, n_vocab) weights."""
    return distributions @ restricted_matrix.T


def drop_zero_mass(embeddings: np.ndarray, sentences: Sequence[Sentence]) -> Tuple[np.ndarray, List[Sentence]]:
    """Remove sentences whose embedding has no mass; they have no topic distribution."""
    mass = embeddings.sum(axis=1)
    keep = mass > 0
    if not np.all(keep):
        dropped = [s.idx for s, k in zip(sentences, keep) if not k]
        logger.debug(f"Dropping sentences with zero topic mass: {dropped}")
    return embeddings[keep], [s for s, k in zip(sentences, keep) if k]


# ============================================================================
# Distance Metrics
# ============================================================================

def _normalize_rows(vectors: np.ndarray) -> np.ndarray:
    vectors = np.asarray(vectors, dtype=np.float64)
    if not np.all(np.isfinite(vectors)):
        raise MalformedInputError("Embeddings contain non-finite values")
    if np.any(vectors < 0):
        raise MalformedInputError("Embeddings contain negative values")
    sums = vectors.sum(axis=-1, keepdims=True)
    if np.any(sums <= 0):
        raise MalformedInputError("Cannot normalize an embedding with zero mass")
    return vectors / sums


def hellinger(p, q) -> float:
    """
    Compute Hellinger distance between two probability distributions.

    H(P,Q) = sqrt(1 - sum_k sqrt(p_k * q_k)), inputs renormalized to sum to 1.

    Args:
        p, q: Non-negative vectors of the same length

    Returns:
        Hellinger distance in [0, 1]
    """
    p = _normalize_rows(p)
    q = _normalize_rows(q)
    bc = np.sum(np.sqrt(p * q))
    return float(np.sqrt(np.clip(1.0 - bc, 0.0, 1.0)))


def hellinger_distance_matrix(embeddings: np.ndarray) -> np.ndarray:
    """
    Pairwise Hellinger distances between the rows of embeddings.

    The Bhattacharyya coefficient matrix is computed once as sqrt(P) @ sqrt(P).T,
    clipped to [0, 1] against rounding, and the result is symmetrized with its
    transpose. The diagonal is zeroed.

    Args:
        embeddings: Array of shape (n, n_topics)

    Returns:
        Symmetric (n, n) array with values in [0, 1] and a zero diagonal
    """
    embeddings = np.asarray(embeddings, dtype=np.float64)
    if embeddings.ndim != 2:
        raise MalformedInputError(f"Embeddings must be 2-dimensional, got shape {embeddings.shape}")
    if embeddings.shape[0] == 0:
        return np.zeros((0, 0))

    sqrt_vectors = np.sqrt(_normalize_rows(embeddings))
    bc = np.clip(sqrt_vectors @ sqrt_vectors.T, 0.0, 1.0)
    distance_matrix = np.sqrt(1.0 - bc)
    distance_matrix = (distance_matrix + distance_matrix.T) / 2.0
    np.fill_diagonal(distance_matrix, 0.0)
    return distance_matrix
