"""
Read-only term-topic weight matrix shared by all documents of a batch.

The matrix is the output of an external topic-modeling step: for each topic, a
non-negative weight per vocabulary term (the "gamma" or "phi" matrix). It is
stored densely as (n_topics, n_terms) and never mutated once built.
"""

import numpy as np
import pandas as pd
from typing import Dict, Hashable, Mapping, Optional, Sequence

from .exceptions import MalformedInputError


class TermTopicMatrix:
    """
    Dense topics x terms weight matrix with term lookup.

    Args:
        weights: Array-like of shape (n_topics, n_terms), non-negative and finite
        terms: Column labels, one per term
        topics: Row labels, defaults to range(n_topics)
    """

    def __init__(self, weights, terms: Sequence[str], topics: Optional[Sequence[Hashable]] = None):
        try:
            weights = np.array(weights, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise MalformedInputError(f"Term-topic weights are not numeric: {e}") from e

        if weights.ndim != 2:
            raise MalformedInputError(f"Term-topic weights must be 2-dimensional, got shape {weights.shape}")
        if weights.shape[0] == 0:
            raise MalformedInputError("Term-topic matrix has no topics")

        terms = [str(t) for t in terms]
        topics = list(range(weights.shape[0])) if topics is None else list(topics)

        if weights.shape != (len(topics), len(terms)):
            raise MalformedInputError(
                f"Weights shape {weights.shape} does not match {len(topics)} topics x {len(terms)} terms"
            )
        if len(set(terms)) != len(terms):
            raise MalformedInputError("Term-topic matrix has duplicated terms")
        if not np.all(np.isfinite(weights)):
            raise MalformedInputError("Term-topic matrix contains non-finite weights")
        if np.any(weights < 0):
            raise MalformedInputError("Term-topic matrix contains negative weights")

        weights.flags.writeable = False
        self._weights = weights
        self._terms = tuple(terms)
        self._topics = tuple(topics)
        self._term_index = {term: i for i, term in enumerate(self._terms)}

    @classmethod
    def from_mapping(cls, mapping: Mapping[Hashable, Mapping[str, float]]) -> 'TermTopicMatrix':
        """Build from {topic: {term: weight}}; absent cells are zero."""
        if not isinstance(mapping, Mapping):
            raise MalformedInputError(f"Expected a mapping of topic -> term weights, got {type(mapping).__name__}")

        topics = list(mapping.keys())
        terms = set()
        for topic in topics:
            row = mapping[topic]
            if not isinstance(row, Mapping):
                raise MalformedInputError(f"Weights for topic {topic!r} are not a term mapping")
            terms.update(str(t) for t in row.keys())
        terms = sorted(terms)
        term_index = {term: i for i, term in enumerate(terms)}

        weights = np.zeros((len(topics), len(terms)), dtype=np.float64)
        for row_idx, topic in enumerate(topics):
            for term, weight in mapping[topic].items():
                try:
                    weights[row_idx, term_index[str(term)]] = weight
                except (TypeError, ValueError) as e:
                    raise MalformedInputError(f"Weight for ({topic!r}, {term!r}) is not numeric: {weight!r}") from e

        return cls(weights, terms, topics)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> 'TermTopicMatrix':
        """Build from a DataFrame with topics as rows and terms as columns."""
        try:
            weights = df.to_numpy(dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise MalformedInputError(f"Term-topic dataframe is not numeric: {e}") from e
        return cls(weights, list(df.columns), list(df.index))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def terms(self) -> tuple:
        return self._terms

    @property
    def topics(self) -> tuple:
        return self._topics

    @property
    def term_index(self) -> Dict[str, int]:
        return dict(self._term_index)

    @property
    def shape(self):
        return self._weights.shape

    @property
    def n_topics(self) -> int:
        return self._weights.shape[0]

    @property
    def n_terms(self) -> int:
        return self._weights.shape[1]

    def __contains__(self, term) -> bool:
        return term in self._term_index

    def restrict(self, vocabulary: Sequence[str]) -> np.ndarray:
        """Return the (n_topics, len(vocabulary)) sub-matrix in vocabulary order."""
        missing = [t for t in vocabulary if t not in self._term_index]
        if missing:
            raise KeyError(f"Terms not in term-topic matrix: {missing[:5]}")
        cols = [self._term_index[t] for t in vocabulary]
        return self._weights[:, cols]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self._weights, index=list(self._topics), columns=list(self._terms))

    def __repr__(self):
        return f"TermTopicMatrix(n_topics={self.n_topics}, n_terms={self.n_terms})"


def coerce_term_topic_matrix(obj) -> TermTopicMatrix:
    """
    Accept a TermTopicMatrix, a {topic: {term: weight}} mapping, or a
    topics x terms DataFrame and return a TermTopicMatrix.
    """
    if isinstance(obj, TermTopicMatrix):
        return obj
    if isinstance(obj, pd.DataFrame):
        return TermTopicMatrix.from_dataframe(obj)
    if isinstance(obj, Mapping):
        return TermTopicMatrix.from_mapping(obj)
    raise MalformedInputError(f"Unsupported term-topic matrix type: {type(obj).__name__}")
