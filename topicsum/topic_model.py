"""
Topic model used to produce the term-topic matrix consumed by the summarizer.

Fitting is a collaborator of the summarization core, not part of it: any model
that yields non-negative topic x term weights can be wrapped in a
TermTopicMatrix. LDA via scikit-learn is the default.
"""

import numpy as np
from sklearn.decomposition import LatentDirichletAllocation
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ._text_driver import build_count_vectorizer
from .term_topic_matrix import TermTopicMatrix


class LDATopicModel:
    """
    LDA topic model implementation using scikit-learn.

    Documents are tokenized with the same rules as the summarizer's term
    vectorizer, optionally extended with bigrams. Bigram columns never match a
    sentence term during embedding and are dropped there.
    """

    def __init__(self, n_topics: int = 10, doc_topic_prior: Optional[float] = None,
                 topic_word_prior: Optional[float] = None, random_state: int = 42,
                 max_iter: int = 10, learning_method: str = 'batch', bigrams: bool = False,
                 remove_stopwords: bool = True, min_df: int = 1, **kwargs):
        self.n_topics = n_topics
        self.doc_topic_prior = doc_topic_prior  # alpha; None means 1 / n_topics
        self.topic_word_prior = topic_word_prior  # eta; None means 1 / n_topics
        self.random_state = random_state
        self.max_iter = max_iter
        self.learning_method = learning_method
        self.bigrams = bigrams
        self.remove_stopwords = remove_stopwords
        self.min_df = min_df
        self.model = None
        self.vectorizer = None
        self.dtm = None
        self.kwargs = kwargs

    def fit(self, documents: Sequence[str]) -> 'LDATopicModel':
        """
        Fit the topic model to a corpus of raw document strings.

        Returns:
            Self for method chaining
        """
        self.vectorizer = build_count_vectorizer(
            remove_stopwords=self.remove_stopwords,
            ngram_range=(1, 2) if self.bigrams else (1, 1),
            min_df=self.min_df,
        )
        try:
            self.dtm = self.vectorizer.fit_transform(documents)
        except ValueError as e:
            raise ValueError(f"Cannot fit a topic model on documents without terms: {e}") from e

        self.model = LatentDirichletAllocation(
            n_components=self.n_topics,
            doc_topic_prior=self.doc_topic_prior,
            topic_word_prior=self.topic_word_prior,
            random_state=self.random_state,
            max_iter=self.max_iter,
            learning_method=self.learning_method,
            **self.kwargs
        )
        self.model.fit(self.dtm)
        return self

    def _check_fitted(self):
        if self.model is None:
            raise ValueError("Model not fitted. Call fit() first.")

    def get_vocabulary(self) -> List[str]:
        self._check_fitted()
        return [str(t) for t in self.vectorizer.get_feature_names_out()]

    def get_topic_word_distributions(self) -> np.ndarray:
        """Topic-word distributions (phi), shape (n_topics, n_terms); rows sum to 1."""
        self._check_fitted()
        components = np.asarray(self.model.components_, dtype=np.float64)
        return components / components.sum(axis=1, keepdims=True)

    def get_document_topic_distributions(self) -> np.ndarray:
        """Document-topic distributions (theta), shape (n_documents, n_topics)."""
        self._check_fitted()
        return self.model.transform(self.dtm)

    def get_term_topic_matrix(self, kind: str = "gamma") -> TermTopicMatrix:
        """
        Term-topic matrix for the summarizer.

        Args:
            kind: 'phi' for P(term | topic), or 'gamma' for P(topic | term) by
                Bayes' rule with topic prevalence from the mean document-topic
                distribution

        Returns:
            TermTopicMatrix over the model's vocabulary
        """
        phi = self.get_topic_word_distributions()
        if kind == "phi":
            weights = phi
        elif kind == "gamma":
            p_topic = self.get_document_topic_distributions().mean(axis=0)
            joint = phi * p_topic[:, np.newaxis]
            totals = joint.sum(axis=0, keepdims=True)
            weights = np.divide(joint, totals, out=np.zeros_like(joint), where=totals > 0)
        else:
            raise ValueError(f"Unknown term-topic matrix kind: {kind}")

        return TermTopicMatrix(weights, self.get_vocabulary())

    def get_num_topics(self) -> int:
        return self.n_topics

    def get_model_params(self) -> Dict[str, Any]:
        return {
            'model_type': 'LDA_sklearn',
            'n_topics': self.n_topics,
            'doc_topic_prior': self.doc_topic_prior,
            'topic_word_prior': self.topic_word_prior,
            'random_state': self.random_state,
            'max_iter': self.max_iter,
            'learning_method': self.learning_method,
            'bigrams': self.bigrams,
            **self.kwargs
        }

    def get_topic_terms(self, topic_id: int, topn: int = 10) -> List[Tuple[str, float]]:
        """Top (term, probability) pairs for a topic."""
        phi = self.get_topic_word_distributions()
        if topic_id < 0 or topic_id >= self.n_topics:
            raise ValueError("Topic number out of range")
        vocab = self.get_vocabulary()
        top = np.argsort(-phi[topic_id], kind="stable")[:topn]
        return [(vocab[j], float(phi[topic_id, j])) for j in top]


def create_topic_model(model_type: str = 'LDA', **kwargs) -> LDATopicModel:
    """
    Factory function to create topic model instances.

    Args:
        model_type: Type of topic model ('LDA')
        **kwargs: Model-specific parameters

    Returns:
        Topic model instance
    """
    if model_type.upper() == 'LDA':
        return LDATopicModel(**kwargs)
    raise ValueError(f"Unknown topic model type: {model_type}")


def topic_model_from_config(config: Optional[dict] = None) -> LDATopicModel:
    """Build the topic model described by the 'topic_model' config section."""
    params = dict((config or {}).get('topic_model', {}))
    return create_topic_model(params.pop('model_type', 'LDA'), **params)
