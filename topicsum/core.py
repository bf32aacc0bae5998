"""
Core topicsum functionality.

This module provides the TopicSummarizer, which produces extractive summaries by
embedding sentences in a topic-probability space, linking each sentence to its
closest neighbors by Hellinger similarity, and keeping the most central
sentences of the resulting graph.
"""

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd
from tqdm import tqdm

from ._file_driver import load_config, log_print, setup_logger
from ._graph_driver import (
    assemble_summary,
    build_similarity_graph,
    eigenvector_centrality_scores,
    rank_top_n,
)
from ._math_driver import (
    drop_zero_mass,
    embed_sentences,
    hellinger_distance_matrix,
    shared_vocabulary,
    term_distributions,
)
from ._text_driver import filter_short_sentences, split_sentences, vectorize_all
from .corpus import iter_documents
from .datatypes import Document, Sentence, SummaryResult, SummaryStatus
from .exceptions import (
    DegenerateGraphError,
    EmptyDocumentError,
    InsufficientVocabularyError,
    MalformedInputError,
    SummarizerError,
)
from .term_topic_matrix import TermTopicMatrix, coerce_term_topic_matrix


_STATUS_BY_ERROR = {
    EmptyDocumentError: SummaryStatus.EMPTY_DOCUMENT,
    InsufficientVocabularyError: SummaryStatus.INSUFFICIENT_VOCABULARY,
    MalformedInputError: SummaryStatus.MALFORMED_INPUT,
}

DocumentsLike = Union[Iterable[Document], Iterable[Tuple[Hashable, str]], Mapping[Hashable, str], pd.DataFrame]


class TopicSummarizer:
    """
    Extractive summarizer over a shared term-topic matrix.

    Pipeline per document:
    1. Split into indexed sentences (NLTK Punkt).
    2. Count unigram terms per sentence; drop sentences with fewer than min_terms terms.
    3. Embed each sentence in topic space through the shared vocabulary.
    4. Pairwise Hellinger distances between embeddings.
    5. Similarity graph keeping each sentence's top_k_neighbors closest sentences.
    6. Eigenvector centrality; keep the n_sentences most central.
    7. Join them in document order.

    Example Usage:
        summarizer = TopicSummarizer(n_sentences=2)
        result = summarizer.summarize("pmid-1", abstract_text, gamma)
        results = summarizer.summarize_batch(documents, gamma)
    """

    def __init__(self,
                 config: Optional[dict] = None,
                 logger: Optional[logging.Logger] = None,
                 **overrides: Any):
        """
        Args:
            config: Nested configuration dictionary, defaults to load_config()
            logger: Custom logger, creates default if None
            **overrides: Flat keyword overrides (top_k_neighbors, n_sentences, min_terms,
                min_token_len, language, remove_stopwords, max_iter, tol, n_workers, show_progress)
        """
        self.config = config or load_config()
        self.logger = logger or setup_logger()

        summarizer_cfg = self.config.get('summarizer', {})
        centrality_cfg = self.config.get('centrality', {})
        batch_cfg = self.config.get('batch', {})

        self.top_k_neighbors = int(overrides.pop('top_k_neighbors', summarizer_cfg.get('top_k_neighbors', 3)))
        self.n_sentences = int(overrides.pop('n_sentences', summarizer_cfg.get('n_sentences', 2)))
        self.min_terms = int(overrides.pop('min_terms', summarizer_cfg.get('min_terms', 3)))
        self.min_token_len = int(overrides.pop('min_token_len', summarizer_cfg.get('min_token_len', 2)))
        self.language = overrides.pop('language', summarizer_cfg.get('language', 'english'))
        self.remove_stopwords = bool(overrides.pop('remove_stopwords', summarizer_cfg.get('remove_stopwords', True)))
        self.max_iter = int(overrides.pop('max_iter', centrality_cfg.get('max_iter', 1000)))
        self.tol = float(overrides.pop('tol', centrality_cfg.get('tol', 1e-6)))
        self.n_workers = int(overrides.pop('n_workers', batch_cfg.get('n_workers', 1)))
        self.show_progress = bool(overrides.pop('show_progress', batch_cfg.get('show_progress', False)))

        if overrides:
            raise ValueError(f"Unknown summarizer parameters: {sorted(overrides)}")
        for name in ('top_k_neighbors', 'n_sentences', 'min_terms', 'min_token_len', 'n_workers', 'max_iter'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be at least 1, got {getattr(self, name)}")
        if self.tol <= 0:
            raise ValueError(f"tol must be positive, got {self.tol}")

    def get_params(self) -> Dict[str, Any]:
        return {
            'top_k_neighbors': self.top_k_neighbors,
            'n_sentences': self.n_sentences,
            'min_terms': self.min_terms,
            'min_token_len': self.min_token_len,
            'language': self.language,
            'remove_stopwords': self.remove_stopwords,
            'max_iter': self.max_iter,
            'tol': self.tol,
            'n_workers': self.n_workers,
            'show_progress': self.show_progress,
        }

    # ============================================================================
    # Pipeline Stages
    # ============================================================================

    def _eligible_sentences(self, text: str) -> List[Sentence]:
        sentences = split_sentences(text, language=self.language)
        if not sentences:
            raise EmptyDocumentError("No sentences detected")

        sentences = vectorize_all(sentences, remove_stopwords=self.remove_stopwords, min_token_len=self.min_token_len)
        eligible = filter_short_sentences(sentences, min_terms=self.min_terms)
        self.logger.debug(f"{len(eligible)}/{len(sentences)} sentences have at least {self.min_terms} terms")
        if not eligible:
            raise InsufficientVocabularyError(f"No sentence has at least {self.min_terms} terms")
        return eligible

    def _rank(self, sentences: List[Sentence], matrix: TermTopicMatrix) -> Tuple[List[Sentence], List[int]]:
        """Return the embeddable sentences and the selected indices, most central first."""
        vocabulary = shared_vocabulary(sentences, matrix)
        embeddings = embed_sentences(term_distributions(sentences, vocabulary), matrix.restrict(vocabulary))
        embeddings, sentences = drop_zero_mass(embeddings, sentences)

        if not sentences:
            raise InsufficientVocabularyError("No sentence has weight on any topic")
        if len(sentences) < 2:
            raise _Fallback(sentences, "Fewer than 2 eligible sentences")

        divergence = hellinger_distance_matrix(embeddings)
        graph = build_similarity_graph(divergence, k=self.top_k_neighbors, node_ids=[s.idx for s in sentences])
        try:
            scores = eigenvector_centrality_scores(graph, max_iter=self.max_iter, tol=self.tol)
        except DegenerateGraphError as e:
            raise _Fallback(sentences, str(e)) from e

        return sentences, rank_top_n(scores, n=self.n_sentences)

    # ============================================================================
    # Public API
    # ============================================================================

    def summarize(self, doc_id: Hashable, text: str, term_topic_matrix) -> SummaryResult:
        """
        Summarize a single document.

        Args:
            doc_id: Opaque document identifier, echoed in the result
            text: Raw document text
            term_topic_matrix: TermTopicMatrix, {topic: {term: weight}} mapping, or DataFrame

        Returns:
            SummaryResult; failures are reported through its status, never raised
        """
        try:
            if not isinstance(text, str):
                raise MalformedInputError(f"Document text must be a string, got {type(text).__name__}")
            matrix = coerce_term_topic_matrix(term_topic_matrix)
            sentences = self._eligible_sentences(text)
            sentences, selected = self._rank(sentences, matrix)
        except _Fallback as fb:
            selected = tuple(s.idx for s in fb.sentences)
            self.logger.info(f"Document {doc_id!r}: {fb.reason}; returning {len(selected)} sentence(s) verbatim")
            return SummaryResult(
                doc_id=doc_id,
                summary=assemble_summary({s.idx: s.text for s in fb.sentences}, selected),
                status=SummaryStatus.DEGENERATE_GRAPH,
                selected=selected,
                message=fb.reason,
            )
        except SummarizerError as e:
            status = _status_for(e)
            self.logger.warning(f"Document {doc_id!r}: {status.value}: {e}")
            return SummaryResult(doc_id=doc_id, summary="", status=status, message=str(e))

        by_idx = {s.idx: s.text for s in sentences}
        return SummaryResult(
            doc_id=doc_id,
            summary=assemble_summary(by_idx, selected),
            status=SummaryStatus.OK,
            selected=tuple(sorted(selected)),
        )

    def summarize_document(self, document: Document, term_topic_matrix) -> SummaryResult:
        return self.summarize(document.doc_id, document.text, term_topic_matrix)

    def summarize_batch(self, documents: DocumentsLike, term_topic_matrix) -> Dict[Hashable, SummaryResult]:
        """
        Summarize documents independently.

        A failure in one document is reported in its own SummaryResult and does
        not affect the others. Results keep the input order. Items that are not
        a Document or a (doc_id, text) pair are reported as MALFORMED_INPUT under
        their position in the input.

        Args:
            documents: Documents, (doc_id, text) pairs, a {doc_id: text} mapping,
                or a DataFrame with 'doc_id' and 'abstract' columns
            term_topic_matrix: Shared read-only term-topic matrix

        Returns:
            Dict of {doc_id: SummaryResult}
        """
        documents = _as_documents(documents)

        try:
            matrix = coerce_term_topic_matrix(term_topic_matrix)
        except MalformedInputError as e:
            self.logger.error(f"Term-topic matrix rejected, no document can be summarized: {e}")
            return {
                item.doc_id: SummaryResult(item.doc_id, "", SummaryStatus.MALFORMED_INPUT, message=str(e))
                for item in documents
            }

        self.logger.info(f"Summarizing {len(documents)} documents against {matrix}")
        progress = tqdm(total=len(documents), desc="Summarizing", disable=not self.show_progress)

        def run(doc: Union[Document, SummaryResult]) -> SummaryResult:
            try:
                if isinstance(doc, SummaryResult):
                    self.logger.warning(f"Batch item {doc.doc_id}: {doc.message}")
                    return doc
                return self.summarize_document(doc, matrix)
            except Exception as e:
                self.logger.exception(f"Document {doc.doc_id!r}: unexpected error")
                return SummaryResult(doc.doc_id, "", SummaryStatus.MALFORMED_INPUT,
                                     message=f"{type(e).__name__}: {e}")
            finally:
                progress.update(1)

        try:
            if self.n_workers > 1 and len(documents) > 1:
                with ThreadPoolExecutor(max_workers=self.n_workers) as executor:
                    results = list(executor.map(run, documents))
            else:
                results = [run(doc) for doc in documents]
        finally:
            progress.close()

        if len({doc.doc_id for doc in documents}) != len(documents):
            self.logger.warning("Duplicate document ids in batch; later results overwrite earlier ones")

        counts = Counter(r.status.value for r in results)
        log_print(f"Batch completed: {dict(counts)}", level="info", logger=self.logger,
                  also_print=self.show_progress)
        return {r.doc_id: r for r in results}


class _Fallback(Exception):
    """Internal signal: output the given sentences verbatim instead of ranking."""

    def __init__(self, sentences: List[Sentence], reason: str):
        super().__init__(reason)
        self.sentences = sentences
        self.reason = reason


def _status_for(error: SummarizerError) -> SummaryStatus:
    for error_type, status in _STATUS_BY_ERROR.items():
        if isinstance(error, error_type):
            return status
    return SummaryStatus.MALFORMED_INPUT


def _as_documents(documents: DocumentsLike) -> List[Union[Document, SummaryResult]]:
    """
    Normalize batch input to Documents.

    An item that cannot be read as a Document is replaced by its
    MALFORMED_INPUT result, keyed by its position, so the rest of the batch
    still runs.
    """
    if isinstance(documents, pd.DataFrame):
        return list(iter_documents(documents))
    if isinstance(documents, Mapping):
        return [Document(doc_id, text) for doc_id, text in documents.items()]

    converted = []
    for position, item in enumerate(documents):
        try:
            if not isinstance(item, Document):
                doc_id, text = item
                item = Document(doc_id, text)
            hash(item.doc_id)
        except (TypeError, ValueError) as e:
            converted.append(SummaryResult(
                position, "", SummaryStatus.MALFORMED_INPUT,
                message=f"Not a (doc_id, text) pair: {type(e).__name__}: {e}",
            ))
        else:
            converted.append(item)
    return converted


# ============================================================================
# Convenience Functions
# ============================================================================

def summarize(doc_id: Hashable, text: str, term_topic_matrix, **overrides) -> SummaryResult:
    """Summarize one document with a default-configured TopicSummarizer."""
    return TopicSummarizer(**overrides).summarize(doc_id, text, term_topic_matrix)


def summarize_batch(documents: DocumentsLike, term_topic_matrix, **overrides) -> Dict[Hashable, SummaryResult]:
    """Summarize a batch of documents with a default-configured TopicSummarizer."""
    return TopicSummarizer(**overrides).summarize_batch(documents, term_topic_matrix)
