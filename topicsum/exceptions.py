"""
Exceptions raised by the summarization pipeline.

Every stage raises one of these; TopicSummarizer turns them into per-document
SummaryResult markers so that a single bad document never aborts a batch.
"""


class SummarizerError(ValueError):
    """Base class for recoverable, per-document summarization failures."""


class EmptyDocumentError(SummarizerError):
    """No sentences were detected in the document."""


class InsufficientVocabularyError(SummarizerError):
    """The document shares no usable terms with the term-topic matrix."""


class DegenerateGraphError(SummarizerError):
    """The similarity graph cannot be ranked (too few nodes or no convergence)."""


class MalformedInputError(SummarizerError):
    """Input text or term-topic weights are not usable (wrong type, negative or non-finite)."""
