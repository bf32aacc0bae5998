"""
Typed records passed between the summarization stages.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Hashable, Optional, Tuple


@dataclass(frozen=True)
class Document:
    doc_id: Hashable
    text: Optional[str]


@dataclass
class Sentence:
    idx: int  # position in the source document, 0-based
    text: str
    term_counts: Counter = field(default_factory=Counter)

    @property
    def n_terms(self) -> int:
        return sum(self.term_counts.values())


class SummaryStatus(Enum):
    """Outcome of summarizing one document"""
    OK = "ok"
    DEGENERATE_GRAPH = "degenerate_graph"
    EMPTY_DOCUMENT = "empty_document"
    INSUFFICIENT_VOCABULARY = "insufficient_vocabulary"
    MALFORMED_INPUT = "malformed_input"


_FAILED_STATUSES = (
    SummaryStatus.EMPTY_DOCUMENT,
    SummaryStatus.INSUFFICIENT_VOCABULARY,
    SummaryStatus.MALFORMED_INPUT,
)


@dataclass(frozen=True)
class SummaryResult:
    """
    Summary of one document, or the marker explaining why there is none.

    DEGENERATE_GRAPH results still carry a summary: the eligible sentences
    verbatim in document order.
    """
    doc_id: Hashable
    summary: str
    status: SummaryStatus = SummaryStatus.OK
    selected: Tuple[int, ...] = ()
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is SummaryStatus.OK

    @property
    def failed(self) -> bool:
        return self.status in _FAILED_STATUSES

    def __str__(self):
        return self.summary
