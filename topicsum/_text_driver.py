"""
Sentence splitting and bag-of-words vectorization for topicsum.

This module contains the first two summarization stages: segmenting a document
into indexed sentences, and turning each sentence into unigram term counts.
"""

import logging
from collections import Counter
from functools import lru_cache, partial
from typing import Iterable, List

from nltk.tokenize import PunktSentenceTokenizer, sent_tokenize
from sklearn.feature_extraction.text import CountVectorizer

from .datatypes import Sentence

logger = logging.getLogger(__name__)


# ============================================================================
# Sentence Splitting
# ============================================================================

@lru_cache(maxsize=None)
def get_sentence_tokenizer(language: str = "english"):
    """
    Return a callable text -> list of sentence strings for the given language.

    Uses the trained Punkt model when its data is installed, otherwise an
    untrained Punkt tokenizer (no learned abbreviations).
    """
    try:
        sent_tokenize("Probe sentence.", language=language)
    except LookupError:
        logger.warning(
            f"Punkt model for '{language}' not found; using untrained Punkt tokenizer. "
            f"Run nltk.download('punkt_tab') for abbreviation-aware splitting."
        )
        return PunktSentenceTokenizer().tokenize
    return partial(sent_tokenize, language=language)


def split_sentences(text: str, language: str = "english") -> List[Sentence]:
    """
    Split a document into sentences, indexed by order of appearance.

    Args:
        text: Raw document text
        language: Punkt language name

    Returns:
        List of Sentence with empty term counts; empty for blank text
    """
    if not text or not text.strip():
        return []

    tokenizer = get_sentence_tokenizer(language)
    parts = [part.strip() for part in tokenizer(text)]
    return [Sentence(idx=i, text=part) for i, part in enumerate(p for p in parts if p)]


# ============================================================================
# Term Vectorization
# ============================================================================

TOKEN_PATTERN = r"(?u)\b[^\W\d_]{%d,}\b"


def build_count_vectorizer(remove_stopwords: bool = True, min_token_len: int = 2,
                           ngram_range=(1, 1), **kwargs) -> CountVectorizer:
    """CountVectorizer with the package's tokenization rules (alphabetic tokens, lower-cased)."""
    return CountVectorizer(
        lowercase=True,
        token_pattern=TOKEN_PATTERN % min_token_len,
        stop_words="english" if remove_stopwords else None,
        ngram_range=ngram_range,
        **kwargs
    )


@lru_cache(maxsize=None)
def _analyzer(remove_stopwords: bool, min_token_len: int):
    return build_count_vectorizer(remove_stopwords, min_token_len).build_analyzer()


def tokenize(text: str, remove_stopwords: bool = True, min_token_len: int = 2) -> List[str]:
    """
    Lower-cased alphabetic unigram tokens on word boundaries; no stemming.

    Accented letters are kept as-is so that terms match the term-topic matrix
    verbatim. Digits and tokens shorter than min_token_len never count as terms.
    """
    return _analyzer(remove_stopwords, min_token_len)(str(text))


def vectorize(sentence: Sentence, remove_stopwords: bool = True, min_token_len: int = 2) -> Sentence:
    """Fill sentence.term_counts with raw unigram counts and return the sentence."""
    sentence.term_counts = Counter(
        tokenize(sentence.text, remove_stopwords=remove_stopwords, min_token_len=min_token_len)
    )
    return sentence


def vectorize_all(sentences: Iterable[Sentence], remove_stopwords: bool = True,
                  min_token_len: int = 2) -> List[Sentence]:
    return [vectorize(s, remove_stopwords=remove_stopwords, min_token_len=min_token_len) for s in sentences]


def filter_short_sentences(sentences: Iterable[Sentence], min_terms: int = 3) -> List[Sentence]:
    """Drop sentences with fewer than min_terms terms in total."""
    return [s for s in sentences if s.n_terms >= min_terms]
