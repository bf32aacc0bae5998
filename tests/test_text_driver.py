"""
Test cases for _text_driver.py module (sentence splitting and term vectorization)
"""

import pytest
from collections import Counter

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from topicsum._text_driver import (
    build_count_vectorizer,
    filter_short_sentences,
    split_sentences,
    tokenize,
    vectorize,
    vectorize_all,
)
from topicsum.datatypes import Sentence


def _punkt_installed():
    import nltk
    for resource in ('tokenizers/punkt_tab/english/', 'tokenizers/punkt/english.pickle'):
        try:
            nltk.data.find(resource)
            return True
        except LookupError:
            continue
    return False


class TestSplitSentences:
    """Test sentence segmentation"""

    def test_basic_split(self):
        text = "Castleman disease is rare. It affects lymph nodes. Treatment includes surgery."
        sentences = split_sentences(text)
        assert [s.text for s in sentences] == [
            "Castleman disease is rare.",
            "It affects lymph nodes.",
            "Treatment includes surgery.",
        ]

    def test_indices_follow_document_order(self):
        sentences = split_sentences("One sentence here. Another one there. A third one.")
        assert [s.idx for s in sentences] == list(range(len(sentences)))

    def test_empty_text(self):
        assert split_sentences("") == []

    def test_whitespace_only(self):
        assert split_sentences("   \n\t ") == []

    def test_single_sentence_without_period(self):
        sentences = split_sentences("A single fragment without terminal punctuation")
        assert len(sentences) == 1
        assert sentences[0].text == "A single fragment without terminal punctuation"

    def test_sentences_start_with_empty_counts(self):
        sentences = split_sentences("First sentence. Second sentence.")
        assert all(s.term_counts == Counter() for s in sentences)

    @pytest.mark.skipif(not _punkt_installed(), reason="NLTK Punkt data not installed")
    def test_abbreviation_not_split(self):
        text = "Patients were treated by Dr. Smith at the clinic. Outcomes improved."
        sentences = split_sentences(text)
        assert len(sentences) == 2


class TestTokenize:
    """Test unigram tokenization"""

    def test_lowercase_and_stopwords(self):
        assert tokenize("The Lymph NODES were enlarged") == ["lymph", "nodes", "enlarged"]

    def test_digits_and_punctuation_dropped(self):
        assert tokenize("IL-6 levels rose 42% in 2019") == ["il", "levels", "rose"]

    def test_keep_stopwords(self):
        tokens = tokenize("The nodes were enlarged", remove_stopwords=False)
        assert tokens == ["the", "nodes", "were", "enlarged"]

    def test_single_letter_tokens_dropped(self):
        assert tokenize("a b c lymphoma") == ["lymphoma"]

    def test_accents_kept(self):
        assert tokenize("Sjögren syndrome") == ["sjögren", "syndrome"]

    def test_min_token_len(self):
        assert tokenize("Vitamin D deficiency") == ["vitamin", "deficiency"]
        assert tokenize("Vitamin D deficiency", min_token_len=1) == ["vitamin", "d", "deficiency"]

    def test_vectorizer_shares_rules(self):
        vectorizer = build_count_vectorizer()
        analyzer = vectorizer.build_analyzer()
        text = "Idiopathic multicentric Castleman disease"
        assert analyzer(text) == tokenize(text)


class TestVectorize:
    """Test per-sentence term counting and the length filter"""

    def test_counts(self):
        sentence = vectorize(Sentence(0, "Lymph nodes and lymph vessels"))
        assert sentence.term_counts == Counter({"lymph": 2, "nodes": 1, "vessels": 1})
        assert sentence.n_terms == 4

    def test_vectorize_all_keeps_order(self):
        sentences = vectorize_all([Sentence(0, "Fever and fatigue"), Sentence(1, "Night sweats")])
        assert [s.idx for s in sentences] == [0, 1]
        assert sentences[1].term_counts == Counter({"night": 1, "sweats": 1})

    def test_filter_drops_two_term_sentences(self):
        sentences = vectorize_all([
            Sentence(0, "Fever and fatigue"),             # 2 terms
            Sentence(1, "Fever, fatigue and weight loss"),  # 4 terms
            Sentence(2, "Night sweats persist"),          # 3 terms
        ])
        kept = filter_short_sentences(sentences)
        assert [s.idx for s in kept] == [1, 2]

    def test_filter_custom_threshold(self):
        sentences = vectorize_all([Sentence(0, "Fever and fatigue"), Sentence(1, "Night")])
        assert [s.idx for s in filter_short_sentences(sentences, min_terms=2)] == [0]

    def test_short_tokens_do_not_count_as_terms(self):
        """Single letters and numbers are not terms, so they do not lift a sentence over the filter"""
        sentence = Sentence(0, "Vitamin D deficiency in 42%")
        assert filter_short_sentences(vectorize_all([sentence])) == []
        kept = filter_short_sentences(vectorize_all([Sentence(0, sentence.text)], min_token_len=1))
        assert kept[0].term_counts == Counter({"vitamin": 1, "d": 1, "deficiency": 1})
