"""Tokenizing, sentence splitting and a small TF-IDF index."""

import math
import re
from collections import Counter
from collections.abc import Iterable, Sequence

_NON_WORD = re.compile(r"[^\w]+")
_SENTENCE_END = re.compile(r"[.!?]+")


class Tokenizer:
    """Lower-cases text and splits it on runs of non-word characters.

    Holds no state, so one instance can be shared across threads.
    """

    def tokenize(self, text: str) -> list[str]:
        return [t for t in _NON_WORD.split(text.lower()) if t]


def split_sentences(text: str) -> list[str]:
    """Split on terminal punctuation, dropping empty fragments.

    Sentences come back stripped and without their terminal punctuation.
    """
    return [s.strip() for s in _SENTENCE_END.split(text) if s.strip()]


class TfIdf:
    """Term frequency / inverse document frequency over token lists.

    tf is the raw count of a term in one document and
    idf = 1 + ln(N / (1 + df)), N being the number of documents and df the
    number of documents containing the term. With a single document every
    present term gets the same idf, so scores reward distinct terms more than
    repetition of one term.
    """

    def __init__(self, documents: Iterable[Sequence[str]] = ()) -> None:
        self._counts: list[Counter[str]] = []
        for doc in documents:
            self.add_document(doc)

    def __len__(self) -> int:
        return len(self._counts)

    def add_document(self, tokens: Sequence[str]) -> int:
        """Add a document and return its index."""
        self._counts.append(Counter(tokens))
        return len(self._counts) - 1

    def idf(self, term: str) -> float:
        if not self._counts:
            return 0.0
        df = sum(1 for counts in self._counts if term in counts)
        return 1 + math.log(len(self._counts) / (1 + df))

    def tfidf(self, term: str, doc_index: int) -> float:
        tf = self._counts[doc_index][term]
        if tf == 0:
            return 0.0
        return tf * self.idf(term)

    def score(self, terms: Iterable[str], doc_index: int) -> float:
        """Sum of tfidf over terms for one document."""
        return sum(self.tfidf(term, doc_index) for term in terms)
