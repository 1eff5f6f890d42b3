"""Per-post scorers: proposal potential, sentiment, engagement, type, key points.

Each scorer is a small object built once with its vocabulary and then only
read from, so a single instance can serve concurrent analyses.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence

from forum_analyzer.lexicon import (
    IMPORTANCE_KEYWORDS,
    PROPOSAL_KEYWORDS,
    SENTIMENT_BOUNDS,
    SENTIMENT_LEXICON,
    TYPE_KEYWORDS,
)
from forum_analyzer.models import (
    Consensus,
    Engagement,
    Post,
    ProposalType,
    Sentiment,
    SentimentLabel,
)
from forum_analyzer.text import TfIdf, Tokenizer, split_sentences

logger = logging.getLogger(__name__)

_LABEL_THRESHOLD = 0.1
_KEY_POINT_LIMIT = 3


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class ProposalScorer:
    """TF-IDF weighted match of a post against the governance vocabulary."""

    def __init__(self, keywords: Sequence[str] = PROPOSAL_KEYWORDS) -> None:
        self.keywords = tuple(keywords)

    def score(self, tokens: Sequence[str]) -> float:
        if not self.keywords:
            return 0.0
        index = TfIdf([tokens])
        raw = index.score(self.keywords, 0)
        return _clamp(raw / (2 * len(self.keywords)), 0.0, 1.0)


class SentimentScorer:
    """Lexicon polarity, normalized from the lexicon bounds into [-1, 1]."""

    def __init__(
        self,
        lexicon: Mapping[str, int] = SENTIMENT_LEXICON,
        bounds: tuple[float, float] = SENTIMENT_BOUNDS,
    ) -> None:
        self.lexicon = lexicon
        self.low, self.high = bounds

    def raw(self, tokens: Sequence[str]) -> float:
        """Mean polarity per token, which stays within the lexicon bounds."""
        if not tokens:
            return 0.0
        total = sum(self.lexicon.get(t, 0) for t in tokens)
        return _clamp(total / len(tokens), self.low, self.high)

    def normalize(self, raw: float) -> float:
        return 2 * (raw - self.low) / (self.high - self.low) - 1

    def score(self, tokens: Sequence[str]) -> Sentiment:
        value = self.normalize(self.raw(tokens))
        return Sentiment(score=value, label=label_for(value))


def label_for(score: float) -> SentimentLabel:
    """positive above 0.1, negative below -0.1, neutral otherwise (bounds included)."""
    if score > _LABEL_THRESHOLD:
        return SentimentLabel.POSITIVE
    if score < -_LABEL_THRESHOLD:
        return SentimentLabel.NEGATIVE
    return SentimentLabel.NEUTRAL


class ParticipantCounter:
    """Lower-bound count of distinct participants in a discussion.

    Counts the author plus whatever participant handles the fetcher attached
    to the post. Replies and reactions are not traced back to people, so
    without that list the answer is always 1.
    """

    def count(self, post: Post) -> int:
        return len({post.author, *post.participants})


class EngagementScorer:
    REPLY_WEIGHT = 2.0
    VIEW_DIVISOR = 100.0
    REACTION_WEIGHT = 1.5
    SCALE = 1000.0

    def __init__(self, participants: ParticipantCounter | None = None) -> None:
        self.participants = participants or ParticipantCounter()

    def score(self, post: Post) -> float:
        """Weighted replies, views and reactions scaled into [0, 1]."""
        base = (
            post.replies * self.REPLY_WEIGHT
            + post.views / self.VIEW_DIVISOR
            + post.reaction_count * self.REACTION_WEIGHT
        )
        return _clamp(base / self.SCALE, 0.0, 1.0)

    @staticmethod
    def total_interactions(post: Post) -> int:
        # The post itself counts as one interaction.
        return 1 + post.replies + post.reaction_count

    def engagement(self, post: Post) -> Engagement:
        total = self.total_interactions(post)
        # every participant accounts for at least one interaction
        unique = min(self.participants.count(post), total)
        rate = unique / total if total > 0 else 0.0
        return Engagement(
            participation_rate=rate,
            unique_participants=unique,
            total_interactions=total,
            score=self.score(post),
        )


class ProposalTypeClassifier:
    """Keyword-bucket vote. First bucket wins a tie; no hits means OTHER."""

    def __init__(
        self, buckets: Mapping[ProposalType, Sequence[str]] = TYPE_KEYWORDS
    ) -> None:
        self.buckets = buckets

    def counts(self, tokens: Sequence[str]) -> dict[ProposalType, int]:
        return {
            kind: sum(tokens.count(keyword) for keyword in keywords)
            for kind, keywords in self.buckets.items()
        }

    def classify(self, tokens: Sequence[str]) -> ProposalType:
        best, best_count = ProposalType.OTHER, 0
        for kind, count in self.counts(tokens).items():
            if count > best_count:
                best, best_count = kind, count
        return best


class KeyPointExtractor:
    """Pick the sentences that carry the most proposal/importance vocabulary."""

    def __init__(
        self,
        tokenizer: Tokenizer,
        keywords: Sequence[str] = PROPOSAL_KEYWORDS + IMPORTANCE_KEYWORDS,
        limit: int = _KEY_POINT_LIMIT,
    ) -> None:
        self.tokenizer = tokenizer
        self.keywords = tuple(dict.fromkeys(keywords))
        self.limit = limit

    def extract(self, content: str) -> tuple[str, ...]:
        sentences = split_sentences(content)
        if not sentences:
            return ()
        index = TfIdf(self.tokenizer.tokenize(s) for s in sentences)
        scored = [(index.score(self.keywords, i), s) for i, s in enumerate(sentences)]
        # sorted() is stable, so equal scores keep text order
        ranked = sorted(scored, key=lambda pair: pair[0], reverse=True)
        return tuple(s for _, s in ranked[: self.limit])


class ConsensusEstimator(ABC):
    """Interface for consensus estimation over one discussion."""

    @abstractmethod
    def estimate(self, post: Post) -> Consensus:
        """Return a level in [0, 1] and optional majority/dissenting text."""
        ...


class FixedConsensusEstimator(ConsensusEstimator):
    """Stub estimator: every discussion gets a neutral 0.5 and no opinion text.

    Reply and reaction data is not available at this level, so there is
    nothing to estimate from yet. Replace with a real estimator by passing
    another ConsensusEstimator to DiscussionAnalyzer.
    """

    LEVEL = 0.5

    def estimate(self, post: Post) -> Consensus:
        return Consensus(level=self.LEVEL)


def confidence(proposal_score: float, engagement_score: float) -> float:
    """Equal-weight blend of proposal potential and engagement."""
    return _clamp((proposal_score + engagement_score) / 2, 0.0, 1.0)
