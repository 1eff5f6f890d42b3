"""Discussion analysis: runs every scorer over one post and assembles the record."""

import asyncio
import logging
import re
from collections import Counter
from collections.abc import Callable, Sequence
from datetime import datetime

from forum_analyzer.lexicon import (
    OPINION_CUES,
    PROPOSAL_KEYWORDS,
    SOLUTION_CUES,
    STAKEHOLDER_TERMS,
    TYPE_KEYWORDS,
)
from forum_analyzer.models import (
    AnalysisOptions,
    DiscussionAnalysis,
    Platform,
    Post,
    ProposalPotential,
)
from forum_analyzer.scoring import (
    ConsensusEstimator,
    EngagementScorer,
    FixedConsensusEstimator,
    KeyPointExtractor,
    ProposalScorer,
    ProposalTypeClassifier,
    SentimentScorer,
    confidence,
)
from forum_analyzer.text import Tokenizer, split_sentences

logger = logging.getLogger(__name__)

_MENTION = re.compile(r"@(\w+)")
_MAX_PERSPECTIVES = 5
_MAX_SOLUTIONS = 5
_DEFAULT_WORKERS = 8


class AnalysisError(Exception):
    """Raised when a single post cannot be analyzed."""

    def __init__(self, post_id: str, message: str) -> None:
        self.post_id = post_id
        super().__init__(f"[{post_id}] {message}")


def validate_post(post: Post) -> None:
    """Raise AnalysisError if the post is missing anything the scorers need."""
    post_id = post.id or "<no id>"
    if not post.id or not post.id.strip():
        raise AnalysisError(post_id, "missing id")
    if not post.content or not post.content.strip():
        raise AnalysisError(post_id, "empty content")
    if not post.author or not post.author.strip():
        raise AnalysisError(post_id, "missing author")
    if not post.url or not post.url.strip():
        raise AnalysisError(post_id, "missing url")
    if not isinstance(post.timestamp, datetime):
        raise AnalysisError(post_id, "missing timestamp")
    if not isinstance(post.platform, Platform):
        raise AnalysisError(post_id, f"unknown platform: {post.platform!r}")
    if post.replies < 0 or post.views < 0 or any(r.count < 0 for r in post.reactions):
        raise AnalysisError(post_id, "negative interaction count")


class DiscussionAnalyzer:
    """Composes the scorers into one DiscussionAnalysis per post.

    All collaborators are passed in (or built with defaults) at construction;
    nothing is shared through module globals. analyze() is a pure function of
    its post, so the same analyzer can be used from many threads at once.
    """

    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        proposal_scorer: ProposalScorer | None = None,
        sentiment_scorer: SentimentScorer | None = None,
        engagement_scorer: EngagementScorer | None = None,
        classifier: ProposalTypeClassifier | None = None,
        key_points: KeyPointExtractor | None = None,
        consensus: ConsensusEstimator | None = None,
    ) -> None:
        self.tokenizer = tokenizer or Tokenizer()
        self.proposal_scorer = proposal_scorer or ProposalScorer()
        self.sentiment_scorer = sentiment_scorer or SentimentScorer()
        self.engagement_scorer = engagement_scorer or EngagementScorer()
        self.classifier = classifier or ProposalTypeClassifier()
        self.key_points = key_points or KeyPointExtractor(self.tokenizer)
        self.consensus = consensus or FixedConsensusEstimator()

    def analyze(self, post: Post) -> DiscussionAnalysis:
        """Analyze one post.

        Raises:
            AnalysisError: If the post is malformed.
        """
        validate_post(post)

        tokens = self.tokenizer.tokenize(post.content)
        proposal_score = self.proposal_scorer.score(tokens)
        engagement = self.engagement_scorer.engagement(post)
        sentences = split_sentences(post.content)

        analysis = DiscussionAnalysis(
            post=post,
            sentiment=self.sentiment_scorer.score(tokens),
            engagement=engagement,
            proposal_potential=ProposalPotential(
                score=proposal_score,
                confidence=confidence(proposal_score, engagement.score),
                type=self.classifier.classify(tokens),
                key_points=self.key_points.extract(post.content),
            ),
            consensus=self.consensus.estimate(post),
            topics=self._topics(tokens),
            perspectives=self._sentences_with(sentences, OPINION_CUES, _MAX_PERSPECTIVES),
            suggested_solutions=self._sentences_with(sentences, SOLUTION_CUES, _MAX_SOLUTIONS),
            stakeholders=self._stakeholders(post, tokens),
        )
        logger.debug(
            "Analyzed %s: potential=%.3f type=%s sentiment=%.3f engagement=%.3f",
            post.id,
            proposal_score,
            analysis.proposal_potential.type.value,
            analysis.sentiment.score,
            engagement.score,
        )
        return analysis

    @staticmethod
    def _topics(tokens: Sequence[str]) -> tuple[str, ...]:
        """Vocabulary hits ranked by count, ties by first appearance."""
        vocabulary = set(PROPOSAL_KEYWORDS)
        for keywords in TYPE_KEYWORDS.values():
            vocabulary.update(keywords)
        # Counter keeps first-seen order and sorted() is stable
        hits = Counter(t for t in tokens if t in vocabulary)
        return tuple(sorted(hits, key=lambda t: -hits[t]))

    def _sentences_with(
        self, sentences: Sequence[str], cues: frozenset[str], limit: int
    ) -> tuple[str, ...]:
        matched = [s for s in sentences if cues.intersection(self.tokenizer.tokenize(s))]
        return tuple(matched[:limit])

    @staticmethod
    def _stakeholders(post: Post, tokens: Sequence[str]) -> tuple[str, ...]:
        names = [post.author]
        names.extend(f"@{m}" for m in _MENTION.findall(post.content))
        present = set(tokens)
        names.extend(term for term in STAKEHOLDER_TERMS if term in present)
        return tuple(dict.fromkeys(names))


def is_proposal_candidate(analysis: DiscussionAnalysis, options: AnalysisOptions) -> bool:
    """Caller-side gate for draft generation: potential above the threshold
    and engagement at or above the minimum."""
    return (
        analysis.proposal_potential.score > options.proposal_threshold
        and analysis.engagement.score >= options.min_engagement_threshold
    )


async def _analyze_one(
    analyzer: DiscussionAnalyzer,
    post: Post,
    semaphore: asyncio.Semaphore,
) -> DiscussionAnalysis | AnalysisError:
    """Analyze one post in a worker thread. Never raises, returns AnalysisError instead."""
    async with semaphore:
        try:
            return await asyncio.to_thread(analyzer.analyze, post)
        except AnalysisError as exc:
            logger.warning("Excluding post: %s", exc)
            return exc
        except Exception as exc:
            err = AnalysisError(post.id or "<no id>", f"Unexpected error: {exc}")
            logger.warning("Excluding post after unexpected failure: %s", err)
            return err


async def analyze_posts(
    posts: Sequence[Post],
    analyzer: DiscussionAnalyzer,
    max_workers: int = _DEFAULT_WORKERS,
    on_post_complete: Callable[[DiscussionAnalysis | AnalysisError], None] | None = None,
) -> list[DiscussionAnalysis | AnalysisError]:
    """Analyze posts concurrently with at most max_workers in flight.

    Returns:
        One entry per post, in input order: the analysis, or the AnalysisError
        that excluded the post.
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    semaphore = asyncio.Semaphore(max_workers)

    async def run(post: Post) -> DiscussionAnalysis | AnalysisError:
        result = await _analyze_one(analyzer, post, semaphore)
        if on_post_complete:
            on_post_complete(result)
        return result

    logger.info("Analyzing %d posts with up to %d workers", len(posts), max_workers)
    results = await asyncio.gather(*(run(p) for p in posts))

    failed = sum(1 for r in results if isinstance(r, AnalysisError))
    logger.info("Analysis complete: %d/%d posts analyzed", len(results) - failed, len(results))
    return list(results)
