"""Shared pytest fixtures."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from config.config_loader import AppConfig, DefaultsConfig
from forum_analyzer.analysis import DiscussionAnalyzer
from forum_analyzer.models import (
    AnalysisOptions,
    Consensus,
    DiscussionAnalysis,
    Engagement,
    GeneratorOptions,
    Platform,
    Post,
    ProposalPotential,
    ProposalType,
    Reaction,
    Sentiment,
    SentimentLabel,
)
from forum_analyzer.proposal import ProposalGenerator

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

TREASURY_CONTENT = (
    "We should increase the treasury grant budget for community funding. "
    "This is urgent and critical."
)


def make_post(**overrides) -> Post:
    """Post with sensible defaults; any field can be overridden."""
    fields = dict(
        id="post-1",
        title="Treasury grants",
        content=TREASURY_CONTENT,
        author="alice",
        timestamp=datetime(2024, 4, 30, 9, 30, tzinfo=timezone.utc),
        url="https://forum.example.org/t/treasury-grants/1",
        platform=Platform.DISCOURSE,
    )
    fields.update(overrides)
    return Post(**fields)


def make_analysis(
    post: Post | None = None,
    kind: ProposalType = ProposalType.GOVERNANCE,
    topics: tuple[str, ...] = ("governance", "vote"),
    key_points: tuple[str, ...] = ("Let us vote on the new policy",),
    **overrides,
) -> DiscussionAnalysis:
    """Hand-built analysis, for tests that should not depend on the scorers."""
    fields = dict(
        post=post or make_post(),
        sentiment=Sentiment(score=0.2, label=SentimentLabel.POSITIVE),
        engagement=Engagement(participation_rate=0.25, unique_participants=1, total_interactions=4, score=0.05),
        proposal_potential=ProposalPotential(score=0.7, confidence=0.375, type=kind, key_points=key_points),
        consensus=Consensus(level=0.5),
        topics=topics,
        perspectives=("I think we need a vote",),
        suggested_solutions=("We should hold a vote",),
        stakeholders=("alice", "community"),
    )
    fields.update(overrides)
    return DiscussionAnalysis(**fields)


@pytest.fixture
def sample_post() -> Post:
    return make_post()


@pytest.fixture
def busy_post() -> Post:
    return make_post(
        id="post-2",
        replies=10,
        views=500,
        reactions=(Reaction("like", 3), Reaction("heart", 2)),
    )


@pytest.fixture
def analyzer() -> DiscussionAnalyzer:
    return DiscussionAnalyzer()


@pytest.fixture
def generator() -> ProposalGenerator:
    return ProposalGenerator(clock=lambda: FIXED_NOW)


@pytest.fixture
def treasury_analysis(analyzer: DiscussionAnalyzer, sample_post: Post) -> DiscussionAnalysis:
    return analyzer.analyze(sample_post)


@pytest.fixture
def sample_app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        defaults=DefaultsConfig(max_workers=2, output_dir=tmp_path / "output", inbox_dir=tmp_path / "inbox"),
        analysis=AnalysisOptions(proposal_threshold=0.0),
        generator=GeneratorOptions(),
    )
