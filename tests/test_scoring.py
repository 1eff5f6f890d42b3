"""Tests for forum_analyzer/scoring.py."""

import math

import pytest

from forum_analyzer.lexicon import PROPOSAL_KEYWORDS
from forum_analyzer.models import Consensus, ProposalType, Reaction, SentimentLabel
from forum_analyzer.scoring import (
    EngagementScorer,
    FixedConsensusEstimator,
    KeyPointExtractor,
    ParticipantCounter,
    ProposalScorer,
    ProposalTypeClassifier,
    SentimentScorer,
    confidence,
    label_for,
)
from forum_analyzer.text import Tokenizer
from tests.conftest import make_post

_IDF_ONE_DOC = 1 + math.log(0.5)


# --- proposal potential -------------------------------------------------------

def test_proposal_score_single_keyword():
    score = ProposalScorer().score(["please", "fund", "this"])
    assert score == pytest.approx(_IDF_ONE_DOC / (2 * len(PROPOSAL_KEYWORDS)))


def test_proposal_score_no_keywords_is_zero():
    assert ProposalScorer().score(["hello", "world"]) == 0.0
    assert ProposalScorer().score([]) == 0.0


def test_proposal_score_is_clamped_to_one():
    scorer = ProposalScorer(keywords=("vote",))
    assert scorer.score(["vote"] * 50) == 1.0


def test_proposal_score_rewards_distinct_terms():
    scorer = ProposalScorer()
    one_term = scorer.score(["budget", "budget"])
    two_terms = scorer.score(["budget", "vote", "budget"])
    assert two_terms > one_term


# --- sentiment ------------------------------------------------------------------

@pytest.mark.parametrize(
    "score, label",
    [
        (0.1, SentimentLabel.NEUTRAL),
        (-0.1, SentimentLabel.NEUTRAL),
        (0.0, SentimentLabel.NEUTRAL),
        (0.1000001, SentimentLabel.POSITIVE),
        (-0.1000001, SentimentLabel.NEGATIVE),
        (1.0, SentimentLabel.POSITIVE),
        (-1.0, SentimentLabel.NEGATIVE),
    ],
)
def test_label_boundaries(score, label):
    assert label_for(score) is label


def test_sentiment_positive_word():
    result = SentimentScorer().score(["good"])
    # AFINN good = 3 -> 2 * (3 + 5) / 10 - 1
    assert result.score == pytest.approx(0.6)
    assert result.label is SentimentLabel.POSITIVE


def test_sentiment_negative_word():
    result = SentimentScorer().score(["bad"])
    assert result.score == pytest.approx(-0.6)
    assert result.label is SentimentLabel.NEGATIVE


def test_sentiment_no_tokens_is_neutral():
    result = SentimentScorer().score([])
    assert result.score == 0.0
    assert result.label is SentimentLabel.NEUTRAL


def test_sentiment_is_averaged_over_tokens():
    result = SentimentScorer().score(["good", "the", "plan", "is"])
    # 3 / 4 tokens = 0.75 -> 2 * 5.75 / 10 - 1
    assert result.score == pytest.approx(0.15)


def test_sentiment_stays_in_range_with_extreme_lexicon():
    scorer = SentimentScorer(lexicon={"wow": 50})
    result = scorer.score(["wow", "wow"])
    assert result.score == pytest.approx(1.0)
    assert -1.0 <= scorer.score(["meh"]).score <= 1.0


# --- engagement -----------------------------------------------------------------

def test_engagement_score_weights():
    post = make_post(replies=10, views=500, reactions=(Reaction("like", 3), Reaction("heart", 2)))
    # 10*2 + 500/100 + 5*1.5 = 32.5 -> / 1000
    assert EngagementScorer().score(post) == pytest.approx(0.0325)


def test_engagement_score_is_clamped():
    post = make_post(replies=1000)
    assert EngagementScorer().score(post) == 1.0


def test_engagement_for_silent_post():
    engagement = EngagementScorer().engagement(make_post())
    assert engagement.score == 0.0
    assert engagement.total_interactions == 1
    assert engagement.unique_participants == 1
    assert engagement.participation_rate == 1.0


def test_engagement_participation_rate():
    post = make_post(replies=10, reactions=(Reaction("like", 5),))
    engagement = EngagementScorer().engagement(post)
    assert engagement.total_interactions == 16
    assert engagement.participation_rate == pytest.approx(1 / 16)


def test_participant_counter_uses_supplied_participants():
    post = make_post(author="alice", participants=("bob", "alice", "carol"))
    assert ParticipantCounter().count(post) == 3


def test_participants_capped_at_interactions():
    engagement = EngagementScorer().engagement(make_post(participants=("b", "c", "d")))
    assert engagement.total_interactions == 1
    assert engagement.unique_participants == 1
    assert engagement.participation_rate == 1.0


def test_participants_below_interactions_are_kept():
    post = make_post(participants=("b", "c"), replies=4)
    engagement = EngagementScorer().engagement(post)
    assert engagement.unique_participants == 3
    assert engagement.participation_rate == pytest.approx(3 / 5)


def test_participant_counter_lower_bound_is_author():
    assert ParticipantCounter().count(make_post()) == 1


# --- classification -------------------------------------------------------------

def test_classify_tie_prefers_governance_over_treasury():
    assert ProposalTypeClassifier().classify(["governance", "treasury"]) is ProposalType.GOVERNANCE


def test_classify_strict_winner():
    tokens = ["treasury", "budget", "vote"]
    assert ProposalTypeClassifier().classify(tokens) is ProposalType.TREASURY


def test_classify_social():
    tokens = ["code", "community", "culture"]
    assert ProposalTypeClassifier().classify(tokens) is ProposalType.SOCIAL


def test_classify_no_hits_is_other():
    assert ProposalTypeClassifier().classify(["hello", "there"]) is ProposalType.OTHER
    assert ProposalTypeClassifier().classify([]) is ProposalType.OTHER


def test_classify_counts_exact_tokens_only():
    # "funding" is not "fund", "voting" is not "vote"
    assert ProposalTypeClassifier().classify(["funding", "voting"]) is ProposalType.OTHER


# --- key points -----------------------------------------------------------------

def test_key_points_ranked_with_stable_ties():
    content = (
        "First sentence here. The treasury budget needs a vote! "
        "Random words? Another urgent governance proposal."
    )
    points = KeyPointExtractor(Tokenizer()).extract(content)
    assert points == (
        "The treasury budget needs a vote",
        "Another urgent governance proposal",
        "First sentence here",
    )


def test_key_points_short_content_returns_every_sentence():
    points = KeyPointExtractor(Tokenizer()).extract("Hello there. General chat!")
    assert points == ("Hello there", "General chat")


def test_key_points_never_more_than_three():
    content = "Vote now. Fund it. Budget please. Grant more. Policy change."
    assert len(KeyPointExtractor(Tokenizer()).extract(content)) == 3


def test_key_points_empty_when_no_sentences():
    assert KeyPointExtractor(Tokenizer()).extract("?!...") == ()


# --- consensus / confidence -----------------------------------------------------

def test_fixed_consensus_is_neutral():
    consensus = FixedConsensusEstimator().estimate(make_post())
    assert consensus == Consensus(level=0.5)
    assert consensus.majority_opinion is None
    assert consensus.dissenting is None


def test_confidence_is_mean_of_scores():
    assert confidence(0.6, 0.2) == pytest.approx(0.4)
    assert confidence(0.0, 0.0) == 0.0
