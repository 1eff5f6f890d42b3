"""Pure dataclasses and enums for the forum analysis pipeline. No logic, no deps."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Platform(str, Enum):
    DISCOURSE = "discourse"
    DISCORD = "discord"
    COMMONWEALTH = "commonwealth"
    TWITTER_SPACES = "twitter_spaces"

    @classmethod
    def _missing_(cls, value: object) -> "Platform | None":
        # Accept "Discourse", "twitter-spaces", ...
        if isinstance(value, str):
            normalized = value.strip().lower().replace("-", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class ProposalType(str, Enum):
    # Declaration order is the tie-break order for classification.
    GOVERNANCE = "governance"
    TREASURY = "treasury"
    TECHNICAL = "technical"
    SOCIAL = "social"
    OTHER = "other"


class SentimentLabel(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class ProposalStatus(str, Enum):
    DRAFT = "draft"
    TEMPERATURE_CHECK = "temperature_check"
    PROPOSAL = "proposal"


@dataclass(frozen=True)
class Reaction:
    kind: str
    count: int


@dataclass(frozen=True)
class Post:
    id: str
    content: str
    author: str
    timestamp: datetime
    url: str
    platform: Platform
    title: str | None = None
    replies: int = 0
    views: int = 0
    reactions: tuple[Reaction, ...] = ()
    participants: tuple[str, ...] = ()  # extra participant handles, when the fetcher has them

    @property
    def reaction_count(self) -> int:
        return sum(r.count for r in self.reactions)


@dataclass(frozen=True)
class Sentiment:
    score: float           # [-1, 1]
    label: SentimentLabel


@dataclass(frozen=True)
class Engagement:
    participation_rate: float
    unique_participants: int
    total_interactions: int
    score: float = 0.0     # normalized engagement score, [0, 1]


@dataclass(frozen=True)
class ProposalPotential:
    score: float           # [0, 1]
    confidence: float      # [0, 1]
    type: ProposalType
    key_points: tuple[str, ...] = ()


@dataclass(frozen=True)
class Consensus:
    level: float           # [0, 1]
    majority_opinion: str | None = None
    dissenting: str | None = None


@dataclass(frozen=True)
class DiscussionAnalysis:
    post: Post
    sentiment: Sentiment
    engagement: Engagement
    proposal_potential: ProposalPotential
    consensus: Consensus
    topics: tuple[str, ...] = ()
    perspectives: tuple[str, ...] = ()
    suggested_solutions: tuple[str, ...] = ()
    stakeholders: tuple[str, ...] = ()

    @property
    def key_points(self) -> tuple[str, ...]:
        return self.proposal_potential.key_points


@dataclass(frozen=True)
class ProposalSection:
    title: str
    content: str


@dataclass(frozen=True)
class TemperatureCheckPoll:
    title: str
    description: str
    options: tuple[str, ...]
    duration: int          # days
    threshold: float       # minimum participation ratio


@dataclass(frozen=True)
class EstimatedImpact:
    technical: float
    social: float
    economic: float


@dataclass(frozen=True)
class EngagementSnapshot:
    participation_rate: float
    unique_participants: int
    total_interactions: int


@dataclass(frozen=True)
class ProposalMetadata:
    source: str
    platform: Platform
    timestamp: datetime
    author: str
    tags: tuple[str, ...]
    engagement: EngagementSnapshot


@dataclass(frozen=True)
class ProposalDraft:
    title: str
    author: str
    created_at: datetime
    status: ProposalStatus
    sections: tuple[ProposalSection, ...]
    source_discussions: tuple[str, ...]
    tags: tuple[str, ...]
    estimated_impact: EstimatedImpact
    poll: TemperatureCheckPoll | None = None
    metadata: ProposalMetadata | None = None


@dataclass
class AnalysisOptions:
    min_engagement_threshold: float = 0.0
    proposal_threshold: float = 0.6
    include_sentiment: bool = True
    include_consensus: bool = True


@dataclass
class GeneratorOptions:
    include_temperature_check: bool = True
    poll_duration: int = 3
    minimum_participation_threshold: float = 0.1
    require_budget_estimate: bool = True


@dataclass
class AnalysisRun:
    """Outcome of one batch: loaded posts, their analyses in input order, drafts."""

    posts: list[Post] = field(default_factory=list)
    analyses: list[DiscussionAnalysis] = field(default_factory=list)
    drafts: list[ProposalDraft] = field(default_factory=list)
    failures: list[str] = field(default_factory=list)  # one message per excluded post
