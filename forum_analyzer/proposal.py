"""Proposal drafting: turn one DiscussionAnalysis into a templated ProposalDraft."""

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from forum_analyzer.models import (
    DiscussionAnalysis,
    EngagementSnapshot,
    EstimatedImpact,
    GeneratorOptions,
    Platform,
    ProposalDraft,
    ProposalMetadata,
    ProposalSection,
    ProposalStatus,
    ProposalType,
    TemperatureCheckPoll,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Community-Driven Proposal"
DEFAULT_POLL_SUBJECT = "Community Discussion"

SECTION_TITLES = ("Abstract", "Motivation", "Specification", "Conclusion")

POLL_OPTIONS = (
    "Strongly Support",
    "Support with Minor Changes",
    "Need More Discussion",
    "Do Not Support",
)

IMPLEMENTATION_STEPS = (
    "Initial review and feedback collection",
    "Technical specification development",
    "Community review period",
    "Implementation and testing",
    "Deployment and monitoring",
)

NEXT_STEPS = (
    "Community feedback and discussion period (1 week)",
    "Temperature check poll (3 days)",
    "Final proposal refinement based on feedback",
    "Formal governance proposal submission",
)

SUCCESS_METRICS = (
    "Increased participation in governance",
    "Improved community sentiment",
    "Technical metrics (if applicable)",
    "Economic impact metrics (if applicable)",
)

# One entry per ProposalType so every type is handled explicitly.
REQUIRED_CHANGES: dict[ProposalType, tuple[str, ...]] = {
    ProposalType.GOVERNANCE: ("Governance parameter updates", "Process documentation updates"),
    ProposalType.TREASURY: (),
    ProposalType.TECHNICAL: ("Smart contract updates", "Technical documentation updates"),
    ProposalType.SOCIAL: (),
    ProposalType.OTHER: (),
}

BUDGET_ESTIMATE = (
    "- Implementation: TBD\n"
    "- Ongoing maintenance: TBD\n"
    "- Contingency: 10%"
)

_HIGH_IMPACT = 0.8
_BASE_IMPACT = 0.3
_MAX_TAGS = 5
_ABSTRACT_TOPICS = 3
_ABSTRACT_STAKEHOLDERS = 5


class ProposalGenerationError(Exception):
    """Raised when a draft cannot be built from an analysis."""

    def __init__(self, post_id: str, message: str) -> None:
        self.post_id = post_id
        super().__init__(f"[{post_id}] {message}")


def _bullets(items: Sequence[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _numbered(items: Sequence[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def _percent(value: float) -> int:
    return round(value * 100)


class ProposalGenerator:
    """Builds proposal drafts. Holds no per-draft state.

    Eligibility (e.g. proposal potential above 0.6) is the caller's decision;
    generate() drafts whatever analysis it is given.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def generate(
        self,
        analysis: DiscussionAnalysis,
        options: GeneratorOptions | None = None,
    ) -> ProposalDraft:
        """Build the full draft for one analysis.

        Raises:
            ProposalGenerationError: If the analysis lacks fields the templates
                need, or templating fails. No partial draft is returned.
        """
        options = options or GeneratorOptions()
        post_id = getattr(getattr(analysis, "post", None), "id", None) or "<unknown post>"
        self._check(analysis, post_id)

        try:
            return self._build(analysis, options)
        except Exception as exc:
            logger.error("Error generating proposal for %s: %s", post_id, exc)
            raise ProposalGenerationError(post_id, f"templating failed: {exc}") from exc

    @staticmethod
    def _check(analysis: DiscussionAnalysis, post_id: str) -> None:
        post = getattr(analysis, "post", None)
        if post is None:
            raise ProposalGenerationError(post_id, "analysis has no source post")
        if not getattr(post, "author", None):
            raise ProposalGenerationError(post_id, "source post has no author")
        if not getattr(post, "url", None):
            raise ProposalGenerationError(post_id, "source post has no url")
        if not isinstance(getattr(post, "platform", None), Platform):
            raise ProposalGenerationError(post_id, "source post has no platform")
        if not isinstance(getattr(post, "timestamp", None), datetime):
            raise ProposalGenerationError(post_id, "source post has no timestamp")
        potential = getattr(analysis, "proposal_potential", None)
        if not isinstance(getattr(potential, "type", None), ProposalType):
            raise ProposalGenerationError(post_id, "analysis has no proposal type")

    def _build(self, analysis: DiscussionAnalysis, options: GeneratorOptions) -> ProposalDraft:
        post = analysis.post
        sections = (
            self.abstract(analysis),
            self.motivation(analysis),
            self.specification(analysis, options),
            self.conclusion(analysis),
        )
        poll = self.temperature_check(analysis, options) if options.include_temperature_check else None
        tags = tuple(analysis.topics[:_MAX_TAGS])

        draft = ProposalDraft(
            title=post.title or DEFAULT_TITLE,
            author=post.author,
            created_at=self._clock(),
            status=ProposalStatus.TEMPERATURE_CHECK if poll else ProposalStatus.DRAFT,
            sections=sections,
            source_discussions=(post.url,),
            tags=tags,
            estimated_impact=estimate_impact(analysis.proposal_potential.type),
            poll=poll,
            metadata=ProposalMetadata(
                source=post.url,
                platform=post.platform,
                timestamp=post.timestamp,
                author=post.author,
                tags=tags,
                engagement=EngagementSnapshot(
                    participation_rate=analysis.engagement.participation_rate,
                    unique_participants=analysis.engagement.unique_participants,
                    total_interactions=analysis.engagement.total_interactions,
                ),
            ),
        )
        logger.debug("Drafted proposal %r from %s (%s)", draft.title, post.id, draft.status.value)
        return draft

    def abstract(self, analysis: DiscussionAnalysis) -> ProposalSection:
        topics = ", ".join(analysis.topics[:_ABSTRACT_TOPICS])
        stakeholders = ", ".join(analysis.stakeholders[:_ABSTRACT_STAKEHOLDERS])
        content = (
            f"This proposal addresses {topics} based on community discussions.\n\n"
            f"Key Points:\n{_bullets(analysis.key_points)}\n\n"
            f"Primary stakeholders: {stakeholders}"
        )
        return ProposalSection(title="Abstract", content=content)

    def motivation(self, analysis: DiscussionAnalysis) -> ProposalSection:
        consensus = analysis.consensus
        lines = [
            "Background:",
            f"The community has expressed {analysis.sentiment.label.value} sentiment regarding "
            f"these topics, with a consensus level of {_percent(consensus.level)}%.",
            "",
            "Community Perspectives:",
            _bullets(analysis.perspectives),
        ]
        if consensus.majority_opinion:
            lines += ["", f"Majority Opinion: {consensus.majority_opinion}"]
        if consensus.dissenting:
            lines += ["", f"Dissenting Views: {consensus.dissenting}"]
        return ProposalSection(title="Motivation", content="\n".join(lines).strip())

    def specification(self, analysis: DiscussionAnalysis, options: GeneratorOptions) -> ProposalSection:
        kind = analysis.proposal_potential.type
        impact_level = "High" if kind is ProposalType.TECHNICAL else "Medium"
        changes = REQUIRED_CHANGES[kind]
        lines = [
            "Proposed Changes:",
            _numbered(analysis.suggested_solutions),
            "",
            "Implementation Approach:",
            _numbered(IMPLEMENTATION_STEPS),
            "",
            "Technical Considerations:",
            f"- Impact Level: {impact_level}",
            "- Required Changes:",
        ]
        lines += [f"  - {change}" for change in changes]
        if kind is ProposalType.TREASURY:
            heading = "Budget Estimate:" if options.require_budget_estimate else "Budget Estimate (optional):"
            lines += ["", heading, BUDGET_ESTIMATE]
        return ProposalSection(title="Specification", content="\n".join(lines).strip())

    def conclusion(self, analysis: DiscussionAnalysis) -> ProposalSection:
        engagement = analysis.engagement
        content = (
            "This proposal aims to address community needs with a confidence score of "
            f"{_percent(analysis.proposal_potential.confidence)}%.\n\n"
            "Community Engagement:\n"
            f"- {engagement.unique_participants} unique participants\n"
            f"- {_percent(engagement.participation_rate)}% participation rate\n"
            f"- {engagement.total_interactions} total interactions\n\n"
            f"Next Steps:\n{_numbered(NEXT_STEPS)}\n\n"
            f"Success Metrics:\n{_bullets(SUCCESS_METRICS)}"
        )
        return ProposalSection(title="Conclusion", content=content)

    def temperature_check(
        self, analysis: DiscussionAnalysis, options: GeneratorOptions
    ) -> TemperatureCheckPoll:
        subject = analysis.post.title or DEFAULT_POLL_SUBJECT
        return TemperatureCheckPoll(
            title=f"Temperature Check: {subject}",
            description=(
                "This temperature check aims to gauge community sentiment on the proposed "
                f"changes regarding {', '.join(analysis.topics)}. "
                "Please vote to indicate your support level."
            ),
            options=POLL_OPTIONS,
            duration=options.poll_duration,
            threshold=options.minimum_participation_threshold,
        )


def estimate_impact(kind: ProposalType) -> EstimatedImpact:
    """Independent per-dimension impact; the scores are not normalized."""
    return EstimatedImpact(
        technical=_HIGH_IMPACT if kind is ProposalType.TECHNICAL else _BASE_IMPACT,
        social=_HIGH_IMPACT if kind is ProposalType.SOCIAL else _BASE_IMPACT,
        economic=_HIGH_IMPACT if kind is ProposalType.TREASURY else _BASE_IMPACT,
    )


async def generate_proposals(
    analyses: Sequence[DiscussionAnalysis],
    generator: ProposalGenerator,
    options: GeneratorOptions | None = None,
) -> list[ProposalDraft | ProposalGenerationError]:
    """Draft proposals for all analyses concurrently.

    Returns one entry per analysis, in input order. Never raises for a single
    analysis; its ProposalGenerationError is returned in its slot instead.
    """

    async def run(analysis: DiscussionAnalysis) -> ProposalDraft | ProposalGenerationError:
        try:
            return await asyncio.to_thread(generator.generate, analysis, options)
        except ProposalGenerationError as exc:
            logger.warning("Skipping proposal: %s", exc)
            return exc

    results = await asyncio.gather(*(run(a) for a in analyses))
    drafted = sum(1 for r in results if isinstance(r, ProposalDraft))
    logger.info("Drafted %d/%d proposals", drafted, len(results))
    return list(results)
