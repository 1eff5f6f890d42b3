"""Rich console output and markdown file save for analysis runs."""

import logging
import re
from collections import Counter
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.markdown import Markdown
from rich.rule import Rule
from rich.text import Text

from forum_analyzer.grouping import group_by_topic, rank_topics, topic_key_points
from forum_analyzer.models import AnalysisOptions, AnalysisRun, DiscussionAnalysis, ProposalDraft

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len]


def _platform_counts(run: AnalysisRun) -> dict[str, int]:
    return dict(Counter(post.platform.value for post in run.posts))


def _format_draft(draft: ProposalDraft) -> list[str]:
    lines = [f"## {draft.title}", ""]
    for section in draft.sections:
        lines += [f"### {section.title}", section.content, ""]
    if draft.poll:
        lines += [
            "### Temperature Check Poll",
            draft.poll.description,
            "",
            "Options:",
            *(f"- {option}" for option in draft.poll.options),
            "",
            f"Duration: {draft.poll.duration} days | "
            f"Participation threshold: {round(draft.poll.threshold * 100)}%",
            "",
        ]
    impact = draft.estimated_impact
    lines += [
        "Impact Assessment:",
        f"- Technical Impact: {round(impact.technical * 100)}%",
        f"- Social Impact: {round(impact.social * 100)}%",
        f"- Economic Impact: {round(impact.economic * 100)}%",
        "",
        f"Source Discussions: {', '.join(draft.source_discussions)}",
        "",
        "---",
        "",
    ]
    return lines


def _format_analysis_line(analysis: DiscussionAnalysis, options: AnalysisOptions) -> str:
    post = analysis.post
    parts = [
        f"**{post.title or post.id}** ({post.platform.value})",
        f"potential {analysis.proposal_potential.score:.2f}",
        f"type {analysis.proposal_potential.type.value}",
    ]
    if options.include_sentiment:
        parts.append(f"sentiment {analysis.sentiment.label.value} ({analysis.sentiment.score:+.2f})")
    if options.include_consensus:
        parts.append(f"consensus {round(analysis.consensus.level * 100)}%")
    return "- " + " | ".join(parts)


def format_report(run: AnalysisRun, options: AnalysisOptions, top_topics: int = 5) -> str:
    """Render a run as a markdown summary."""
    lines = [
        f"I've analyzed {len(run.analyses)} community discussions across multiple platforms "
        f"and identified {len(run.drafts)} potential proposals.",
        "",
        "Sources:",
        *(f"- {platform}: {count} discussions" for platform, count in _platform_counts(run).items()),
        "",
    ]

    if run.failures:
        lines += ["Excluded discussions:", *(f"- {msg}" for msg in run.failures), ""]

    if run.analyses:
        lines += ["Discussions:", *(_format_analysis_line(a, options) for a in run.analyses), ""]

    if run.drafts:
        lines += ["Here are the generated proposals:", ""]
        for draft in run.drafts:
            lines += _format_draft(draft)
    else:
        lines += [
            "No discussions met the threshold for proposal generation. Consider lowering "
            "the threshold or analyzing more recent discussions.",
            "",
        ]

    lines += ["Key Discussion Insights:"]
    for topic, discussions in rank_topics(group_by_topic(run.analyses), limit=top_topics):
        lines += ["", f"## {topic} ({len(discussions)} discussions)"]
        lines += [f"- {point}" for point in topic_key_points(discussions)]
    lines.append("")
    return "\n".join(lines)


def print_report(run: AnalysisRun, options: AnalysisOptions, top_topics: int = 5) -> None:
    """Print the summary to the console using Rich markdown."""
    console.print(Rule("[bold green]Forum Analysis[/bold green]"))
    console.print(
        Text(
            f"Posts: {len(run.posts)} | Analyzed: {len(run.analyses)} | "
            f"Excluded: {len(run.failures)} | Proposals: {len(run.drafts)}",
            style="dim",
        )
    )
    console.print(Markdown(format_report(run, options, top_topics)))


def save_report(
    run: AnalysisRun,
    options: AnalysisOptions,
    output_dir: Path,
    top_topics: int = 5,
    slug_override: str | None = None,
) -> Path:
    """Save the summary as a markdown file and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    slug = slug_override if slug_override is not None else _slug("forum analysis")
    filepath = output_dir / f"{timestamp}_{slug}.md"

    header = [
        "# Forum Analysis Report",
        "",
        f"**Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Posts:** {len(run.posts)}",
        f"**Proposals:** {len(run.drafts)}",
        "",
        "---",
        "",
    ]
    filepath.write_text("\n".join(header) + format_report(run, options, top_topics), encoding="utf-8")
    logger.info("Report saved to: %s", filepath)
    return filepath
