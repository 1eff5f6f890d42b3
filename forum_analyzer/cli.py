"""Click CLI: loads post files, analyzes them, drafts proposals, prints a report."""

import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from config.config_loader import AppConfig, load_config
from forum_analyzer.analysis import AnalysisError, DiscussionAnalyzer, analyze_posts, is_proposal_candidate
from forum_analyzer.inbox import load_posts
from forum_analyzer.models import AnalysisRun, DiscussionAnalysis, Post, ProposalDraft
from forum_analyzer.proposal import ProposalGenerator, generate_proposals
from forum_analyzer.report import print_report, save_report

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _apply_overrides(
    config: AppConfig,
    threshold: float | None,
    min_engagement: float | None,
    no_poll: bool,
    poll_duration: int | None,
    workers: int | None,
    top_topics: int | None,
) -> AppConfig:
    """CLI flag > settings file > built-in default."""
    analysis = dataclasses.replace(
        config.analysis,
        proposal_threshold=threshold if threshold is not None else config.analysis.proposal_threshold,
        min_engagement_threshold=(
            min_engagement if min_engagement is not None else config.analysis.min_engagement_threshold
        ),
    )
    generator = dataclasses.replace(
        config.generator,
        include_temperature_check=config.generator.include_temperature_check and not no_poll,
        poll_duration=poll_duration if poll_duration is not None else config.generator.poll_duration,
    )
    defaults = dataclasses.replace(
        config.defaults,
        max_workers=workers if workers is not None else config.defaults.max_workers,
        top_topics=top_topics if top_topics is not None else config.defaults.top_topics,
    )
    return AppConfig(defaults=defaults, analysis=analysis, generator=generator)


async def _run_batch(
    posts: list[Post],
    config: AppConfig,
    analyzer: DiscussionAnalyzer | None = None,
    generator: ProposalGenerator | None = None,
) -> AnalysisRun:
    """Analyze every post, then draft proposals for the candidates."""
    analyzer = analyzer or DiscussionAnalyzer()
    generator = generator or ProposalGenerator()
    run = AnalysisRun(posts=list(posts))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(f"Analyzing {len(posts)} discussions...", total=None)
        results = await analyze_posts(posts, analyzer, max_workers=config.defaults.max_workers)

        for result in results:
            if isinstance(result, AnalysisError):
                run.failures.append(str(result))
            else:
                run.analyses.append(result)

        candidates: list[DiscussionAnalysis] = [
            a for a in run.analyses if is_proposal_candidate(a, config.analysis)
        ]
        progress.update(task, description=f"Drafting {len(candidates)} proposals...")
        drafts = await generate_proposals(candidates, generator, config.generator)

    for draft in drafts:
        if isinstance(draft, ProposalDraft):
            run.drafts.append(draft)
        else:
            run.failures.append(str(draft))
    return run


@click.command()
@click.argument("path", required=False, type=click.Path(exists=True, path_type=Path))
@click.option("--config", "config_path", type=click.Path(exists=True, path_type=Path),
              envvar="FORUM_ANALYZER_CONFIG", default=None,
              help="Settings file (default: config/settings.yaml)")
@click.option("--threshold", type=click.FloatRange(0.0, 1.0), default=None,
              help="Proposal potential a discussion must exceed to be drafted")
@click.option("--min-engagement", type=click.FloatRange(0.0, 1.0), default=None,
              help="Minimum engagement score for drafting")
@click.option("--no-poll", is_flag=True, default=False, help="Skip the temperature check poll")
@click.option("--poll-duration", type=click.IntRange(min=1), default=None, help="Poll duration in days")
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Posts analyzed concurrently")
@click.option("--top-topics", type=click.IntRange(min=1), default=None, help="Topics listed in the report")
@click.option("--output", "output_path", type=click.Path(path_type=Path), default=None,
              help="Also save the report as markdown in this directory")
@click.option("--save", is_flag=True, default=False, help="Save the report to the configured output dir")
@click.option("--verbose", is_flag=True, help="Enable DEBUG-level logging")
def main(
    path: Path | None,
    config_path: Path | None,
    threshold: float | None,
    min_engagement: float | None,
    no_poll: bool,
    poll_duration: int | None,
    workers: int | None,
    top_topics: int | None,
    output_path: Path | None,
    save: bool,
    verbose: bool,
) -> None:
    """Forum Analyzer -- score community discussions and draft governance proposals.

    \b
    Examples:
      forum-analyzer ./inbox
      forum-analyzer ./inbox --threshold 0.4 --no-poll
      forum-analyzer post.md --output ./reports
    """
    load_dotenv()
    _setup_logging(verbose)

    try:
        config = load_config(config_path) if config_path else load_config()
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        sys.exit(1)

    config = _apply_overrides(config, threshold, min_engagement, no_poll, poll_duration, workers, top_topics)

    source = path or config.defaults.inbox_dir
    if not source.exists():
        console.print(f"[bold red]Error:[/bold red] No such file or directory: {source}")
        sys.exit(1)

    posts, load_errors = load_posts(source)
    if not posts:
        console.print(f"[bold red]Error:[/bold red] No posts could be loaded from {source}.")
        sys.exit(1)

    run = asyncio.run(_run_batch(posts, config))
    run.failures[:0] = [str(e) for e in load_errors]

    print_report(run, config.analysis, config.defaults.top_topics)

    if output_path or save:
        saved = save_report(run, config.analysis, output_path or config.defaults.output_dir,
                            config.defaults.top_topics)
        console.print(f"\n[dim]Saved to: {saved}[/dim]")


if __name__ == "__main__":
    main()
