"""End-to-end runs over post files on disk: inbox -> analysis -> drafts -> report."""

from pathlib import Path

import pytest

from forum_analyzer.analysis import AnalysisError, DiscussionAnalyzer, analyze_posts, is_proposal_candidate
from forum_analyzer.grouping import group_by_topic, rank_topics
from forum_analyzer.inbox import load_posts
from forum_analyzer.models import AnalysisOptions, AnalysisRun, GeneratorOptions, ProposalDraft, ProposalType
from forum_analyzer.proposal import ProposalGenerator, generate_proposals
from forum_analyzer.report import save_report
from tests.conftest import FIXED_NOW

pytestmark = pytest.mark.integration

_FILES = {
    "01-treasury.md": (
        "---\n"
        "title: Treasury grants\n"
        "author: alice\n"
        "timestamp: 2024-04-30T09:30:00Z\n"
        "url: https://forum.example.org/t/treasury-grants/1\n"
        "platform: discourse\n"
        "replies: 8\n"
        "views: 1200\n"
        "---\n"
        "We should increase the treasury grant budget for community funding. "
        "This is urgent and critical.\n"
    ),
    "02-upgrade.md": (
        "---\n"
        "title: Protocol upgrade\n"
        "author: bob\n"
        "timestamp: 2024-04-29T18:00:00Z\n"
        "url: https://discord.com/channels/1/2/3\n"
        "platform: discord\n"
        "replies: 4\n"
        "participants: [carol, dave]\n"
        "---\n"
        "I think the protocol code needs a technical upgrade. "
        "We could implement the change next month. @carol please review the implementation.\n"
    ),
    "03-chat.md": (
        "---\n"
        "author: erin\n"
        "timestamp: 2024-04-28\n"
        "url: https://forum.example.org/t/hello/9\n"
        "platform: discourse\n"
        "---\n"
        "Hello everyone, happy to be here.\n"
    ),
    "04-broken.md": "---\nauthor: mallory\n---\nNo url or platform.\n",
}


@pytest.fixture
def inbox(tmp_path: Path) -> Path:
    inbox_dir = tmp_path / "inbox"
    inbox_dir.mkdir()
    for name, text in _FILES.items():
        (inbox_dir / name).write_text(text, encoding="utf-8")
    return inbox_dir


async def test_full_pipeline(inbox: Path, tmp_path: Path):
    posts, load_errors = load_posts(inbox)
    assert [p.id for p in posts] == ["01-treasury", "02-upgrade", "03-chat"]
    assert len(load_errors) == 1

    completed = []
    results = await analyze_posts(posts, DiscussionAnalyzer(), max_workers=2, on_post_complete=completed.append)
    assert len(completed) == 3
    analyses = [r for r in results if not isinstance(r, AnalysisError)]
    assert [a.post.id for a in analyses] == ["01-treasury", "02-upgrade", "03-chat"]

    by_id = {a.post.id: a for a in analyses}
    assert by_id["01-treasury"].proposal_potential.type is ProposalType.TREASURY
    assert by_id["02-upgrade"].proposal_potential.type is ProposalType.TECHNICAL
    assert by_id["02-upgrade"].engagement.unique_participants == 3
    assert "@carol" in by_id["02-upgrade"].stakeholders
    assert by_id["03-chat"].proposal_potential.score == 0.0

    options = AnalysisOptions(proposal_threshold=0.0)
    candidates = [a for a in analyses if is_proposal_candidate(a, options)]
    assert [a.post.id for a in candidates] == ["01-treasury", "02-upgrade"]

    generator = ProposalGenerator(clock=lambda: FIXED_NOW)
    drafts = await generate_proposals(candidates, generator, GeneratorOptions(poll_duration=5))
    assert all(isinstance(d, ProposalDraft) for d in drafts)

    treasury, upgrade = drafts
    assert treasury.title == "Treasury grants"
    assert "Budget Estimate" in treasury.sections[2].content
    assert "Budget Estimate" not in upgrade.sections[2].content
    assert upgrade.poll is not None
    assert upgrade.poll.duration == 5
    assert upgrade.created_at == FIXED_NOW

    groups = group_by_topic(analyses)
    top_topic, discussions = rank_topics(groups, limit=1)[0]
    assert len(discussions) == max(len(d) for d in groups.values())

    run = AnalysisRun(
        posts=posts,
        analyses=analyses,
        drafts=list(drafts),
        failures=[str(e) for e in load_errors],
    )
    saved = save_report(run, options, tmp_path / "reports")
    content = saved.read_text(encoding="utf-8")
    assert "identified 2 potential proposals" in content
    assert "- discourse: 2 discussions" in content
    assert "- discord: 1 discussions" in content
    assert "04-broken.md" in content
    assert f"## {top_topic} (" in content
