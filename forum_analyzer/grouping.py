"""Topic grouping for reporting. Reads analyses, never feeds back into scoring."""

from collections.abc import Iterable

from forum_analyzer.models import DiscussionAnalysis, Post

TopicGroups = dict[str, list[tuple[Post, DiscussionAnalysis]]]


def group_by_topic(analyses: Iterable[DiscussionAnalysis]) -> TopicGroups:
    """Bucket (post, analysis) pairs under each of their topic tags.

    Sequential fold: buckets keep the order in which analyses arrive.
    """
    groups: TopicGroups = {}
    for analysis in analyses:
        for topic in analysis.topics:
            groups.setdefault(topic, []).append((analysis.post, analysis))
    return groups


def rank_topics(groups: TopicGroups, limit: int | None = 5) -> list[tuple[str, list[tuple[Post, DiscussionAnalysis]]]]:
    """Topics by number of discussions, largest first. Ties keep first-seen order."""
    ranked = sorted(groups.items(), key=lambda item: len(item[1]), reverse=True)
    return ranked if limit is None else ranked[:limit]


def topic_key_points(discussions: Iterable[tuple[Post, DiscussionAnalysis]]) -> list[str]:
    """Distinct key points across a topic's discussions, in order."""
    points: dict[str, None] = {}
    for _, analysis in discussions:
        points.update(dict.fromkeys(analysis.key_points))
    return list(points)
