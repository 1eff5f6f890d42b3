"""Local post source: markdown files with YAML frontmatter mapped to Post records."""

import logging
from datetime import date, datetime, time, timezone
from pathlib import Path

import frontmatter

from forum_analyzer.models import Platform, Post, Reaction

logger = logging.getLogger(__name__)


class InboxError(Exception):
    """Raised when a post file cannot be mapped to a Post."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"[{path.name}] {message}")


def scan_inbox(inbox_dir: Path) -> list[Path]:
    """Return all .md files in inbox_dir, sorted by name."""
    return sorted(inbox_dir.glob("*.md"))


def _timestamp(value: object, path: Path) -> datetime:
    # PyYAML already turns unquoted ISO timestamps into datetime
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        ts = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            ts = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise InboxError(path, f"bad timestamp {value!r}") from exc
    else:
        raise InboxError(path, "missing timestamp")
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _as_count(value: object, what: str, path: Path) -> int:
    # bool is an int subclass; 2.9 must not truncate to 2
    if isinstance(value, bool):
        raise InboxError(path, f"{what} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    raise InboxError(path, f"{what} must be an integer, got {value!r}")


def _count(meta: dict, key: str, path: Path) -> int:
    value = meta.get(key)
    return 0 if value is None else _as_count(value, key, path)


def _reactions(raw: object, path: Path) -> tuple[Reaction, ...]:
    if not raw:
        return ()
    if not isinstance(raw, list):
        raise InboxError(path, "reactions must be a list")
    reactions: list[Reaction] = []
    for item in raw:
        if not isinstance(item, dict) or "count" not in item:
            raise InboxError(path, f"bad reaction entry {item!r}")
        count = _as_count(item["count"], "reaction count", path)
        reactions.append(Reaction(kind=str(item.get("kind", "like")), count=count))
    return tuple(reactions)


def _participants(raw: object, path: Path) -> tuple[str, ...]:
    if not raw:
        return ()
    if isinstance(raw, str):
        return tuple(p.strip() for p in raw.split(",") if p.strip())
    if not isinstance(raw, list):
        raise InboxError(path, "participants must be a list or comma-separated string")
    return tuple(str(p) for p in raw)


def load_post(file_path: Path) -> Post:
    """Parse one post file.

    Frontmatter keys: id, title, author, timestamp, url, platform, replies,
    views, reactions (list of {kind, count}), participants. The body is the
    post content. id defaults to the file stem.

    Raises:
        InboxError: If a key is missing or has the wrong shape.
    """
    try:
        post = frontmatter.load(str(file_path))
    except Exception as exc:
        raise InboxError(file_path, f"unreadable: {exc}") from exc

    meta = dict(post.metadata)
    for key in ("author", "url", "platform"):
        if not meta.get(key):
            raise InboxError(file_path, f"missing {key}")

    try:
        platform = Platform(str(meta["platform"]))
    except ValueError as exc:
        raise InboxError(file_path, f"unknown platform {meta['platform']!r}") from exc

    title = meta.get("title")
    return Post(
        id=str(meta.get("id") or file_path.stem),
        title=str(title) if title else None,
        content=post.content.strip(),
        author=str(meta["author"]),
        timestamp=_timestamp(meta.get("timestamp"), file_path),
        url=str(meta["url"]),
        platform=platform,
        replies=_count(meta, "replies", file_path),
        views=_count(meta, "views", file_path),
        reactions=_reactions(meta.get("reactions"), file_path),
        participants=_participants(meta.get("participants"), file_path),
    )


def load_posts(path: Path) -> tuple[list[Post], list[InboxError]]:
    """Load a single file or every .md file in a directory.

    Unreadable files are logged and returned as errors; they never stop the
    remaining files from loading.
    """
    files = [path] if path.is_file() else scan_inbox(path)
    posts: list[Post] = []
    errors: list[InboxError] = []
    for file_path in files:
        try:
            posts.append(load_post(file_path))
        except InboxError as exc:
            logger.warning("Skipping post file: %s", exc)
            errors.append(exc)
    logger.info("Loaded %d/%d post files from %s", len(posts), len(files), path)
    return posts, errors
