"""Rich rendering of diff views.

Turns the unified and split view models into ``rich.text.Text`` objects:
deleted text on a red background, inserted text on a green background, equal
text unstyled. Long views are cut after ``config.max_render_segments``
entries with a dim notice.
"""

from __future__ import annotations

from typing import Iterable

from rich.text import Text

from .config import config
from .edit_script import DiffStats, EditTag, SplitView, UnifiedView, ViewEntry

STYLES: dict[EditTag, str] = {
    EditTag.EQUAL: "",
    EditTag.DELETE: "bold red on #3b1219",
    EditTag.INSERT: "bold green on #12331b",
}

NO_DIFFERENCES = "No differences found"


def render_entries(entries: Iterable[ViewEntry], max_segments: int | None = None) -> Text:
    """Build styled text from ``(tag, text)`` entries."""
    limit = config.max_render_segments if max_segments is None else max_segments
    entries = tuple(entries)
    text = Text(no_wrap=False)
    for tag, segment in entries[:limit]:
        text.append(segment, style=STYLES[tag])
    hidden = len(entries) - limit
    if hidden > 0:
        text.append(f"\n… {hidden} more segments not shown", style="dim italic")
    return text


def render_unified(unified: UnifiedView, max_segments: int | None = None) -> Text:
    return render_entries(unified, max_segments)


def render_split(split: SplitView, max_segments: int | None = None) -> tuple[Text, Text]:
    """Render the left (first) and right (second) columns of a split view."""
    return render_entries(split.left, max_segments), render_entries(split.right, max_segments)


def render_stats(stats: DiffStats) -> Text:
    """One-line summary such as ``-3 +5 chars, distance 5``."""
    if not stats.has_changes:
        return Text(NO_DIFFERENCES, style="dim")
    summary = Text()
    summary.append(f"-{stats.deleted}", style="red")
    summary.append(" ")
    summary.append(f"+{stats.inserted}", style="green")
    summary.append(f" chars, distance {stats.distance}", style="dim")
    return summary
