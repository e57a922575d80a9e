"""Projection of a cleaned edit script into renderable views."""

from __future__ import annotations

from .diff_engine import diff
from .edit_script import (
    ComputationFailure,
    DiffViews,
    EditScript,
    EditTag,
    SplitView,
    UnifiedView,
    ViewEntry,
    compute_stats,
)
from .semantic_cleanup import cleanup


def project(script: EditScript) -> tuple[UnifiedView, SplitView]:
    """Build the unified and split views of a script in one pass.

    Args:
        script: A cleaned edit script

    Returns:
        ``(unified, split)`` where unified mirrors the script and split puts
        EQUAL entries in both columns, DELETE on the left and INSERT on the
        right, keeping script order inside each column.
    """
    unified: list[ViewEntry] = []
    left: list[ViewEntry] = []
    right: list[ViewEntry] = []
    for op in script:
        entry = (op.tag, op.text)
        unified.append(entry)
        if op.tag is EditTag.DELETE:
            left.append(entry)
        elif op.tag is EditTag.INSERT:
            right.append(entry)
        else:
            left.append(entry)
            right.append(entry)
    return tuple(unified), SplitView(left=tuple(left), right=tuple(right))


def build_views(first: str, second: str) -> DiffViews:
    """Run the whole pipeline: diff, cleanup, projection and stats.

    Raises:
        ComputationFailure: If the diff runs out of resources
    """
    script = diff(first, second)
    try:
        script = cleanup(script)
        unified, split = project(script)
        stats = compute_stats(script)
    except MemoryError as e:
        raise ComputationFailure(f"building views for {len(script)} ops exhausted memory") from e
    return DiffViews(script=script, unified=unified, split=split, stats=stats)
