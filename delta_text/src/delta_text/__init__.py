"""Delta Text: character-level comparison of two texts.

The diff pipeline is importable on its own::

    from delta_text import diff, cleanup, project

    unified, split = project(cleanup(diff("cat", "bat")))
"""

from __future__ import annotations

from delta_text.utils.diff_engine import coalesce, diff
from delta_text.utils.edit_script import (
    ComputationFailure,
    DiffStats,
    DiffViews,
    EditOp,
    EditScript,
    EditTag,
    SplitView,
    UnifiedView,
    source_text,
    target_text,
)
from delta_text.utils.recompute_scheduler import ComputeOutcome, InputSlot, RecomputeScheduler, SchedulerState
from delta_text.utils.semantic_cleanup import cleanup
from delta_text.utils.view_projector import build_views, project

__version__ = "0.1.0"

__all__ = [
    "ComputationFailure",
    "ComputeOutcome",
    "DiffStats",
    "DiffViews",
    "EditOp",
    "EditScript",
    "EditTag",
    "InputSlot",
    "RecomputeScheduler",
    "SchedulerState",
    "SplitView",
    "UnifiedView",
    "build_views",
    "cleanup",
    "coalesce",
    "diff",
    "project",
    "source_text",
    "target_text",
]
