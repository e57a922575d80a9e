"""Edit script data model shared by the diff pipeline.

An edit script is an ordered tuple of ``EditOp`` values. Replaying the EQUAL
and DELETE segments gives back the first text; replaying EQUAL and INSERT
gives back the second. Scripts produced by this package are always coalesced:
no empty segments and no two neighbouring ops with the same tag.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator


class EditTag(Enum):
    """Kind of an edit operation."""

    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class EditOp:
    """One segment of an edit script."""

    tag: EditTag
    text: str

    def __iter__(self) -> Iterator:
        # Lets callers unpack an op as ``tag, text = op``
        yield self.tag
        yield self.text


EditScript = tuple[EditOp, ...]
ViewEntry = tuple[EditTag, str]
UnifiedView = tuple[ViewEntry, ...]


@dataclass(frozen=True)
class SplitView:
    """Two-column projection of an edit script.

    ``left`` holds EQUAL and DELETE entries, ``right`` holds EQUAL and INSERT
    entries, both in script order. The columns are not aligned by line or
    position.
    """

    left: tuple[ViewEntry, ...] = ()
    right: tuple[ViewEntry, ...] = ()


@dataclass(frozen=True)
class DiffStats:
    """Character counts for one edit script."""

    equal: int = 0
    inserted: int = 0
    deleted: int = 0
    distance: int = 0

    @property
    def has_changes(self) -> bool:
        return bool(self.inserted or self.deleted)


@dataclass(frozen=True)
class DiffViews:
    """Everything the renderer needs from one pipeline run."""

    script: EditScript
    unified: UnifiedView
    split: SplitView
    stats: DiffStats = field(default_factory=DiffStats)


class ComputationFailure(Exception):
    """The diff pipeline ran out of resources for one computation."""

    pass


class InvalidScriptError(ValueError):
    """An edit script breaks the coalescing invariants."""

    pass


def make_script(pairs: Iterable[tuple[EditTag, str]]) -> EditScript:
    """Build a script from ``(tag, text)`` pairs, accepting ``EditOp`` values too."""
    return tuple(op if isinstance(op, EditOp) else EditOp(op[0], op[1]) for op in pairs)


def source_text(script: Iterable[EditOp]) -> str:
    """Rebuild the first text from EQUAL and DELETE segments."""
    return "".join(text for tag, text in script if tag is not EditTag.INSERT)


def target_text(script: Iterable[EditOp]) -> str:
    """Rebuild the second text from EQUAL and INSERT segments."""
    return "".join(text for tag, text in script if tag is not EditTag.DELETE)


def validate_script(script: Iterable[EditOp]) -> None:
    """Raise InvalidScriptError unless the script is well formed and coalesced."""
    previous: EditTag | None = None
    for index, op in enumerate(script):
        if not isinstance(op, EditOp) or not isinstance(op.tag, EditTag):
            raise InvalidScriptError(f"entry {index} is not an EditOp: {op!r}")
        if not isinstance(op.text, str):
            raise InvalidScriptError(f"entry {index} has non-text segment {type(op.text).__name__}")
        if not op.text:
            raise InvalidScriptError(f"entry {index} has an empty segment")
        if op.tag is previous:
            raise InvalidScriptError(f"entries {index - 1} and {index} share tag {op.tag.value}")
        previous = op.tag


def is_valid_script(script: Iterable[EditOp]) -> bool:
    try:
        validate_script(script)
    except InvalidScriptError:
        return False
    return True


def levenshtein(script: Iterable[EditOp]) -> int:
    """Edit distance implied by the script, counting a paired delete/insert as substitutions."""
    distance = 0
    insertions = 0
    deletions = 0
    for tag, text in script:
        if tag is EditTag.INSERT:
            insertions += len(text)
        elif tag is EditTag.DELETE:
            deletions += len(text)
        else:
            distance += max(insertions, deletions)
            insertions = 0
            deletions = 0
    return distance + max(insertions, deletions)


def compute_stats(script: Iterable[EditOp]) -> DiffStats:
    """Count equal, inserted and deleted characters of a script."""
    script = tuple(script)
    counts = {EditTag.EQUAL: 0, EditTag.INSERT: 0, EditTag.DELETE: 0}
    for tag, text in script:
        counts[tag] += len(text)
    return DiffStats(
        equal=counts[EditTag.EQUAL],
        inserted=counts[EditTag.INSERT],
        deleted=counts[EditTag.DELETE],
        distance=levenshtein(script),
    )
