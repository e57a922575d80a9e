"""Semantic cleanup of raw edit scripts.

A minimal script is often hard to read: ``"mouse"`` -> ``"sofas"`` comes out
as a scatter of one-letter edits around the shared ``o`` and ``s``. Cleanup
folds short equalities into the surrounding edits, slides lone edits to word
and line boundaries, and pulls overlapping text out of delete/insert pairs.
The reconstructed texts never change, only the grouping.
"""

from __future__ import annotations

import re

from .config import config
from .diff_engine import DELETE, EQUAL, INSERT, common_suffix_length, freeze, merge, thaw
from .edit_script import EditScript
from .logger import log

_BLANK_LINE_END = re.compile(r"\n\r?\n\Z")
_BLANK_LINE_START = re.compile(r"\A\r?\n\r?\n")


def cleanup(script: EditScript, max_passes: int | None = None) -> EditScript:
    """Make a script human-readable while keeping both sides intact.

    Passes are repeated until the script stops changing, so the result is a
    fixed point and ``cleanup(cleanup(s)) == cleanup(s)``.

    Args:
        script: A coalesced edit script
        max_passes: Upper bound on passes (defaults to ``config.cleanup_max_passes``)

    Returns:
        The cleaned edit script
    """
    if len(script) < 2:
        return tuple(script)

    limit = max_passes if max_passes is not None else config.cleanup_max_passes
    current = tuple(script)
    for _ in range(limit):
        ops = thaw(current)
        _cleanup_pass(ops)
        cleaned = freeze(ops)
        if cleaned == current:
            return cleaned
        current = cleaned

    log.warning(f"[CLEANUP] Script still changing after {limit} passes ({len(current)} ops)")
    return current


def _cleanup_pass(ops: list[list]) -> None:
    if _fold_short_equalities(ops):
        merge(ops)
    align_edits(ops)
    _extract_overlaps(ops)
    merge(ops)


def _fold_short_equalities(ops: list[list]) -> bool:
    """Turn equalities dwarfed by the edits on both sides into delete+insert."""
    changed = False
    equalities: list[int] = []
    last_equality: str | None = None
    inserted_before = deleted_before = 0
    inserted_after = deleted_after = 0
    pointer = 0
    while pointer < len(ops):
        tag, text = ops[pointer]
        if tag is EQUAL:
            equalities.append(pointer)
            inserted_before, deleted_before = inserted_after, deleted_after
            inserted_after = deleted_after = 0
            last_equality = text
        else:
            if tag is INSERT:
                inserted_after += len(text)
            else:
                deleted_after += len(text)
            if (
                last_equality
                and len(last_equality) <= max(inserted_before, deleted_before)
                and len(last_equality) <= max(inserted_after, deleted_after)
            ):
                position = equalities.pop()
                ops.insert(position, [DELETE, last_equality])
                ops[position + 1][0] = INSERT
                # The previous equality has new neighbours and needs another look
                if equalities:
                    equalities.pop()
                pointer = equalities[-1] if equalities else -1
                inserted_before = deleted_before = 0
                inserted_after = deleted_after = 0
                last_equality = None
                changed = True
        pointer += 1
    return changed


def boundary_score(one: str, two: str) -> int:
    """Score how natural a split between ``one`` and ``two`` looks.

    6 at the text edges, 5 on a blank line, 4 on a line break, 3 after the end
    of a sentence, 2 on whitespace, 1 on other punctuation, 0 inside a word.
    """
    if not one or not two:
        return 6

    char1 = one[-1]
    char2 = two[0]
    non_alnum1 = not _is_ascii_alnum(char1)
    non_alnum2 = not _is_ascii_alnum(char2)
    whitespace1 = non_alnum1 and char1.isspace()
    whitespace2 = non_alnum2 and char2.isspace()
    line_break1 = whitespace1 and char1 in "\r\n"
    line_break2 = whitespace2 and char2 in "\r\n"
    blank_line1 = line_break1 and _BLANK_LINE_END.search(one) is not None
    blank_line2 = line_break2 and _BLANK_LINE_START.search(two) is not None

    if blank_line1 or blank_line2:
        return 5
    if line_break1 or line_break2:
        return 4
    if non_alnum1 and not whitespace1 and whitespace2:
        return 3
    if whitespace1 or whitespace2:
        return 2
    if non_alnum1 or non_alnum2:
        return 1
    return 0


def _is_ascii_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def align_edits(ops: list[list]) -> None:
    """Slide single edits between two equalities onto the best-scoring boundary.

    ``The c<ins>at c</ins>ame.`` becomes ``The <ins>cat </ins>came.``
    """
    pointer = 1
    while pointer < len(ops) - 1:
        if ops[pointer - 1][0] is EQUAL and ops[pointer + 1][0] is EQUAL:
            equality1 = ops[pointer - 1][1]
            edit = ops[pointer][1]
            equality2 = ops[pointer + 1][1]

            # Shift the edit as far left as possible
            offset = common_suffix_length(equality1, edit)
            if offset:
                common = edit[len(edit) - offset:]
                equality1 = equality1[:len(equality1) - offset]
                edit = common + edit[:len(edit) - offset]
                equality2 = common + equality2

            # Step right one character at a time looking for the best fit
            best_equality1, best_edit, best_equality2 = equality1, edit, equality2
            best_score = boundary_score(equality1, edit) + boundary_score(edit, equality2)
            while edit and equality2 and edit[0] == equality2[0]:
                equality1 += edit[0]
                edit = edit[1:] + equality2[0]
                equality2 = equality2[1:]
                score = boundary_score(equality1, edit) + boundary_score(edit, equality2)
                # >= favours trailing rather than leading whitespace on edits
                if score >= best_score:
                    best_score = score
                    best_equality1, best_edit, best_equality2 = equality1, edit, equality2

            if ops[pointer - 1][1] != best_equality1:
                if best_equality1:
                    ops[pointer - 1][1] = best_equality1
                else:
                    del ops[pointer - 1]
                    pointer -= 1
                ops[pointer][1] = best_edit
                if best_equality2:
                    ops[pointer + 1][1] = best_equality2
                else:
                    del ops[pointer + 1]
                    pointer -= 1
        pointer += 1


def common_overlap_length(one: str, two: str) -> int:
    """Length of the longest suffix of ``one`` that is also a prefix of ``two``."""
    if not one or not two:
        return 0
    if len(one) > len(two):
        one = one[len(one) - len(two):]
    elif len(one) < len(two):
        two = two[:len(one)]
    length = len(one)
    if one == two:
        return length

    best = 0
    size = 1
    while True:
        pattern = one[length - size:]
        found = two.find(pattern)
        if found == -1:
            return best
        size += found
        if found == 0 or one[length - size:] == two[:size]:
            best = size
            size += 1


def _extract_overlaps(ops: list[list]) -> None:
    """Split out text shared by the tail of a delete and the head of the insert after it.

    ``<del>abcxxx</del><ins>xxxdef</ins>`` becomes
    ``<del>abc</del>xxx<ins>def</ins>``; the reverse overlap
    ``<del>xxxabc</del><ins>defxxx</ins>`` becomes
    ``<ins>def</ins>xxx<del>abc</del>``. Only overlaps covering at least half
    of either edit are extracted.
    """
    pointer = 1
    while pointer < len(ops):
        if ops[pointer - 1][0] is DELETE and ops[pointer][0] is INSERT:
            deletion = ops[pointer - 1][1]
            insertion = ops[pointer][1]
            overlap1 = common_overlap_length(deletion, insertion)
            overlap2 = common_overlap_length(insertion, deletion)
            if overlap1 >= overlap2:
                if overlap1 and (overlap1 * 2 >= len(deletion) or overlap1 * 2 >= len(insertion)):
                    ops.insert(pointer, [EQUAL, insertion[:overlap1]])
                    ops[pointer - 1][1] = deletion[:len(deletion) - overlap1]
                    ops[pointer + 1][1] = insertion[overlap1:]
                    pointer += 1
            elif overlap2 * 2 >= len(deletion) or overlap2 * 2 >= len(insertion):
                ops.insert(pointer, [EQUAL, deletion[:overlap2]])
                ops[pointer - 1] = [INSERT, insertion[:len(insertion) - overlap2]]
                ops[pointer + 1] = [DELETE, deletion[overlap2:]]
                pointer += 1
            pointer += 1
        pointer += 1

