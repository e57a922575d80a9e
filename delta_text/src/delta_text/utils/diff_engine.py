"""Character-level diff computation for Delta Text.

``diff`` returns a minimal edit script (fewest inserted plus deleted
characters) between two strings. The search is Myers' O(ND) algorithm run from
both ends at once: the middle snake of the optimal path splits the problem in
two and each half is solved recursively, so working memory stays linear in the
input size.

Internally the pipeline works on mutable ``[tag, text]`` lists and freezes the
result into ``EditOp`` tuples at the boundary.
"""

from __future__ import annotations

from .edit_script import ComputationFailure, EditOp, EditScript, EditTag
from .logger import log

EQUAL = EditTag.EQUAL
INSERT = EditTag.INSERT
DELETE = EditTag.DELETE


def diff(a: str, b: str) -> EditScript:
    """Compute a minimal, coalesced edit script turning ``a`` into ``b``.

    Args:
        a: The first (old) text
        b: The second (new) text

    Returns:
        Tuple of EditOp values; empty when both texts are empty

    Raises:
        TypeError: If either input is not a string
        ComputationFailure: If the computation runs out of memory or stack
    """
    if not isinstance(a, str) or not isinstance(b, str):
        raise TypeError(f"diff() expects two strings, got {type(a).__name__} and {type(b).__name__}")

    try:
        ops = _diff_main(a, b)
        merge(ops)
    except (MemoryError, RecursionError) as e:
        raise ComputationFailure(f"diff of {len(a)} and {len(b)} characters exhausted resources") from e

    log.debug(f"[DIFF] {len(a)} vs {len(b)} chars -> {len(ops)} ops")
    return freeze(ops)


def coalesce(script: EditScript) -> EditScript:
    """Return the coalesced form of a script without changing what it reconstructs."""
    ops = thaw(script)
    merge(ops)
    return freeze(ops)


def freeze(ops: list[list]) -> EditScript:
    return tuple(EditOp(tag, text) for tag, text in ops)


def thaw(script: EditScript) -> list[list]:
    return [[op.tag, op.text] for op in script]


def common_prefix_length(a: str, b: str) -> int:
    """Length of the common prefix, found by binary search over slices."""
    if not a or not b or a[0] != b[0]:
        return 0
    low = 0
    high = min(len(a), len(b))
    mid = high
    start = 0
    while low < mid:
        if a[start:mid] == b[start:mid]:
            low = mid
            start = low
        else:
            high = mid
        mid = (high - low) // 2 + low
    return mid


def common_suffix_length(a: str, b: str) -> int:
    """Length of the common suffix, found by binary search over slices."""
    if not a or not b or a[-1] != b[-1]:
        return 0
    len_a = len(a)
    len_b = len(b)
    low = 0
    high = min(len_a, len_b)
    mid = high
    end = 0
    while low < mid:
        if a[len_a - mid:len_a - end] == b[len_b - mid:len_b - end]:
            low = mid
            end = low
        else:
            high = mid
        mid = (high - low) // 2 + low
    return mid


def _diff_main(a: str, b: str) -> list[list]:
    """Diff two texts after peeling off their common prefix and suffix."""
    if a == b:
        return [[EQUAL, a]] if a else []

    prefix_len = common_prefix_length(a, b)
    prefix = a[:prefix_len]
    a = a[prefix_len:]
    b = b[prefix_len:]

    suffix_len = common_suffix_length(a, b)
    suffix = a[len(a) - suffix_len:] if suffix_len else ""
    a = a[:len(a) - suffix_len]
    b = b[:len(b) - suffix_len]

    ops = _compute(a, b)
    if prefix:
        ops.insert(0, [EQUAL, prefix])
    if suffix:
        ops.append([EQUAL, suffix])
    return ops


def _compute(a: str, b: str) -> list[list]:
    """Diff two texts that share no common prefix or suffix."""
    if not a:
        return [[INSERT, b]]
    if not b:
        return [[DELETE, a]]

    if len(a) > len(b):
        longer, shorter, edit = a, b, DELETE
    else:
        longer, shorter, edit = b, a, INSERT

    # Earliest occurrence of the shorter text wins
    index = longer.find(shorter)
    if index != -1:
        ops = [[edit, longer[:index]], [EQUAL, shorter], [edit, longer[index + len(shorter):]]]
        return [op for op in ops if op[1]]

    if len(shorter) == 1:
        # Single character that does not occur in the other text
        return [[DELETE, a], [INSERT, b]]

    return _bisect(a, b)


def _bisect(a: str, b: str) -> list[list]:
    """Find the middle snake of the shortest edit path and split the problem there."""
    len_a = len(a)
    len_b = len(b)
    max_d = (len_a + len_b + 1) // 2
    v_offset = max_d
    v_length = 2 * max_d
    v1 = [-1] * v_length
    v2 = [-1] * v_length
    v1[v_offset + 1] = 0
    v2[v_offset + 1] = 0
    delta = len_a - len_b
    # With an odd delta the forward path detects the overlap, otherwise the reverse one
    front = delta % 2 != 0
    k1start = 0
    k1end = 0
    k2start = 0
    k2end = 0

    for d in range(max_d):
        # Forward path
        k1 = -d + k1start
        while k1 <= d - k1end:
            k1_offset = v_offset + k1
            if k1 == -d or (k1 != d and v1[k1_offset - 1] < v1[k1_offset + 1]):
                x1 = v1[k1_offset + 1]
            else:
                x1 = v1[k1_offset - 1] + 1
            y1 = x1 - k1
            while 0 <= x1 < len_a and 0 <= y1 < len_b and a[x1] == b[y1]:
                x1 += 1
                y1 += 1
            v1[k1_offset] = x1
            if x1 > len_a:
                # Ran off the right of the graph
                k1end += 2
            elif y1 > len_b:
                # Ran off the bottom of the graph
                k1start += 2
            elif front:
                k2_offset = v_offset + delta - k1
                if 0 <= k2_offset < v_length and v2[k2_offset] != -1:
                    x2 = len_a - v2[k2_offset]
                    if x1 >= x2:
                        return _bisect_split(a, b, x1, y1)
            k1 += 2

        # Reverse path
        k2 = -d + k2start
        while k2 <= d - k2end:
            k2_offset = v_offset + k2
            if k2 == -d or (k2 != d and v2[k2_offset - 1] < v2[k2_offset + 1]):
                x2 = v2[k2_offset + 1]
            else:
                x2 = v2[k2_offset - 1] + 1
            y2 = x2 - k2
            while 0 <= x2 < len_a and 0 <= y2 < len_b and a[len_a - x2 - 1] == b[len_b - y2 - 1]:
                x2 += 1
                y2 += 1
            v2[k2_offset] = x2
            if x2 > len_a:
                k2end += 2
            elif y2 > len_b:
                k2start += 2
            elif not front:
                k1_offset = v_offset + delta - k2
                if 0 <= k1_offset < v_length and v1[k1_offset] != -1:
                    x1 = v1[k1_offset]
                    y1 = v_offset + x1 - k1_offset
                    x2 = len_a - x2
                    if x1 >= x2:
                        return _bisect_split(a, b, x1, y1)
            k2 += 2

    # No common characters at all
    return [[DELETE, a], [INSERT, b]]


def _bisect_split(a: str, b: str, x: int, y: int) -> list[list]:
    return _diff_main(a[:x], b[:y]) + _diff_main(a[x:], b[y:])


def merge(ops: list[list]) -> None:
    """Coalesce a mutable script in place.

    Joins neighbouring ops with the same tag, orders every edit group as
    delete-then-insert, moves a common prefix or suffix of a delete/insert
    pair into the surrounding equalities, and slides single edits over a
    neighbouring equality when that removes the equality
    (``A<ins>BA</ins>C`` becomes ``<ins>AB</ins>AC``).
    """
    while True:
        _merge_runs(ops)
        if not _shift_single_edits(ops):
            return


def _merge_runs(ops: list[list]) -> None:
    ops[:] = [op for op in ops if op[1]]
    ops.append([EQUAL, ""])  # sentinel
    pointer = 0
    count_delete = 0
    count_insert = 0
    text_delete = ""
    text_insert = ""
    while pointer < len(ops):
        tag = ops[pointer][0]
        if tag is INSERT:
            count_insert += 1
            text_insert += ops[pointer][1]
            pointer += 1
            continue
        if tag is DELETE:
            count_delete += 1
            text_delete += ops[pointer][1]
            pointer += 1
            continue

        if count_delete + count_insert > 1:
            if count_delete and count_insert:
                common = common_prefix_length(text_insert, text_delete)
                if common:
                    start = pointer - count_delete - count_insert
                    if start > 0 and ops[start - 1][0] is EQUAL:
                        ops[start - 1][1] += text_insert[:common]
                    else:
                        ops.insert(0, [EQUAL, text_insert[:common]])
                        pointer += 1
                    text_insert = text_insert[common:]
                    text_delete = text_delete[common:]
                common = common_suffix_length(text_insert, text_delete)
                if common:
                    ops[pointer][1] = text_insert[len(text_insert) - common:] + ops[pointer][1]
                    text_insert = text_insert[:len(text_insert) - common]
                    text_delete = text_delete[:len(text_delete) - common]
            # Replace the run with at most one delete followed by one insert
            pointer -= count_delete + count_insert
            del ops[pointer:pointer + count_delete + count_insert]
            if text_delete:
                ops.insert(pointer, [DELETE, text_delete])
                pointer += 1
            if text_insert:
                ops.insert(pointer, [INSERT, text_insert])
                pointer += 1
            pointer += 1
        elif pointer != 0 and ops[pointer - 1][0] is EQUAL:
            ops[pointer - 1][1] += ops[pointer][1]
            del ops[pointer]
        else:
            pointer += 1
        count_delete = 0
        count_insert = 0
        text_delete = ""
        text_insert = ""

    if ops and not ops[-1][1]:
        ops.pop()


def _shift_single_edits(ops: list[list]) -> bool:
    changed = False
    pointer = 1
    while pointer < len(ops) - 1:
        before, edit, after = ops[pointer - 1], ops[pointer], ops[pointer + 1]
        if before[0] is EQUAL and after[0] is EQUAL:
            if edit[1].endswith(before[1]):
                # Slide the edit left over the previous equality
                edit[1] = before[1] + edit[1][:len(edit[1]) - len(before[1])]
                after[1] = before[1] + after[1]
                del ops[pointer - 1]
                changed = True
            elif edit[1].startswith(after[1]):
                # Slide the edit right over the next equality
                before[1] += after[1]
                edit[1] = edit[1][len(after[1]):] + after[1]
                del ops[pointer + 1]
                changed = True
        pointer += 1
    return changed
