import os
import random
import sys
from typing import Iterator, List, Tuple

import pytest

# Ensure local src path is importable
_here = os.path.dirname(os.path.dirname(__file__))  # delta_text project folder
_src = os.path.join(_here, "src")
if os.path.isdir(_src) and _src not in sys.path:
    sys.path.insert(0, _src)

from delta_text.utils.io import FileReadResult  # noqa: E402


def lcs_length(a: str, b: str) -> int:
    """Reference LCS length by dynamic programming, for minimality checks."""
    previous = [0] * (len(b) + 1)
    for char_a in a:
        current = [0]
        for j, char_b in enumerate(b):
            if char_a == char_b:
                current.append(previous[j] + 1)
            else:
                current.append(max(previous[j + 1], current[j]))
        previous = current
    return previous[-1]


def random_text_pairs(count: int = 150, seed: int = 1234, alphabet: str = "ab c\n.") -> List[Tuple[str, str]]:
    """Deterministic batch of small text pairs drawn from a tiny alphabet."""
    rng = random.Random(seed)
    pairs = []
    for _ in range(count):
        a = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 14)))
        b = "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 14)))
        pairs.append((a, b))
    return pairs


@pytest.fixture
def text_pairs() -> List[Tuple[str, str]]:
    """Small text pairs plus a few hand-picked realistic ones."""
    pairs = random_text_pairs()
    pairs.extend([
        ("hello world", "hello brave world"),
        ("cat", "bat"),
        ("The quick brown fox", "The quick red fox jumps"),
        ("line one\nline two\n", "line one\nline 2\nline three\n"),
        ("mouse", "sofas"),
        ("abcdef", "fedcba"),
        ("日本語のテキスト", "日本のテキスト"),
        ("tab\tand\x00nul", "tab and\x00null"),
    ])
    return pairs


@pytest.fixture
def input_files(tmp_path) -> Iterator[Tuple[str, str]]:
    """Two small input files on disk."""
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"
    first.write_text("hello world\n", encoding="utf-8")
    second.write_text("hello brave world\n", encoding="utf-8")
    yield str(first), str(second)


@pytest.fixture
def loaded_inputs() -> Tuple[FileReadResult, FileReadResult]:
    """In-memory inputs as the loader would hand them to the UI."""
    return (
        FileReadResult(path="/tmp/first.txt", content="cat", encoding="utf-8"),
        FileReadResult(path="/tmp/second.txt", content="bat", encoding="utf-8"),
    )
