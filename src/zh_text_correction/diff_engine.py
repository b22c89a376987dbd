"""
Similarity and diff primitives for the text comparison tool.

This module provides:
- Edit distance and a normalized similarity ratio
- A longest-common-subsequence table over lines
- Line-level diff (lookahead heuristic or LCS alignment)
- Character-level diff for lines reported as modified

Everything here is pure and operates on code points.
"""

import html
import logging
import re
from typing import Optional

import Levenshtein

from .config import CorrectionConfig
from .models import CharDiff, CharToken, ComparisonResult, DiffLine, DiffLineType

logger = logging.getLogger(__name__)


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings (unit-cost insert/delete/substitute)."""
    return Levenshtein.distance(a, b)


def similarity_ratio(a: str, b: str) -> float:
    """
    Similarity of two strings in [0, 1].

    Defined as 1 - distance / max(len(a), len(b)). Two empty strings are
    identical (1.0); an empty string against a non-empty one scores 0.0.
    """
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - levenshtein_distance(a, b) / max(len(a), len(b))


def compute_lcs(lines1: list[str], lines2: list[str]) -> list[list[int]]:
    """
    Build the LCS length table for two line lists.

    Returns:
        Table of size (len(lines1) + 1) x (len(lines2) + 1) where
        table[i][j] is the LCS length of lines1[:i] and lines2[:j].
    """
    m, n = len(lines1), len(lines2)
    table = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(1, m + 1):
        for j in range(1, n + 1):
            if lines1[i - 1] == lines2[j - 1]:
                table[i][j] = table[i - 1][j - 1] + 1
            else:
                table[i][j] = max(table[i - 1][j], table[i][j - 1])
    return table


def _is_similar(left: str, right: str, threshold: float) -> bool:
    if not left or not right:
        return False
    return similarity_ratio(left, right) >= threshold


def _lookahead_diff(
    lines1: list[str],
    lines2: list[str],
    threshold: float,
    lookahead: int,
) -> list[DiffLine]:
    # Greedy walk. A left line with an exact match in the next `lookahead`
    # right lines is kept for later and the right side is reported as added.
    # This is a heuristic; it does not guarantee a minimal diff.
    diff = []
    m, n = len(lines1), len(lines2)
    i = j = 0
    while i < m or j < n:
        if i < m and j < n and lines1[i] == lines2[j]:
            diff.append(DiffLine(DiffLineType.UNCHANGED, lines1[i], lines2[j]))
            i += 1
            j += 1
        elif i < m and j < n and _is_similar(lines1[i], lines2[j], threshold):
            diff.append(DiffLine(DiffLineType.MODIFIED, lines1[i], lines2[j]))
            i += 1
            j += 1
        elif i < m and (j >= n or lines1[i] not in lines2[j:j + lookahead]):
            diff.append(DiffLine(DiffLineType.REMOVED, lines1[i], None))
            i += 1
        else:
            diff.append(DiffLine(DiffLineType.ADDED, None, lines2[j]))
            j += 1
    return diff


def _flush_gap(
    removed: list[str],
    added: list[str],
    threshold: float,
    diff: list[DiffLine],
) -> None:
    """Pair up the removed/added lines found between two LCS anchors."""
    for k in range(max(len(removed), len(added))):
        left = removed[k] if k < len(removed) else None
        right = added[k] if k < len(added) else None
        if left is not None and right is not None and _is_similar(left, right, threshold):
            diff.append(DiffLine(DiffLineType.MODIFIED, left, right))
            continue
        if left is not None:
            diff.append(DiffLine(DiffLineType.REMOVED, left, None))
        if right is not None:
            diff.append(DiffLine(DiffLineType.ADDED, None, right))
    removed.clear()
    added.clear()


def _lcs_diff(lines1: list[str], lines2: list[str], threshold: float) -> list[DiffLine]:
    table = compute_lcs(lines1, lines2)

    # Backtrack into forward-ordered (op, index) steps
    steps = []
    i, j = len(lines1), len(lines2)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and lines1[i - 1] == lines2[j - 1]:
            steps.append(("equal", i - 1, j - 1))
            i -= 1
            j -= 1
        elif j > 0 and (i == 0 or table[i][j - 1] >= table[i - 1][j]):
            steps.append(("add", None, j - 1))
            j -= 1
        else:
            steps.append(("remove", i - 1, None))
            i -= 1
    steps.reverse()

    diff: list[DiffLine] = []
    removed: list[str] = []
    added: list[str] = []
    for op, li, ri in steps:
        if op == "equal":
            _flush_gap(removed, added, threshold, diff)
            diff.append(DiffLine(DiffLineType.UNCHANGED, lines1[li], lines2[ri]))
        elif op == "remove":
            removed.append(lines1[li])
        else:
            added.append(lines2[ri])
    _flush_gap(removed, added, threshold, diff)
    return diff


def line_diff(
    lines1: list[str],
    lines2: list[str],
    similarity_threshold: float = 0.6,
    lookahead: int = 3,
    strategy: str = "lookahead",
) -> list[DiffLine]:
    """
    Compute a line-level diff.

    Args:
        lines1: Left-hand lines.
        lines2: Right-hand lines.
        similarity_threshold: Unequal non-empty lines at or above this
            similarity are reported as modified.
        lookahead: Window used by the "lookahead" strategy.
        strategy: "lookahead" (heuristic, default) or "lcs" (exact alignment
            of equal lines, similar leftovers paired as modified).

    Returns:
        DiffLine rows in display order.
    """
    if strategy == "lcs":
        return _lcs_diff(lines1, lines2, similarity_threshold)
    if strategy != "lookahead":
        raise ValueError(f"Unknown line diff strategy: {strategy}")
    return _lookahead_diff(lines1, lines2, similarity_threshold, lookahead)


def char_diff(a: str, b: str) -> CharDiff:
    """
    Character-level alignment of two strings.

    Builds the edit-distance matrix and walks it back from the end. When a
    substitution costs the same as a separate insert and delete, the
    substitution wins, so a changed character shows up as one removed token
    on the left facing one added token on the right.

    Returns:
        CharDiff whose left tokens are "same"/"removed" and whose right
        tokens are "same"/"added".
    """
    len1, len2 = len(a), len(b)
    matrix = [[0] * (len2 + 1) for _ in range(len1 + 1)]
    for i in range(len1 + 1):
        matrix[i][0] = i
    for j in range(len2 + 1):
        matrix[0][j] = j
    for i in range(1, len1 + 1):
        for j in range(1, len2 + 1):
            if a[i - 1] == b[j - 1]:
                matrix[i][j] = matrix[i - 1][j - 1]
            else:
                matrix[i][j] = 1 + min(
                    matrix[i - 1][j],
                    matrix[i][j - 1],
                    matrix[i - 1][j - 1],
                )

    left: list[CharToken] = []
    right: list[CharToken] = []
    i, j = len1, len2
    while i > 0 or j > 0:
        if i > 0 and j > 0 and a[i - 1] == b[j - 1]:
            left.append(CharToken("same", a[i - 1]))
            right.append(CharToken("same", b[j - 1]))
            i -= 1
            j -= 1
        elif i > 0 and j > 0 and matrix[i][j] == matrix[i - 1][j - 1] + 1:
            left.append(CharToken("removed", a[i - 1]))
            right.append(CharToken("added", b[j - 1]))
            i -= 1
            j -= 1
        elif i > 0 and (j == 0 or matrix[i][j] == matrix[i - 1][j] + 1):
            left.append(CharToken("removed", a[i - 1]))
            i -= 1
        else:
            right.append(CharToken("added", b[j - 1]))
            j -= 1

    left.reverse()
    right.reverse()
    return CharDiff(left=left, right=right)


def render_char_diff_html(tokens: list[CharToken]) -> str:
    """Render char-diff tokens as escaped HTML with char-added/char-removed spans."""
    parts = []
    for token in tokens:
        char = html.escape(token.char)
        if token.type == "added":
            parts.append(f'<span class="char-added">{char}</span>')
        elif token.type == "removed":
            parts.append(f'<span class="char-removed">{char}</span>')
        else:
            parts.append(char)
    return "".join(parts)


def preprocess_for_compare(
    text: Optional[str],
    ignore_case: bool = True,
    ignore_whitespace: bool = False,
) -> str:
    """Apply the comparison options to one input text."""
    if not text:
        return ""
    processed = text
    if ignore_case:
        processed = processed.lower()
    if ignore_whitespace:
        processed = re.sub(r"\s+", " ", processed).strip()
    return processed


def compare_texts(
    left: Optional[str],
    right: Optional[str],
    ignore_case: bool = True,
    ignore_whitespace: bool = False,
    config: Optional[CorrectionConfig] = None,
) -> ComparisonResult:
    """
    Compare two arbitrary texts line by line.

    Args:
        left: Left-hand text.
        right: Right-hand text.
        ignore_case: Lower-case both texts before comparing.
        ignore_whitespace: Collapse whitespace runs and strip both texts.
        config: Supplies the similarity threshold, lookahead window and
            line alignment strategy. Defaults to CorrectionConfig().

    Returns:
        ComparisonResult with rows, per-type counts and the compared texts.
        Two empty inputs give an empty result.
    """
    config = config or CorrectionConfig()
    left_text = preprocess_for_compare(left, ignore_case, ignore_whitespace)
    right_text = preprocess_for_compare(right, ignore_case, ignore_whitespace)

    if not left_text and not right_text:
        return ComparisonResult(left_text=left_text, right_text=right_text)

    lines = line_diff(
        left_text.split("\n"),
        right_text.split("\n"),
        similarity_threshold=config.similarity_threshold,
        lookahead=config.lookahead_window,
        strategy=config.line_alignment,
    )

    stats = {"added": 0, "removed": 0, "modified": 0, "unchanged": 0}
    for line in lines:
        if line.type == DiffLineType.MODIFIED:
            line.char_diff = char_diff(line.left or "", line.right or "")
        stats[line.type.value] += 1

    logger.debug(f"Compared {len(lines)} diff rows: {stats}")
    return ComparisonResult(
        lines=lines,
        stats=stats,
        left_text=left_text,
        right_text=right_text,
    )
