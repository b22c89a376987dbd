"""
Edit classification shared by the applicator and the position remapper.

Both stages must agree on what a correction item does to the text, so
the decision lives in one place.
"""

from typing import Iterable, Optional

from .models import CanonicalError, EditKind, EditOperation


def classify_edit(original: str, corrected: Optional[str]) -> EditKind:
    """
    Decide what kind of splice a correction describes.

    - REPLACE: original is non-empty and a correction exists (an empty
      correction counts, it replaces the original with nothing).
    - INSERT: original is empty and the correction is non-empty.
    - DELETE: original is non-empty and no correction exists (None).
    - NOOP: anything else, e.g. both sides empty.
    """
    if original and corrected is not None:
        return EditKind.REPLACE
    if not original and corrected:
        return EditKind.INSERT
    if original and corrected is None:
        return EditKind.DELETE
    return EditKind.NOOP


def to_edit_operation(error: CanonicalError) -> EditOperation:
    """Turn a canonical error into the splice it describes on the original text."""
    kind = classify_edit(error.original, error.corrected)
    start = error.position
    replacement = error.corrected or ""

    if kind == EditKind.INSERT:
        return EditOperation(kind, start, start, replacement, len(replacement))
    if kind == EditKind.DELETE:
        end = start + len(error.original)
        return EditOperation(kind, start, end, "", -len(error.original))
    if kind == EditKind.REPLACE:
        end = start + len(error.original)
        return EditOperation(
            kind, start, end, replacement, len(replacement) - len(error.original)
        )
    # Both sides empty: nothing to splice
    return EditOperation(kind, start, start, replacement, len(replacement))


def should_apply(error: CanonicalError, empty_correction_categories: frozenset[str]) -> bool:
    """
    Whether the applicator should splice this error into the text.

    Informational entries are never applied. Replacements are applied only
    when they change something. A NOOP is applied only for categories where
    an explicit empty correction is meaningful.
    """
    if error.is_informational:
        return False
    kind = classify_edit(error.original, error.corrected)
    if kind in (EditKind.INSERT, EditKind.DELETE):
        return True
    if kind == EditKind.REPLACE:
        return error.corrected != error.original
    return error.category in empty_correction_categories and error.corrected == ""


_LAYOUT_RANK = {
    EditKind.INSERT: 0,
    EditKind.REPLACE: 1,
    EditKind.DELETE: 1,
    EditKind.NOOP: 2,
}


def text_order(errors: Iterable[CanonicalError]) -> list[CanonicalError]:
    """
    Order errors by where their results sit, left to right, in the corrected text.

    At a shared offset, insertions come first in input order, then the edit
    that consumes the original text, then edits that change nothing. The
    applicator splices in exactly the reverse of this order and the
    remapper walks it forwards, so both describe the same text.
    """
    indexed = list(enumerate(errors))
    indexed.sort(key=lambda item: (
        item[1].position,
        _LAYOUT_RANK[classify_edit(item[1].original, item[1].corrected)],
        item[0],
    ))
    return [error for _, error in indexed]
