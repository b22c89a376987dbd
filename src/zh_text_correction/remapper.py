"""
Maps original-text offsets of applied errors to spans in the corrected text.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .edits import classify_edit, text_order
from .models import CanonicalError, EditKind, PositionSpan

logger = logging.getLogger(__name__)


@dataclass
class PositionMap:
    """
    Corrected-text spans for a batch of errors.

    Spans are keyed by error id so two errors at the same original offset
    keep separate spans. ``get`` looks up by original offset and returns the
    span of the first error recorded there.
    """
    by_error_id: dict[str, PositionSpan] = field(default_factory=dict)
    by_position: dict[int, PositionSpan] = field(default_factory=dict)

    def add(self, error: CanonicalError, span: PositionSpan) -> None:
        self.by_error_id[error.error_id] = span
        self.by_position.setdefault(error.position, span)

    def get(self, position: int) -> Optional[PositionSpan]:
        return self.by_position.get(position)

    def span_for(self, error: CanonicalError) -> Optional[PositionSpan]:
        return self.by_error_id.get(error.error_id)

    def __contains__(self, position: int) -> bool:
        return position in self.by_position

    def __len__(self) -> int:
        return len(self.by_error_id)


def remap_positions(errors: Iterable[CanonicalError]) -> PositionMap:
    """
    Compute where each error lands in the corrected text.

    Walks the errors by ascending original offset with a running length
    delta. Deletions get a zero-width span; edits that change nothing get a
    one-character span after any real edit at the same offset so they can
    still be highlighted.

    Args:
        errors: The errors that were applied to produce the corrected text,
            in the order given to the applicator or in corrected-text order.

    Returns:
        PositionMap for the batch.
    """
    position_map = PositionMap()
    offset = 0

    for error in text_order(errors):
        if error.is_informational:
            continue
        start = error.position + offset
        kind = classify_edit(error.original, error.corrected)
        corrected = error.corrected or ""

        if kind == EditKind.REPLACE:
            end = start + len(corrected)
            delta = len(corrected) - len(error.original)
        elif kind == EditKind.INSERT:
            end = start + len(corrected)
            delta = len(corrected)
        elif kind == EditKind.DELETE:
            end = start
            delta = -len(error.original)
        else:
            end = start + 1
            delta = 0

        position_map.add(error, PositionSpan(start, end))
        offset += delta

    logger.debug(f"Remapped {len(position_map)} error positions, net delta {offset}")
    return position_map
