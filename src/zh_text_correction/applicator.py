"""
Applies canonical errors to the original text.

Edits are spliced from the highest offset down so that every remaining
edit still refers to untouched text. Edits that cannot be applied are
skipped and reported as anomalies rather than raised.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .config import CorrectionConfig
from .edits import should_apply, text_order, to_edit_operation
from .models import Anomaly, AnomalyKind, CanonicalError, EditKind

logger = logging.getLogger(__name__)


@dataclass
class ApplyOutcome:
    """Corrected text plus the errors that were applied and those skipped."""
    text: str
    applied: list[CanonicalError] = field(default_factory=list)
    anomalies: list[Anomaly] = field(default_factory=list)

    @property
    def in_text_order(self) -> list[CanonicalError]:
        """Applied errors ordered left to right as they appear in the corrected text."""
        return list(reversed(self.applied))


def apply_corrections(
    text: str,
    errors: Iterable[CanonicalError],
    config: Optional[CorrectionConfig] = None,
) -> ApplyOutcome:
    """
    Apply corrections to a text.

    Args:
        text: Original text the error offsets refer to.
        errors: Canonical errors. Order matters only between insertions at
            one offset, which read left to right in the order given.
        config: Supplies the empty-correction category set.

    Returns:
        ApplyOutcome with the corrected text, the applied errors in
        application order, and anomalies for edits that were out of bounds
        or overlapped an edit already applied.
    """
    config = config or CorrectionConfig()
    empty_categories = config.empty_correction_categories

    candidates = text_order(e for e in errors if should_apply(e, empty_categories))

    outcome = ApplyOutcome(text=text)
    # Lowest start offset spliced so far; text at or beyond it has moved.
    floor = len(text)

    # Reverse of text order: descending offset, and at one offset the edit
    # over the original text before the insertions in front of it.
    for error in reversed(candidates):
        op = to_edit_operation(error)
        current = outcome.text

        if not (0 <= op.start <= op.end <= len(current)):
            message = (
                f"Edit [{op.start}, {op.end}) is outside text of length {len(current)}"
            )
            logger.warning(f"Skipping {error.error_id}: {message}")
            outcome.anomalies.append(Anomaly(
                kind=AnomalyKind.OUT_OF_BOUNDS,
                message=message,
                category=error.category,
                position=error.position,
                error_id=error.error_id,
            ))
            continue

        if op.end > floor:
            message = f"Edit [{op.start}, {op.end}) overlaps an edit applied at {floor}"
            logger.warning(f"Skipping {error.error_id}: {message}")
            outcome.anomalies.append(Anomaly(
                kind=AnomalyKind.OVERLAPPING_EDIT,
                message=message,
                category=error.category,
                position=error.position,
                error_id=error.error_id,
            ))
            continue

        outcome.text = current[:op.start] + op.replacement + current[op.end:]
        outcome.applied.append(error)
        if op.kind != EditKind.NOOP:
            floor = op.start

    return outcome


def apply(text: str, errors: Iterable[CanonicalError]) -> str:
    """Apply corrections and return only the corrected text."""
    return apply_corrections(text, errors).text
