"""
Aggregate statistics for a correction batch.
"""

from typing import Iterable

from .diff_engine import similarity_ratio
from .models import CanonicalError, Severity, Statistics


def format_percentage(ratio: float) -> str:
    """Format a [0, 1] ratio as a percentage with one decimal place."""
    return f"{ratio * 100:.1f}%"


def summarize(
    original_text: str,
    corrected_text: str,
    errors: Iterable[CanonicalError],
) -> Statistics:
    """
    Summarize a correction batch.

    Informational entries are not counted. The correction rate is the share
    of errors whose correction differs from the original ("0%" for an empty
    batch); text similarity compares the two texts.
    """
    real = [e for e in errors if not e.is_informational]
    stats = Statistics(
        total_errors=len(real),
        original_length=len(original_text),
        corrected_length=len(corrected_text),
    )

    for error in real:
        stats.errors_by_category[error.category] = (
            stats.errors_by_category.get(error.category, 0) + 1
        )
        if error.severity != Severity.INFO:
            stats.severity_count[error.severity.value] += 1

    if real:
        changed = sum(1 for e in real if e.is_change)
        stats.correction_rate = format_percentage(changed / len(real))
    stats.text_similarity = format_percentage(similarity_ratio(original_text, corrected_text))
    return stats
