"""
End-to-end processing of a vendor correction result.

process_result is the single entry point used by the CLI and the API:

    vendor response -> normalization -> bounds filter -> applicator
                    -> position remapper -> statistics

Data-quality problems in the vendor payload never raise. They are
collected as Anomaly records on the CorrectionResult so callers can log
or display them. Only a non-string original text is rejected.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Optional

from .applicator import apply_corrections
from .categories import INFO_CATEGORY
from .config import CorrectionConfig
from .highlighter import RenderResult, render_segments
from .models import (
    Anomaly,
    AnomalyKind,
    CanonicalError,
    Severity,
    Side,
    Statistics,
)
from .normalization import CorrectionDataError, extract_correction_data, normalize_vendor_result
from .remapper import PositionMap, remap_positions
from .statistics import summarize

logger = logging.getLogger(__name__)


class InvalidInputError(ValueError):
    """Raised when process_result is called with an unusable original text."""
    pass


def informational_entry(config: Optional[CorrectionConfig] = None) -> CanonicalError:
    """The single entry returned when nothing needs correcting."""
    config = config or CorrectionConfig()
    return CanonicalError(
        category=INFO_CATEGORY,
        position=0,
        original="",
        corrected="",
        length=0,
        description=config.no_errors_message,
        severity=Severity.INFO,
        confidence=1.0,
        error_id=f"{INFO_CATEGORY}-0",
        source="system",
        is_informational=True,
    )


@dataclass
class CorrectionResult:
    """
    Outcome of processing one vendor response against its original text.

    Attributes:
        original_text: Text the vendor checked.
        corrected_text: Text with every applicable correction spliced in.
        errors: Errors in ascending position order, or a single
            informational entry when there are none.
        statistics: Aggregate counts (informational entry excluded).
        position_map: Corrected-text spans of the applied errors. Every
            render of this result reuses it.
        anomalies: Items skipped because of vendor data problems.
        metadata: Lengths and counts for display.
    """
    original_text: str
    corrected_text: str
    errors: list[CanonicalError] = field(default_factory=list)
    statistics: Statistics = field(default_factory=Statistics)
    position_map: PositionMap = field(default_factory=PositionMap)
    anomalies: list[Anomaly] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def real_errors(self) -> list[CanonicalError]:
        """Errors excluding the informational entry."""
        return [e for e in self.errors if not e.is_informational]

    @property
    def has_corrections(self) -> bool:
        return self.corrected_text != self.original_text

    @property
    def anomaly_counts(self) -> dict[str, int]:
        """Number of anomalies per kind."""
        return dict(Counter(a.kind.value for a in self.anomalies))

    def highlight(self, side: Side = Side.ORIGINAL) -> RenderResult:
        """Render highlight segments for one side of the result."""
        if side == Side.ORIGINAL:
            return render_segments(self.original_text, self.real_errors, Side.ORIGINAL)
        return render_segments(
            self.corrected_text, self.real_errors, Side.CORRECTED, self.position_map
        )

    def highlight_html(self, side: Side = Side.ORIGINAL) -> str:
        return self.highlight(side).to_html()

    def to_dict(self, include_html: bool = False) -> dict:
        """Serialize for JSON responses."""
        data = {
            "originalText": self.original_text,
            "correctedText": self.corrected_text,
            "errors": [e.to_dict() for e in self.errors],
            "statistics": self.statistics.to_dict(),
            "anomalies": [a.to_dict() for a in self.anomalies],
            "anomalyCounts": self.anomaly_counts,
            "metadata": dict(self.metadata),
        }
        if include_html:
            data["highlights"] = {
                "original": self.highlight_html(Side.ORIGINAL),
                "corrected": self.highlight_html(Side.CORRECTED),
            }
        return data


def _informational_result(
    text: str,
    anomalies: list[Anomaly],
    config: CorrectionConfig,
) -> CorrectionResult:
    return CorrectionResult(
        original_text=text,
        corrected_text=text,
        errors=[informational_entry(config)],
        statistics=summarize(text, text, []),
        anomalies=anomalies,
        metadata={
            "originalLength": len(text),
            "correctedLength": len(text),
            "errorCount": 0,
            "appliedCount": 0,
            "anomalyCount": len(anomalies),
        },
    )


def _drop_out_of_bounds(
    text: str,
    errors: list[CanonicalError],
    anomalies: list[Anomaly],
) -> list[CanonicalError]:
    kept = []
    for error in errors:
        if error.end > len(text):
            message = (
                f"Span [{error.position}, {error.end}) exceeds text length {len(text)}"
            )
            logger.warning(f"Dropping {error.error_id}: {message}")
            anomalies.append(Anomaly(
                kind=AnomalyKind.OUT_OF_BOUNDS,
                message=message,
                category=error.category,
                position=error.position,
                error_id=error.error_id,
            ))
        else:
            kept.append(error)
    return kept


def process_result(
    vendor_result: Any,
    original_text: str,
    config: Optional[CorrectionConfig] = None,
) -> CorrectionResult:
    """
    Reconcile a vendor correction response with its original text.

    Args:
        vendor_result: Full vendor response, a bare category-keyed object,
            a ``{"ws": [...]}`` object, or None.
        original_text: The text that was sent for correction.
        config: Engine configuration. Defaults to CorrectionConfig().

    Returns:
        CorrectionResult with corrected text, ordered errors, statistics,
        the position map and any anomalies.

    Raises:
        InvalidInputError: If original_text is not a string.
    """
    if not isinstance(original_text, str):
        raise InvalidInputError(
            f"original_text must be a string, got {type(original_text).__name__}"
        )
    config = config or CorrectionConfig()
    anomalies: list[Anomaly] = []

    if not original_text:
        anomalies.append(Anomaly(AnomalyKind.EMPTY_INPUT, "Original text is empty"))
        return _informational_result(original_text, anomalies, config)

    try:
        data = extract_correction_data(vendor_result)
    except CorrectionDataError as e:
        logger.warning(f"Could not parse vendor result: {e}")
        anomalies.append(Anomaly(AnomalyKind.PARSE_FAILURE, str(e)))
        return _informational_result(original_text, anomalies, config)

    if data is None:
        anomalies.append(Anomaly(AnomalyKind.EMPTY_INPUT, "Vendor result has no correction data"))
        return _informational_result(original_text, anomalies, config)

    report = normalize_vendor_result(data, config)
    anomalies.extend(report.anomalies)

    errors = _drop_out_of_bounds(original_text, report.errors, anomalies)
    if not errors:
        return _informational_result(original_text, anomalies, config)

    outcome = apply_corrections(original_text, errors, config)
    anomalies.extend(outcome.anomalies)

    ordered = sorted(errors, key=lambda e: e.position)
    result = CorrectionResult(
        original_text=original_text,
        corrected_text=outcome.text,
        errors=ordered,
        statistics=summarize(original_text, outcome.text, ordered),
        position_map=remap_positions(outcome.in_text_order),
        anomalies=anomalies,
        metadata={
            "originalLength": len(original_text),
            "correctedLength": len(outcome.text),
            "errorCount": len(ordered),
            "appliedCount": len(outcome.applied),
            "anomalyCount": len(anomalies),
        },
    )

    logger.info(
        f"Processed {len(ordered)} errors ({len(outcome.applied)} applied, "
        f"{len(anomalies)} anomalies)"
    )
    return result
