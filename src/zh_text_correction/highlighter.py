"""
Highlight rendering for original and corrected text.

render_segments splits a text into literal and highlighted segments
without producing markup. segments_to_html lowers them to HTML, escaping
each segment's text on its own so nothing is escaped twice.
"""

import html
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from .edits import classify_edit
from .models import (
    Anomaly,
    AnomalyKind,
    CanonicalError,
    EditKind,
    PositionSpan,
    Segment,
    Side,
)
from .remapper import PositionMap, remap_positions

logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    """Segments for one side plus counts of errors that could not be shown."""
    segments: list[Segment] = field(default_factory=list)
    highlighted: int = 0
    collisions: int = 0
    out_of_bounds: int = 0
    anomalies: list[Anomaly] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(segment.text for segment in self.segments)

    def to_html(self) -> str:
        return segments_to_html(self.segments)


def format_tooltip(error: CanonicalError) -> str:
    """Hover text for a highlighted error (unescaped)."""
    original = error.original or "(空)"
    corrected = error.corrected or "(删除)"
    return f"{error.category}: {original} → {corrected} - {error.description or ''}"


def format_error_for_display(error: CanonicalError) -> str:
    """
    One-line summary of an error for lists and terminals.

    Examples:
        删除 "的" | 冗余错误
        添加 "了" | 缺失错误
        "足不初户" → "足不出户" | 别字 | 置信度: 95.0%
    """
    parts = []
    if error.corrected is not None:
        if error.corrected == "":
            parts.append(f'删除 "{error.original}"')
        elif error.original == "":
            parts.append(f'添加 "{error.corrected}"')
        else:
            parts.append(f'"{error.original}" → "{error.corrected}"')
    elif error.original:
        parts.append(f'删除 "{error.original}"')

    if error.description:
        parts.append(error.description)
    if error.confidence:
        parts.append(f"置信度: {error.confidence * 100:.1f}%")
    return " | ".join(parts)


def _original_span(error: CanonicalError) -> PositionSpan:
    # Insertions have no original text; mark one character at the anchor
    length = len(error.original) or error.length or 1
    return PositionSpan(error.position, error.position + length)


class _SegmentBuilder:
    """Appends non-overlapping segments while tracking the last end offset."""

    def __init__(self, text: str):
        self.text = text
        self.result = RenderResult()
        self.last_end = 0

    def skip(self, kind: AnomalyKind, error: CanonicalError, span: PositionSpan) -> None:
        if kind == AnomalyKind.RENDER_COLLISION:
            self.result.collisions += 1
            message = f"Span [{span.start}, {span.end}) overlaps text already highlighted"
        else:
            self.result.out_of_bounds += 1
            message = f"Span [{span.start}, {span.end}) is outside text of length {len(self.text)}"
        logger.debug(f"Not highlighting {error.error_id}: {message}")
        self.result.anomalies.append(Anomaly(
            kind=kind,
            message=message,
            category=error.category,
            position=error.position,
            error_id=error.error_id,
        ))

    def emit(self, error: CanonicalError, start: int, end: int) -> None:
        if start > self.last_end:
            self.result.segments.append(Segment(self.text[self.last_end:start]))
        self.result.segments.append(Segment(
            text=self.text[start:end],
            literal=False,
            category=error.category,
            tooltip=format_tooltip(error),
            error_id=error.error_id,
            is_marker=start == end,
        ))
        self.result.highlighted += 1
        self.last_end = end

    def finish(self) -> RenderResult:
        if self.last_end < len(self.text):
            self.result.segments.append(Segment(self.text[self.last_end:]))
        return self.result


def _render_original(text: str, errors: list[CanonicalError]) -> RenderResult:
    builder = _SegmentBuilder(text)
    for error in sorted(errors, key=lambda e: e.position):
        span = _original_span(error)
        if span.start < builder.last_end:
            builder.skip(AnomalyKind.RENDER_COLLISION, error, span)
            continue
        if not (0 <= span.start < len(text) and span.end > span.start):
            builder.skip(AnomalyKind.OUT_OF_BOUNDS, error, span)
            continue
        builder.emit(error, span.start, min(span.end, len(text)))
    return builder.finish()


def _render_corrected(
    text: str,
    errors: list[CanonicalError],
    position_map: PositionMap,
) -> RenderResult:
    builder = _SegmentBuilder(text)
    placed = []
    for error in errors:
        span = position_map.span_for(error)
        if span is not None:
            placed.append((span, error))
    # A real edit wins a tie with a no-change span at the same start
    placed.sort(key=lambda item: (
        item[0].start,
        classify_edit(item[1].original, item[1].corrected) == EditKind.NOOP,
        item[0].end,
    ))

    for span, error in placed:
        if span.start < builder.last_end:
            builder.skip(AnomalyKind.RENDER_COLLISION, error, span)
            continue
        if not (0 <= span.start <= len(text) and span.end >= span.start):
            builder.skip(AnomalyKind.OUT_OF_BOUNDS, error, span)
            continue
        builder.emit(error, span.start, min(span.end, len(text)))
    return builder.finish()


def render_segments(
    text: str,
    errors: Iterable[CanonicalError],
    side: Side = Side.ORIGINAL,
    position_map: Optional[PositionMap] = None,
) -> RenderResult:
    """
    Split a text into literal and highlighted segments.

    Args:
        text: The text for the requested side.
        errors: Errors to highlight. Informational entries are ignored.
        side: ORIGINAL uses the errors' own offsets; CORRECTED uses the
            position map.
        position_map: Spans in the corrected text. Computed from ``errors``
            when omitted; pass the stored map to keep renders consistent.

    Returns:
        RenderResult whose segment texts concatenate to ``text``.
    """
    real = [e for e in errors if not e.is_informational]
    if side == Side.ORIGINAL:
        return _render_original(text, real)
    if position_map is None:
        position_map = remap_positions(real)
    return _render_corrected(text, real, position_map)


def segments_to_html(segments: Iterable[Segment]) -> str:
    """Lower segments to HTML with error-highlight spans."""
    parts = []
    for segment in segments:
        inner = html.escape(segment.text)
        if segment.literal:
            parts.append(inner)
            continue
        classes = f"error-highlight error-{segment.category}"
        if segment.is_marker:
            classes += " deletion-marker"
        title = html.escape(segment.tooltip or "", quote=True)
        error_id = html.escape(segment.error_id or "", quote=True)
        parts.append(
            f'<span class="{classes}" data-error-id="{error_id}" title="{title}">{inner}</span>'
        )
    return "".join(parts)
