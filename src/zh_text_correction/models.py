"""
Data models for the text-correction engine.

This module defines the core data structures shared by normalization,
correction application, position remapping, highlighting and statistics.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Severity(Enum):
    """Display/priority tier of an error, derived from its category."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"  # Only used by the "no errors found" sentinel


class EditKind(Enum):
    """The four edit semantics a correction item can carry."""
    REPLACE = "replace"
    INSERT = "insert"
    DELETE = "delete"
    NOOP = "noop"


class AnomalyKind(Enum):
    """Data-quality signals raised by vendor payloads."""
    VALIDATION_FAILURE = "validation_failure"
    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAPPING_EDIT = "overlapping_edit"
    RENDER_COLLISION = "render_collision"
    PARSE_FAILURE = "parse_failure"
    EMPTY_INPUT = "empty_input"


class Side(Enum):
    """Which text a highlight rendering targets."""
    ORIGINAL = "original"
    CORRECTED = "corrected"


@dataclass(frozen=True)
class CanonicalError:
    """One normalized correction item.

    Positions are offsets into the original text, counted in code points.
    `corrected` keeps the distinction between an explicit deletion ("")
    and a missing correction (None).
    """
    category: str
    position: int
    original: str
    corrected: Optional[str]
    length: int
    description: str
    severity: Severity = Severity.MEDIUM
    confidence: Optional[float] = None
    error_id: str = ""
    sub_type: Optional[str] = None
    source: str = "xunfei"
    is_informational: bool = False

    @property
    def end(self) -> int:
        """End offset of the affected span in the original text."""
        return self.position + self.length

    @property
    def is_change(self) -> bool:
        """Whether the item proposes text different from the original."""
        return self.corrected != self.original

    def to_dict(self) -> dict:
        """Serialize for JSON responses."""
        return {
            "id": self.error_id,
            "type": self.category,
            "position": self.position,
            "length": self.length,
            "original": self.original,
            "corrected": self.corrected,
            "description": self.description,
            "severity": self.severity.value,
            "confidence": self.confidence,
            "subType": self.sub_type,
            "source": self.source,
            "isInformational": self.is_informational,
        }


@dataclass(frozen=True)
class EditOperation:
    """Classification of a CanonicalError into a concrete splice."""
    kind: EditKind
    start: int
    end: int  # End offset in the original text
    replacement: str
    length_delta: int


@dataclass
class Anomaly:
    """A skipped item and the reason it was skipped."""
    kind: AnomalyKind
    message: str
    category: Optional[str] = None
    position: Optional[int] = None
    error_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "category": self.category,
            "position": self.position,
            "errorId": self.error_id,
        }


@dataclass
class RecordValidation:
    """Result of validating one raw vendor record."""
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)


@dataclass(frozen=True)
class PositionSpan:
    """A [start, end) span in corrected-text coordinates."""
    start: int
    end: int

    @property
    def is_zero_width(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class Segment:
    """One piece of a highlight rendering.

    Literal segments carry plain text; highlighted segments carry the
    category and tooltip of the error they mark. A marker is a zero-width
    highlighted segment showing where text was removed.
    """
    text: str
    literal: bool = True
    category: Optional[str] = None
    tooltip: Optional[str] = None
    error_id: Optional[str] = None
    is_marker: bool = False


@dataclass
class Statistics:
    """Aggregate statistics for one correction batch."""
    total_errors: int = 0
    errors_by_category: dict[str, int] = field(default_factory=dict)
    severity_count: dict[str, int] = field(
        default_factory=lambda: {"high": 0, "medium": 0, "low": 0}
    )
    correction_rate: str = "0%"
    text_similarity: str = "100.0%"
    original_length: int = 0
    corrected_length: int = 0

    def to_dict(self) -> dict:
        return {
            "totalErrors": self.total_errors,
            "errorsByCategory": dict(self.errors_by_category),
            "severityCount": dict(self.severity_count),
            "correctionRate": self.correction_rate,
            "textSimilarity": self.text_similarity,
            "originalLength": self.original_length,
            "correctedLength": self.corrected_length,
        }


class DiffLineType(Enum):
    """Line-level diff classification."""
    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    ADDED = "added"
    REMOVED = "removed"


@dataclass(frozen=True)
class CharToken:
    """A single character in a char-level diff."""
    type: str  # "same", "removed" or "added"
    char: str


@dataclass
class CharDiff:
    """Character alignment of two strings."""
    left: list[CharToken] = field(default_factory=list)
    right: list[CharToken] = field(default_factory=list)


@dataclass
class DiffLine:
    """One row of a line diff."""
    type: DiffLineType
    left: Optional[str]
    right: Optional[str]
    char_diff: Optional[CharDiff] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type.value,
            "left": self.left,
            "right": self.right,
        }
        if self.char_diff is not None:
            data["charDiff"] = {
                "left": [{"type": t.type, "char": t.char} for t in self.char_diff.left],
                "right": [{"type": t.type, "char": t.char} for t in self.char_diff.right],
            }
        return data


@dataclass
class ComparisonResult:
    """Result of comparing two arbitrary texts."""
    lines: list[DiffLine] = field(default_factory=list)
    stats: dict[str, int] = field(
        default_factory=lambda: {"added": 0, "removed": 0, "modified": 0, "unchanged": 0}
    )
    left_text: str = ""
    right_text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def has_changes(self) -> bool:
        return any(line.type != DiffLineType.UNCHANGED for line in self.lines)

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "stats": dict(self.stats),
        }
