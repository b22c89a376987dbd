"""
zh-text-correction

A Chinese text-correction toolkit built around the iFlytek correction API:
- Reconciles the vendor's correction items into a corrected text
- Maps error positions onto both the original and the corrected text
- Renders highlight segments and aggregate statistics
- Compares two texts line by line and character by character
"""

__version__ = "1.0.0"
__author__ = "zh-text-correction Team"

from .config import CorrectionConfig, ServiceConfig, LineAlignment

from .models import (
    AnomalyKind,
    Anomaly,
    CanonicalError,
    ComparisonResult,
    DiffLine,
    DiffLineType,
    EditKind,
    Segment,
    Severity,
    Side,
    Statistics,
)

from .categories import (
    CATEGORY_TABLE,
    ErrorCategory,
    get_category,
)

from .diff_engine import (
    char_diff,
    compare_texts,
    compute_lcs,
    levenshtein_distance,
    line_diff,
    similarity_ratio,
)

from .normalization import (
    extract_correction_data,
    normalize_record,
    normalize_vendor_result,
    resolve_description,
    validate_raw_record,
)

from .applicator import ApplyOutcome, apply, apply_corrections
from .remapper import PositionMap, remap_positions
from .highlighter import RenderResult, render_segments, segments_to_html
from .statistics import summarize

from .pipeline import (
    CorrectionResult,
    InvalidInputError,
    process_result,
)

__all__ = [
    # Config
    "CorrectionConfig",
    "ServiceConfig",
    "LineAlignment",
    # Models
    "AnomalyKind",
    "Anomaly",
    "CanonicalError",
    "ComparisonResult",
    "DiffLine",
    "DiffLineType",
    "EditKind",
    "Segment",
    "Severity",
    "Side",
    "Statistics",
    # Categories
    "CATEGORY_TABLE",
    "ErrorCategory",
    "get_category",
    # Diff tool
    "char_diff",
    "compare_texts",
    "compute_lcs",
    "levenshtein_distance",
    "line_diff",
    "similarity_ratio",
    # Normalization
    "extract_correction_data",
    "normalize_record",
    "normalize_vendor_result",
    "resolve_description",
    "validate_raw_record",
    # Correction stages
    "ApplyOutcome",
    "apply",
    "apply_corrections",
    "PositionMap",
    "remap_positions",
    "RenderResult",
    "render_segments",
    "segments_to_html",
    "summarize",
    # Pipeline
    "CorrectionResult",
    "InvalidInputError",
    "process_result",
]
