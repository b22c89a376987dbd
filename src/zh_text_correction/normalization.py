"""
Normalization of raw vendor correction records.

The iFlytek service returns corrections grouped by category, each record
a positional list ``[offset, original, corrected, fourth, ...]`` where the
fourth field is either a sub-type identifier or a free-text description.
Older responses use a ``ws`` segment array instead, with offsets relative
to each word and records that may be objects rather than lists.

This module turns both shapes into CanonicalError instances:
- validate_raw_record collects every problem with one record
- resolve_description picks the human-readable explanation
- normalize_record builds a single CanonicalError (or None)
- normalize_vendor_result walks a whole vendor payload
- extract_correction_data unwraps the HTTP response envelope
"""

import base64
import binascii
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .categories import KNOWN_CATEGORY_KEYS, ErrorCategory, get_category
from .config import CorrectionConfig
from .models import Anomaly, AnomalyKind, CanonicalError, RecordValidation

logger = logging.getLogger(__name__)


class CorrectionDataError(ValueError):
    """Raised when the vendor's result text cannot be decoded."""
    pass


@dataclass
class NormalizationReport:
    """Errors produced from one vendor payload, plus what was skipped."""
    errors: list[CanonicalError] = field(default_factory=list)
    anomalies: list[Anomaly] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def _is_position(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def record_from_mapping(record: Mapping[str, Any]) -> list[Any]:
    """
    Convert a legacy object-form record to the positional form.

    Keys: pos, cur (or ori_fragment), correct (or cor_fragment),
    description (or desc), confidence (or conf). Trailing absent fields are
    dropped so the positional validator sees the real field count.
    """
    fields = [
        record.get("pos", 0),
        record.get("cur", record.get("ori_fragment")),
        record.get("correct", record.get("cor_fragment")),
        record.get("description", record.get("desc")),
        record.get("confidence", record.get("conf")),
    ]
    while len(fields) > 3 and fields[-1] is None:
        fields.pop()
    return fields


def validate_raw_record(
    record: Any,
    config: Optional[CorrectionConfig] = None,
) -> RecordValidation:
    """
    Validate one positional record.

    Every rule is checked and its finding collected before the record is
    judged, so a caller sees all problems at once.

    Args:
        record: Raw record from the vendor.
        config: Supplies field-count, position and length limits.

    Returns:
        RecordValidation with errors (reject) and warnings (accept).
    """
    config = config or CorrectionConfig()
    result = RecordValidation()

    if not isinstance(record, (list, tuple)):
        result.add_error(f"Record must be a list, got {type(record).__name__}")
        return result

    if len(record) < config.min_record_fields:
        result.add_error(
            f"Record has {len(record)} fields, expected at least {config.min_record_fields}"
        )
    if len(record) > config.max_record_fields:
        result.add_warning(
            f"Record has {len(record)} fields, more than {config.max_record_fields}"
        )
    if len(record) == 3:
        result.add_warning("Record is missing its fourth field (description or type)")

    position = record[0] if len(record) > 0 else None
    original = record[1] if len(record) > 1 else None
    corrected = record[2] if len(record) > 2 else None

    if not _is_position(position) or position < config.position_min:
        result.add_error(
            f"Invalid position {position!r}, expected an integer >= {config.position_min}"
        )

    if original is None and corrected is None:
        result.add_error("Original and corrected text are both absent")
    if original is None and corrected == "":
        result.add_warning("Original text is absent and correction is empty")

    for label, value in (("original", original), ("corrected", corrected)):
        if value is None:
            continue
        if not isinstance(value, str):
            result.add_error(f"{label} text must be a string, got {type(value).__name__}")
        elif len(value) > config.max_field_length:
            result.add_warning(
                f"{label} text is {len(value)} characters, "
                f"longer than {config.max_field_length}"
            )

    return result


def resolve_description(
    category: str,
    fourth: Any,
    categories: Optional[Mapping[str, ErrorCategory]] = None,
) -> str:
    """
    Pick the description for a record.

    A known sub-type identifier maps to its canonical phrase. Otherwise a
    fourth field that is a string of two or more characters and not itself
    a category key is used as-is. Everything else falls back to the
    category's default description.
    """
    entry = get_category(category, categories)
    if isinstance(fourth, str) and fourth in entry.subtypes:
        return entry.subtypes[fourth]

    known_keys = KNOWN_CATEGORY_KEYS if categories is None else categories.keys()

    if isinstance(fourth, str) and len(fourth) > 1 and fourth not in known_keys:
        return fourth
    return entry.description


def normalize_record(
    category: str,
    record: Any,
    index: int,
    config: Optional[CorrectionConfig] = None,
    position_offset: int = 0,
    length_fallback: Optional[int] = None,
    source: str = "xunfei",
) -> Optional[CanonicalError]:
    """
    Build a CanonicalError from one raw record.

    Args:
        category: Vendor category key.
        record: Positional list or legacy object-form record.
        index: Index used to build the error id.
        config: Validation limits and category table.
        position_offset: Added to the record's offset (legacy ws form).
        length_fallback: Length used when the original text is empty.
        source: Where the record came from.

    Returns:
        The normalized error, or None if the record failed validation.
    """
    config = config or CorrectionConfig()
    if isinstance(record, Mapping):
        record = record_from_mapping(record)

    validation = validate_raw_record(record, config)
    for warning in validation.warnings:
        logger.debug(f"{category}[{index}]: {warning}")
    if not validation.is_valid:
        return None

    position, original, corrected = record[0], record[1], record[2]
    fourth = record[3] if len(record) > 3 else None
    raw_confidence = record[4] if len(record) > 4 else None

    entry = get_category(category, config.categories)
    original = original or ""
    confidence = None
    if isinstance(raw_confidence, (int, float)) and not isinstance(raw_confidence, bool):
        confidence = float(raw_confidence)

    sub_type = None
    if isinstance(fourth, str) and (
        fourth in entry.subtypes or entry.fourth_field == "type_identifier"
    ):
        sub_type = fourth

    if original:
        length = len(original)
    else:
        length = length_fallback or 0

    return CanonicalError(
        category=category,
        position=int(position) + position_offset,
        original=original,
        corrected=corrected,
        length=length,
        description=resolve_description(category, fourth, config.categories),
        severity=entry.severity,
        confidence=confidence,
        error_id=f"{category}-{index}",
        sub_type=sub_type,
        source=source,
    )


def _validation_anomaly(category: str, record: Any, index: int, config: CorrectionConfig) -> Anomaly:
    if isinstance(record, Mapping):
        record = record_from_mapping(record)
    validation = validate_raw_record(record, config)
    position = record[0] if isinstance(record, (list, tuple)) and record else None
    return Anomaly(
        kind=AnomalyKind.VALIDATION_FAILURE,
        message="; ".join(validation.errors),
        category=category,
        position=position if _is_position(position) else None,
        error_id=f"{category}-{index}",
    )


class _Collector:
    """Accumulates normalized errors with per-category running ids."""

    def __init__(self, config: CorrectionConfig):
        self.config = config
        self.report = NormalizationReport()
        self._counters: dict[str, int] = {}

    def add(
        self,
        category: str,
        record: Any,
        position_offset: int = 0,
        length_fallback: Optional[int] = None,
        source: str = "xunfei",
    ) -> None:
        index = self._counters.get(category, 0)
        self._counters[category] = index + 1

        error = normalize_record(
            category, record, index, self.config,
            position_offset=position_offset,
            length_fallback=length_fallback,
            source=source,
        )
        if error is None:
            anomaly = _validation_anomaly(category, record, index, self.config)
            logger.warning(f"Skipping invalid {category} record {record!r}: {anomaly.message}")
            self.report.anomalies.append(anomaly)
        else:
            self.report.errors.append(error)


def _normalize_ws(segments: list, collector: _Collector) -> None:
    known = collector.config.categories
    offset = 0
    for segment in segments:
        if not isinstance(segment, Mapping):
            continue
        words = segment.get("cw")
        if not isinstance(words, list):
            continue
        for word in words:
            if not isinstance(word, Mapping):
                continue
            text = word.get("w") or ""
            word_length = len(text) if isinstance(text, str) else 0
            for category in known:
                records = word.get(category)
                if not isinstance(records, list):
                    continue
                for record in records:
                    collector.add(
                        category, record,
                        position_offset=offset,
                        length_fallback=word_length,
                        source="ws",
                    )
            offset += word_length


def normalize_vendor_result(
    data: Any,
    config: Optional[CorrectionConfig] = None,
) -> NormalizationReport:
    """
    Normalize a whole vendor payload.

    Accepts the category-keyed object (``{"char": [[...], ...], ...}``),
    a ``{"ws": [...]}`` wrapper, or a bare ws segment list.

    Returns:
        NormalizationReport with errors in vendor order.
    """
    config = config or CorrectionConfig()
    collector = _Collector(config)

    if isinstance(data, Mapping) and isinstance(data.get("ws"), list):
        _normalize_ws(data["ws"], collector)
    elif isinstance(data, list):
        _normalize_ws(data, collector)
    elif isinstance(data, Mapping):
        for category, records in data.items():
            if not isinstance(records, list):
                continue
            for record in records:
                collector.add(category, record)
    elif data is not None:
        collector.report.anomalies.append(Anomaly(
            kind=AnomalyKind.PARSE_FAILURE,
            message=f"Unsupported correction data type: {type(data).__name__}",
        ))

    logger.debug(
        f"Normalized {len(collector.report.errors)} errors, "
        f"skipped {len(collector.report.anomalies)}"
    )
    return collector.report


def _decode_result_text(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        pass
    try:
        decoded = base64.b64decode(text, validate=True).decode("utf-8")
        return json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise CorrectionDataError(f"Result text is neither JSON nor base64 JSON: {e}")


def extract_correction_data(vendor_result: Any) -> Optional[Any]:
    """
    Unwrap the correction data from a vendor response.

    Handles the full envelope (``payload.result.text``, either JSON or
    base64-encoded JSON, or an already-decoded object), a bare
    ``{"ws": [...]}`` object, and a bare category-keyed object.

    Returns:
        The correction data, or None when the response carries none.

    Raises:
        CorrectionDataError: If the result text cannot be decoded.
    """
    if not vendor_result:
        return None
    if isinstance(vendor_result, list):
        return {"ws": vendor_result}
    if not isinstance(vendor_result, Mapping):
        raise CorrectionDataError(
            f"Vendor result must be an object, got {type(vendor_result).__name__}"
        )

    payload = vendor_result.get("payload")
    if isinstance(payload, Mapping):
        result = payload.get("result")
        text = result.get("text") if isinstance(result, Mapping) else None
        if not text:
            return None
        if isinstance(text, (Mapping, list)):
            return text
        if not isinstance(text, str):
            raise CorrectionDataError(
                f"Result text must be a string, got {type(text).__name__}"
            )
        return _decode_result_text(text)

    if "ws" in vendor_result:
        return vendor_result
    if any(isinstance(value, list) for value in vendor_result.values()):
        return vendor_result
    return None
