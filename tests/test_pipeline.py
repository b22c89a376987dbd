"""Tests for end-to-end processing of vendor results."""

import pytest

from zh_text_correction.config import CorrectionConfig, NO_ERRORS_MESSAGE
from zh_text_correction.models import AnomalyKind, Severity, Side
from zh_text_correction.pipeline import (
    CorrectionResult,
    InvalidInputError,
    informational_entry,
    process_result,
)


class TestProcessResult:
    """Tests for process_result."""

    def test_idiom_typo(self):
        """Test the basic single-typo correction."""
        result = process_result({"char": [[0, "足不初户", "足不出户", "别字"]]}, "足不初户")

        assert isinstance(result, CorrectionResult)
        assert result.corrected_text == "足不出户"
        assert result.statistics.total_errors == 1
        assert result.statistics.correction_rate == "100.0%"
        assert result.has_corrections
        assert result.anomalies == []

    def test_full_envelope(self, vendor_envelope, sample_text, sample_correction_data):
        """Test a full base64-encoded vendor response."""
        response = vendor_envelope(sample_correction_data, encode=True)
        result = process_result(response, sample_text)
        assert result.corrected_text == "他足不出户地在家学习。"
        assert result.errors[0].description == "别字"

    def test_errors_sorted_by_position(self):
        """Test errors come back in ascending position order."""
        data = {
            "punc": [[5, "，", "。", "重复标点"]],
            "char": [[0, "初", "出", "别字"]],
        }
        result = process_result(data, "初二三四五，")
        assert [e.position for e in result.errors] == [0, 5]
        assert result.corrected_text == "出二三四五。"

    def test_no_errors_gives_informational_entry(self):
        """Test empty category lists yield the informational entry."""
        result = process_result({"char": [], "word": []}, "今天天气很好。")

        assert result.corrected_text == "今天天气很好。"
        assert len(result.errors) == 1
        entry = result.errors[0]
        assert entry.is_informational
        assert entry.severity == Severity.INFO
        assert entry.description == NO_ERRORS_MESSAGE
        assert result.real_errors == []
        assert result.statistics.total_errors == 0
        assert result.anomalies == []

    def test_missing_vendor_result(self):
        """Test a missing vendor result is an empty-input anomaly."""
        result = process_result(None, "abc")
        assert result.corrected_text == "abc"
        assert result.errors[0].is_informational
        assert result.anomaly_counts == {"empty_input": 1}

    def test_empty_original_text(self):
        """Test an empty original text."""
        result = process_result({"char": [[0, "a", "b", "d"]]}, "")
        assert result.corrected_text == ""
        assert result.anomalies[0].kind == AnomalyKind.EMPTY_INPUT

    @pytest.mark.parametrize("text", [None, 123, ["abc"]])
    def test_non_string_text_raises(self, text):
        """Test a non-string original text is rejected."""
        with pytest.raises(InvalidInputError):
            process_result({"char": []}, text)

    def test_parse_failure(self):
        """Test undecodable result text becomes a parse anomaly."""
        response = {"payload": {"result": {"text": "%%% not json %%%"}}}
        result = process_result(response, "abc")
        assert result.corrected_text == "abc"
        assert result.anomalies[0].kind == AnomalyKind.PARSE_FAILURE

    def test_out_of_bounds_dropped(self):
        """Test errors past the end of the text are dropped."""
        result = process_result({"char": [[10, "abc", "x", "d"]]}, "abc")
        assert result.corrected_text == "abc"
        assert result.errors[0].is_informational
        assert result.anomaly_counts == {"out_of_bounds": 1}

    def test_invalid_record_reported(self):
        """Test invalid records are reported while valid ones apply."""
        data = {"char": [[0, "a", "A", "d"], [-1, "b", "B", "d"]]}
        result = process_result(data, "ab")
        assert result.corrected_text == "Ab"
        assert result.anomaly_counts == {"validation_failure": 1}

    def test_overlap_counted_in_metadata(self):
        """Test overlapping errors are listed but only one is applied."""
        data = {"char": [[1, "bcd", "X", "d"], [3, "de", "Y", "d"]]}
        result = process_result(data, "abcdef")
        assert result.corrected_text == "abcYf"
        assert result.metadata["errorCount"] == 2
        assert result.metadata["appliedCount"] == 1
        assert result.anomaly_counts == {"overlapping_edit": 1}

    def test_custom_config(self):
        """Test a custom no-errors message is used."""
        config = CorrectionConfig(no_errors_message="OK")
        result = process_result({"char": []}, "abc", config)
        assert result.errors[0].description == "OK"


class TestCorrectionResult:
    """Tests for CorrectionResult rendering and serialization."""

    def test_highlight_both_sides(self, vendor_envelope, sample_text, sample_correction_data):
        """Test highlights use the original and remapped offsets."""
        result = process_result(vendor_envelope(sample_correction_data), sample_text)

        original = result.highlight(Side.ORIGINAL)
        corrected = result.highlight(Side.CORRECTED)
        assert [s.text for s in original.segments if not s.literal] == ["足不初户"]
        assert [s.text for s in corrected.segments if not s.literal] == ["足不出户"]
        assert original.text == sample_text
        assert corrected.text == result.corrected_text
        assert 'data-error-id="char-0"' in result.highlight_html(Side.CORRECTED)

    def test_insertions_at_shared_offset(self):
        """Test corrected-side highlights follow insertions sharing an offset."""
        data = {
            "miss": [[1, "", "X", "缺字"]],
            "punc": [[1, "", "YY", "标点"]],
            "char": [[1, "b", "Z", "别字"]],
        }
        result = process_result(data, "abc")

        assert result.corrected_text == "aXYYZc"
        corrected = result.highlight(Side.CORRECTED)
        assert [s.text for s in corrected.segments if not s.literal] == ["X", "YY", "Z"]
        assert corrected.collisions == 0
        for error in result.real_errors:
            span = result.position_map.span_for(error)
            assert result.corrected_text[span.start:span.end] == error.corrected

    def test_to_dict(self):
        """Test serialized keys and values."""
        result = process_result({"char": [[0, "初", "出", "别字"]]}, "初")
        data = result.to_dict()
        assert data["originalText"] == "初"
        assert data["correctedText"] == "出"
        assert data["errors"][0]["id"] == "char-0"
        assert data["errors"][0]["severity"] == "high"
        assert data["statistics"]["totalErrors"] == 1
        assert data["metadata"]["correctedLength"] == 1
        assert "highlights" not in data

    def test_to_dict_with_html(self):
        """Test highlights are included on request."""
        result = process_result({"char": [[0, "初", "出", "别字"]]}, "初")
        data = result.to_dict(include_html=True)
        assert "error-char" in data["highlights"]["original"]
        assert "出" in data["highlights"]["corrected"]

    def test_informational_entry_defaults(self):
        """Test the informational entry shape."""
        entry = informational_entry()
        assert entry.error_id == "info-0"
        assert entry.category == "info"
        assert entry.confidence == 1.0
        assert entry.source == "system"
