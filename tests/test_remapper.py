"""Tests for mapping error offsets into the corrected text."""

from zh_text_correction.applicator import apply, apply_corrections
from zh_text_correction.models import PositionSpan
from zh_text_correction.pipeline import informational_entry
from zh_text_correction.remapper import remap_positions


class TestRemapPositions:
    """Tests for remap_positions."""

    def test_running_delta(self, make_error):
        """Test a longer replacement shifts later spans."""
        first = make_error(1, "b", "XYZ")
        second = make_error(4, "e", "Q")
        position_map = remap_positions([second, first])

        assert position_map.span_for(first) == PositionSpan(1, 4)
        assert position_map.span_for(second) == PositionSpan(6, 7)
        corrected = apply("abcdef", [first, second])
        assert corrected == "aXYZcdQf"
        assert corrected[6:7] == "Q"

    def test_deletion_is_zero_width(self, make_error):
        """Test a deletion maps to an empty span."""
        error = make_error(8, "c", None)
        span = remap_positions([error]).span_for(error)
        assert span == PositionSpan(8, 8)
        assert span.is_zero_width

    def test_insertion_shifts_following(self, make_error):
        """Test an insertion spans its text and shifts later errors."""
        insert = make_error(5, "", "XY", category="miss")
        replace = make_error(6, "w", "W")
        position_map = remap_positions([insert, replace])

        assert position_map.span_for(insert) == PositionSpan(5, 7)
        assert position_map.span_for(replace) == PositionSpan(8, 9)
        assert apply("hello world", [insert, replace])[8:9] == "W"

    def test_shared_offset_keeps_both(self, make_error):
        """Test two errors at one offset get separate spans."""
        insert = make_error(1, "", "X", category="miss")
        replace = make_error(1, "b", "Y")
        position_map = remap_positions([replace, insert])

        assert len(position_map) == 2
        assert position_map.span_for(insert) == PositionSpan(1, 2)
        assert position_map.span_for(replace) == PositionSpan(2, 3)
        assert position_map.get(1) == PositionSpan(1, 2)
        assert 1 in position_map

    def test_spans_match_applied_text_at_shared_offset(self, make_error):
        """Test every span slices its correction out of the applied text."""
        errors = [
            make_error(1, "", "X", category="miss"),
            make_error(1, "", "YY", category="punc"),
            make_error(1, "b", "Z"),
            make_error(2, "c", "Q"),
        ]
        outcome = apply_corrections("abcd", errors)
        assert outcome.text == "aXYYZQd"

        for position_map in (remap_positions(errors), remap_positions(outcome.in_text_order)):
            for error in outcome.applied:
                span = position_map.span_for(error)
                assert outcome.text[span.start:span.end] == error.corrected

    def test_noop_after_replacement_at_same_offset(self, make_error):
        """Test a no-change item is mapped after a real edit sharing its offset."""
        noop = make_error(1, "", "", category="miss")
        replace = make_error(1, "b", "YY")
        position_map = remap_positions([noop, replace])

        assert position_map.span_for(replace) == PositionSpan(1, 3)
        assert position_map.span_for(noop) == PositionSpan(2, 3)

    def test_noop_gets_one_character(self, make_error):
        """Test an edit that changes nothing still gets a visible span."""
        error = make_error(3, "", "", category="miss")
        assert remap_positions([error]).span_for(error) == PositionSpan(3, 4)

    def test_informational_skipped(self):
        """Test the informational entry is not mapped."""
        position_map = remap_positions([informational_entry()])
        assert len(position_map) == 0
        assert position_map.get(0) is None
