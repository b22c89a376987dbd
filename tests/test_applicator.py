"""Tests for applying corrections to the original text."""

from zh_text_correction.applicator import apply, apply_corrections
from zh_text_correction.models import AnomalyKind
from zh_text_correction.pipeline import informational_entry


class TestApplyCorrections:
    """Tests for apply_corrections."""

    def test_replacement(self, make_error):
        """Test a simple replacement."""
        outcome = apply_corrections("他足不初户", [make_error(1, "足不初户", "足不出户")])
        assert outcome.text == "他足不出户"
        assert len(outcome.applied) == 1
        assert outcome.anomalies == []

    def test_deletion_with_absent_correction(self, make_error):
        """Test an absent correction deletes the original text."""
        outcome = apply_corrections("hello abc world", [make_error(8, "c", None)])
        assert outcome.text == "hello ab world"

    def test_deletion_with_empty_correction(self, make_error):
        """Test an empty correction replaces the original with nothing."""
        outcome = apply_corrections(
            "hello abc world", [make_error(8, "c", "", category="redund")]
        )
        assert outcome.text == "hello ab world"

    def test_insertion(self, make_error):
        """Test an insertion at an offset."""
        outcome = apply_corrections("hello world", [make_error(5, "", "XY", category="miss")])
        assert outcome.text == "helloXY world"

    def test_order_independent(self, make_error):
        """Test the result does not depend on input order."""
        errors = [
            make_error(1, "b", "BB"),
            make_error(4, "e", ""),
            make_error(6, "", "!", category="miss"),
        ]
        forward = apply_corrections("abcdef", errors)
        backward = apply_corrections("abcdef", list(reversed(errors)))
        assert forward.text == backward.text == "aBBcdf!"

    def test_applied_in_descending_order(self, make_error):
        """Test edits are recorded from the highest offset down."""
        errors = [make_error(0, "a", "A"), make_error(2, "c", "C"), make_error(1, "b", "B")]
        outcome = apply_corrections("abc", errors)
        assert [e.position for e in outcome.applied] == [2, 1, 0]
        assert outcome.text == "ABC"

    def test_insert_and_replace_at_same_offset(self, make_error):
        """Test an insertion lands in front of text replaced at the same offset."""
        errors = [
            make_error(1, "", "X", category="miss"),
            make_error(1, "b", "Y"),
        ]
        assert apply("abc", errors) == "aXYc"

    def test_insertions_at_same_offset_keep_input_order(self, make_error):
        """Test insertions sharing an offset read left to right in input order."""
        errors = [
            make_error(1, "", "X", category="miss"),
            make_error(1, "", "YY", category="punc"),
        ]
        assert apply("abc", errors) == "aXYYbc"
        assert apply("abc", list(reversed(errors))) == "aYYXbc"

    def test_insertions_before_replacement_at_same_offset(self, make_error):
        """Test several insertions land in front of text replaced at their offset."""
        errors = [
            make_error(1, "b", "Z"),
            make_error(1, "", "X", category="miss"),
            make_error(1, "", "YY", category="punc"),
        ]
        outcome = apply_corrections("abc", errors)
        assert outcome.text == "aXYYZc"
        assert [e.error_id for e in outcome.in_text_order] == ["miss-1", "punc-1", "char-1"]

    def test_noop_does_not_block_replacement(self, make_error):
        """Test an empty/empty item at an offset leaves a replacement there applicable."""
        errors = [make_error(1, "", "", category="miss"), make_error(1, "b", "Y")]
        outcome = apply_corrections("abc", errors)
        assert outcome.text == "aYc"
        assert len(outcome.applied) == 2
        assert outcome.anomalies == []

    def test_overlapping_edit_skipped(self, make_error):
        """Test an edit reaching into already-spliced text is skipped."""
        errors = [make_error(1, "bcd", "X"), make_error(3, "de", "Y")]
        outcome = apply_corrections("abcdef", errors)
        assert outcome.text == "abcYf"
        assert len(outcome.anomalies) == 1
        assert outcome.anomalies[0].kind == AnomalyKind.OVERLAPPING_EDIT
        assert outcome.anomalies[0].error_id == "char-1"

    def test_out_of_bounds_skipped(self, make_error):
        """Test an edit past the end of the text is skipped."""
        outcome = apply_corrections("abc", [make_error(2, "xyz", "q")])
        assert outcome.text == "abc"
        assert outcome.applied == []
        assert outcome.anomalies[0].kind == AnomalyKind.OUT_OF_BOUNDS

    def test_empty_list(self):
        """Test no errors leaves the text unchanged."""
        outcome = apply_corrections("unchanged", [])
        assert outcome.text == "unchanged"
        assert outcome.applied == []

    def test_unchanged_replacement_not_applied(self, make_error):
        """Test a correction equal to the original is not applied."""
        outcome = apply_corrections("abc", [make_error(1, "b", "b")])
        assert outcome.applied == []

    def test_empty_correction_category_noop(self, make_error):
        """Test an empty/empty item is applied only for categories that allow it."""
        allowed = apply_corrections("abc", [make_error(1, "", "", category="miss")])
        assert len(allowed.applied) == 1
        assert allowed.text == "abc"

        refused = apply_corrections("abc", [make_error(1, "", "", category="char")])
        assert refused.applied == []

    def test_informational_entry_not_applied(self):
        """Test the informational sentinel never edits the text."""
        outcome = apply_corrections("abc", [informational_entry()])
        assert outcome.text == "abc"
        assert outcome.applied == []

    def test_deletion_removes_exact_span(self, make_error):
        """Test a deletion removes exactly its length at its offset."""
        text = "hello ab world"
        outcome = apply_corrections(text, [make_error(5, "ab", None)])
        assert outcome.text == text[:5] + text[7:]
        assert len(outcome.text) == len(text) - 2

    def test_descending_order_matches_independent_slices(self, make_error):
        """Test two disjoint edits equal slicing each against the original."""
        text = "0123456789"
        errors = [make_error(2, "23", "AB"), make_error(8, "8", "XYZ")]
        expected = text[:2] + "AB" + text[4:8] + "XYZ" + text[9:]
        assert apply(text, errors) == expected
