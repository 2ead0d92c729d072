"""
Tests for Confidence Estimation

Tests per-match scoring and the weighted overall interpretation score.
"""

import pytest


class TestDocumentPatternConfidence:
    """Tests for document_pattern_confidence"""

    def test_base_score_for_empty_input(self):
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        assert document_pattern_confidence("", "", "", 0) == pytest.approx(0.5)

    def test_all_bonuses(self):
        """25-char pattern, real path with extension, priority 3"""
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        score = document_pattern_confidence("x" * 25, "docs/guide.md", "docs/guide.md", 3)

        # 0.5 + 0.1 (length) + 0.1 (path) + 0.1 (extension) + 0.06 (priority)
        assert score == pytest.approx(0.86)

    def test_extension_requires_path_separator(self):
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        bare = document_pattern_confidence("", "", "README.md", 0)
        pathed = document_pattern_confidence("", "", "docs/README.md", 0)
        no_ext = document_pattern_confidence("", "", "docs/README", 0)

        assert bare == pytest.approx(0.5)
        assert no_ext == pytest.approx(0.6)
        assert pathed == pytest.approx(0.7)

    def test_unrecognized_extension(self):
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        assert document_pattern_confidence("", "", "src/main.rs", 0) == pytest.approx(0.6)

    def test_capped_at_one(self):
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        score = document_pattern_confidence("p" * 500, "", "a/b.py", 1000)

        assert score == pytest.approx(1.0)

    def test_monotonic_in_pattern_length(self):
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        scores = [
            document_pattern_confidence("p" * n, "text", "docs/a.md", 1)
            for n in range(0, 70)
        ]

        assert all(a <= b for a, b in zip(scores, scores[1:]))
        # Length bonus stops growing at 50 chars
        assert scores[50] == scores[69]

    def test_negative_priority_ignored(self):
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        assert document_pattern_confidence("", "", "", -10) == pytest.approx(0.5)

    @pytest.mark.parametrize("priority", [None, "high", float("nan"), -1])
    def test_odd_priority_does_not_raise(self, priority):
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        assert document_pattern_confidence(None, None, None, priority) == pytest.approx(0.5)

    @pytest.mark.parametrize("pattern,file_path", [
        (123, "docs/a.md"),
        ("p", 42),
        (["docs/"], {"path": "a/b.md"}),
        (float("nan"), b"docs/a.md"),
    ])
    def test_non_string_inputs_do_not_raise(self, pattern, file_path):
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        score = document_pattern_confidence(pattern, object(), file_path, 0)

        assert 0.0 <= score <= 1.0

    def test_non_string_values_count_as_empty(self):
        from adaptive_scribe.interpretation.confidence import document_pattern_confidence

        assert document_pattern_confidence(123, "", 42, 0) == pytest.approx(0.5)


class TestSignalRuleConfidence:
    """Tests for signal_rule_confidence"""

    def test_contains_gets_no_type_bonus(self):
        from adaptive_scribe.interpretation.confidence import signal_rule_confidence

        assert signal_rule_confidence("contains", "", "", 0) == pytest.approx(0.5)

    def test_regex_bonus(self):
        from adaptive_scribe.interpretation.confidence import signal_rule_confidence

        # 0.5 + 0.15 (regex) + 0.075 (15 of 30 chars)
        assert signal_rule_confidence("regex", "x" * 15, "", 0) == pytest.approx(0.725)

    def test_handoff_reason_beats_contains(self):
        from adaptive_scribe.interpretation.confidence import signal_rule_confidence

        args = ("needs review", "the design doc needs review", 2)

        assert signal_rule_confidence("handoff_reason", *args) > signal_rule_confidence("contains", *args)

    def test_accepts_condition_type_enum(self):
        from adaptive_scribe.common.schemas import ConditionType
        from adaptive_scribe.interpretation.confidence import signal_rule_confidence

        assert signal_rule_confidence(ConditionType.REGEX, "", "", 0) == pytest.approx(0.65)

    def test_unknown_condition_type(self):
        from adaptive_scribe.interpretation.confidence import signal_rule_confidence

        assert signal_rule_confidence("fuzzy", "", "", 0) == pytest.approx(0.5)

    def test_matched_text_bonus_capped(self):
        from adaptive_scribe.interpretation.confidence import signal_rule_confidence

        half = signal_rule_confidence("contains", "", "t" * 50, 0)
        full = signal_rule_confidence("contains", "", "t" * 100, 0)
        over = signal_rule_confidence("contains", "", "t" * 5000, 0)

        assert half == pytest.approx(0.55)
        assert full == pytest.approx(0.6)
        assert over == pytest.approx(0.6)

    def test_capped_at_one(self):
        from adaptive_scribe.interpretation.confidence import signal_rule_confidence

        score = signal_rule_confidence("handoff_reason", "c" * 30, "m" * 100, 5)

        assert score == pytest.approx(1.0)

    @pytest.mark.parametrize("condition_type,condition,matched_text", [
        ("regex", 7, ["x"]),
        (["regex"], None, 3.5),
        ({"type": "regex"}, float("nan"), {"text": "t"}),
    ])
    def test_non_string_inputs_do_not_raise(self, condition_type, condition, matched_text):
        from adaptive_scribe.interpretation.confidence import signal_rule_confidence

        score = signal_rule_confidence(condition_type, condition, matched_text, 1)

        assert 0.0 <= score <= 1.0


class TestOverallConfidence:
    """Tests for overall_confidence"""

    def test_no_evidence_floor(self):
        from adaptive_scribe.interpretation.confidence import overall_confidence

        assert overall_confidence([], [], [], "") == 0.1
        assert overall_confidence(None, None) == 0.1

    def test_no_evidence_floor_ignores_coverage(self):
        """Even a fully covered summary gets 0.1 with no matches"""
        from adaptive_scribe.common.schemas import UnmatchedSegment
        from adaptive_scribe.interpretation.confidence import overall_confidence

        segments = [UnmatchedSegment(text="abc", start_index=0, end_index=3)]

        assert overall_confidence([], [], segments, "abcdefghij") == 0.1
        assert overall_confidence([], [], [], "abcdefghij") == 0.1

    def test_document_only_with_partial_coverage(self):
        """(0.9*0.4 + 0.8*0.2) / 0.6"""
        from adaptive_scribe.common.schemas import DocumentPatternMatch, UnmatchedSegment
        from adaptive_scribe.interpretation.confidence import overall_confidence

        summary = "s" * 100
        segments = [UnmatchedSegment(text="u" * 20, start_index=10, end_index=30)]
        docs = [DocumentPatternMatch(pattern="p", confidence=0.9)]

        score = overall_confidence(docs, [], segments, summary)

        assert score == pytest.approx(0.8667, abs=1e-4)

    def test_both_categories_full_coverage(self):
        from adaptive_scribe.common.schemas import DocumentPatternMatch, SignalRuleMatch
        from adaptive_scribe.interpretation.confidence import overall_confidence

        docs = [
            DocumentPatternMatch(confidence=0.7),
            DocumentPatternMatch(confidence=0.9),
        ]
        rules = [SignalRuleMatch(confidence=0.6)]

        # (0.8*0.4 + 0.6*0.4 + 1.0*0.2) / 1.0
        assert overall_confidence(docs, rules, [], "summary") == pytest.approx(0.76)

    def test_empty_category_excluded_not_averaged(self):
        """A missing category must not pull the score toward 0"""
        from adaptive_scribe.common.schemas import SignalRuleMatch
        from adaptive_scribe.interpretation.confidence import overall_confidence

        rules = [SignalRuleMatch(confidence=1.0)]

        assert overall_confidence([], rules) == pytest.approx(1.0)

    def test_unscored_matches_are_scored(self):
        from adaptive_scribe.common.schemas import DocumentPatternMatch
        from adaptive_scribe.interpretation.confidence import overall_confidence

        docs = [DocumentPatternMatch()]  # confidence None -> 0.5

        assert overall_confidence(docs, []) == pytest.approx((0.5 * 0.4 + 0.2) / 0.6)

    def test_supplied_zero_confidence_is_used(self):
        from adaptive_scribe.common.schemas import DocumentPatternMatch
        from adaptive_scribe.interpretation.confidence import overall_confidence

        docs = [DocumentPatternMatch(pattern="x" * 50, file_path="a/b.md", confidence=0.0)]

        assert overall_confidence(docs, []) == pytest.approx(0.2 / 0.6)

    def test_coverage_uses_character_length(self):
        from adaptive_scribe.common.schemas import UnmatchedSegment
        from adaptive_scribe.interpretation.confidence import coverage

        segments = [
            UnmatchedSegment(text="ab"),
            UnmatchedSegment(text="cdefgh"),
        ]

        assert coverage(segments, "x" * 40) == pytest.approx(0.8)
        assert coverage(segments, "") == 1.0
        assert coverage([], "x" * 40) == 1.0

    def test_result_clamped_when_unmatched_exceeds_summary(self):
        from adaptive_scribe.common.schemas import DocumentPatternMatch, UnmatchedSegment
        from adaptive_scribe.interpretation.confidence import overall_confidence

        docs = [DocumentPatternMatch(confidence=0.1)]
        segments = [UnmatchedSegment(text="z" * 500)]

        score = overall_confidence(docs, [], segments, "short")

        assert score == 0.0

    def test_accepts_plain_mappings(self):
        from adaptive_scribe.interpretation.confidence import overall_confidence

        docs = [{"pattern": "x", "confidence": 0.9}]
        rules = [{"condition_type": "contains", "condition": "", "matched_text": ""}]
        segments = [{"text": "ab", "start_index": 0, "end_index": 2}]

        # (0.9*0.4 + 0.5*0.4 + (1 - 2/4)*0.2) / 1.0
        assert overall_confidence(docs, rules, segments, "abcd") == pytest.approx(0.66)

    def test_mapping_without_usable_confidence_is_scored(self):
        from adaptive_scribe.interpretation.confidence import overall_confidence

        docs = [{"confidence": "high"}, {"confidence": float("nan")}, None]

        assert overall_confidence(docs, []) == pytest.approx((0.5 * 0.4 + 0.2) / 0.6)
