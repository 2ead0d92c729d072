"""
Confidence Estimation

Deterministic heuristic scoring of interpretation evidence. All functions
return a float in [0, 1] and never raise; out-of-range intermediate values
are clamped.

Scores:
- document_pattern_confidence: one document pattern match
- signal_rule_confidence: one triggered signal rule
- overall_confidence: weighted blend of both categories plus coverage
"""

import math
from collections.abc import Mapping
from typing import Any, Optional, Sequence, Union

from ..common.schemas.interpretation_record import (
    ConditionType,
    DocumentPatternMatch,
    SignalRuleMatch,
    UnmatchedSegment,
    clamp_unit,
)


BASE_SCORE = 0.5

# Returned when there is no evidence at all
NO_EVIDENCE_CONFIDENCE = 0.1

RECOGNIZED_EXTENSIONS = (".md", ".js", ".ts", ".py", ".json", ".html", ".css", ".txt")

CONDITION_TYPE_BONUS = {
    ConditionType.REGEX.value: 0.15,
    ConditionType.HANDOFF_REASON.value: 0.2,
}

DOCUMENT_PATTERN_WEIGHT = 0.4
SIGNAL_RULE_WEIGHT = 0.4
COVERAGE_WEIGHT = 0.2


def _text(value: Any) -> str:
    """Strings pass through; anything else counts as empty"""
    return value if isinstance(value, str) else ""


def _field(match: Any, name: str) -> Any:
    if isinstance(match, Mapping):
        return match.get(name)
    return getattr(match, name, None)


def _supplied_confidence(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return clamp_unit(value)


def _length_bonus(text: Any, normalize_at: int, cap: float) -> float:
    """Up to `cap`, proportional to len(text) / normalize_at"""
    return min(cap, (len(_text(text)) / normalize_at) * cap)


def _priority_bonus(priority: Optional[int]) -> float:
    """+0.02 per priority unit, max +0.1"""
    if not isinstance(priority, (int, float)) or not priority > 0:
        return 0.0
    return min(0.1, priority * 0.02)


def document_pattern_confidence(
    pattern: Optional[str],
    matched_text: Optional[str],
    file_path: Optional[str],
    priority: Optional[int] = 0,
) -> float:
    """
    Score a document pattern match.

    - Pattern length (specificity): up to +0.2 at 50 chars
    - File path contains "/": +0.1, plus +0.1 for a recognized extension
    - Priority: up to +0.1

    matched_text does not affect the score; it is accepted so all per-match
    scorers take the same evidence.
    """
    score = BASE_SCORE
    score += _length_bonus(pattern, 50, 0.2)

    file_path = _text(file_path)
    if "/" in file_path:
        score += 0.1
        if file_path.endswith(RECOGNIZED_EXTENSIONS):
            score += 0.1

    score += _priority_bonus(priority)
    return clamp_unit(score)


def signal_rule_confidence(
    condition_type: Optional[str],
    condition: Optional[str],
    matched_text: Optional[str],
    priority: Optional[int] = 0,
) -> float:
    """
    Score a triggered signal rule.

    - Condition type: regex +0.15, handoff_reason +0.2, others +0
    - Condition length: up to +0.15 at 30 chars
    - Matched text length: up to +0.1 at 100 chars
    - Priority: up to +0.1
    """
    if isinstance(condition_type, ConditionType):
        condition_type = condition_type.value

    score = BASE_SCORE
    score += CONDITION_TYPE_BONUS.get(_text(condition_type), 0.0)
    score += _length_bonus(condition, 30, 0.15)
    score += _length_bonus(matched_text, 100, 0.1)
    score += _priority_bonus(priority)
    return clamp_unit(score)


def score_document_pattern(match: Union[DocumentPatternMatch, Mapping]) -> float:
    """Confidence of a match (model or mapping): its own if scored, otherwise computed"""
    supplied = _supplied_confidence(_field(match, "confidence"))
    if supplied is not None:
        return supplied
    return document_pattern_confidence(
        _field(match, "pattern"),
        _field(match, "matched_text"),
        _field(match, "file_path"),
        _field(match, "priority"),
    )


def score_signal_rule(match: Union[SignalRuleMatch, Mapping]) -> float:
    """Confidence of a rule match (model or mapping): its own if scored, otherwise computed"""
    supplied = _supplied_confidence(_field(match, "confidence"))
    if supplied is not None:
        return supplied
    return signal_rule_confidence(
        _field(match, "condition_type"),
        _field(match, "condition"),
        _field(match, "matched_text"),
        _field(match, "priority"),
    )


def coverage(
    unmatched_segments: Optional[Sequence[UnmatchedSegment]],
    original_summary: Optional[str],
) -> float:
    """
    Fraction of the summary's character length covered by matched evidence.

    1 - sum(len(segment.text)) / len(original_summary). Full coverage when
    there are no unmatched segments or no summary. Not clamped here.
    """
    summary = _text(original_summary)
    if not unmatched_segments or not summary:
        return 1.0
    unmatched_length = sum(len(_text(_field(segment, "text"))) for segment in unmatched_segments)
    return 1.0 - (unmatched_length / len(summary))


def overall_confidence(
    matched_document_patterns: Optional[Sequence[DocumentPatternMatch]],
    triggered_signal_rules: Optional[Sequence[SignalRuleMatch]],
    unmatched_segments: Optional[Sequence[UnmatchedSegment]] = None,
    original_summary: Optional[str] = None,
) -> float:
    """
    Weighted confidence for a whole interpretation.

    No matches in either category -> 0.1 regardless of coverage. Otherwise
    each non-empty category is averaged and weighted 0.4; an empty category
    gets weight 0 so it is excluded rather than averaged in as 0. Coverage
    always has weight 0.2.
    """
    doc_matches = list(matched_document_patterns or [])
    rule_matches = list(triggered_signal_rules or [])

    if not doc_matches and not rule_matches:
        return NO_EVIDENCE_CONFIDENCE

    doc_confidence = 0.0
    if doc_matches:
        doc_confidence = sum(score_document_pattern(m) for m in doc_matches) / len(doc_matches)

    rule_confidence = 0.0
    if rule_matches:
        rule_confidence = sum(score_signal_rule(m) for m in rule_matches) / len(rule_matches)

    doc_weight = DOCUMENT_PATTERN_WEIGHT if doc_matches else 0.0
    rule_weight = SIGNAL_RULE_WEIGHT if rule_matches else 0.0
    total_weight = doc_weight + rule_weight + COVERAGE_WEIGHT
    if total_weight == 0:
        return NO_EVIDENCE_CONFIDENCE

    weighted = (
        doc_confidence * doc_weight
        + rule_confidence * rule_weight
        + coverage(unmatched_segments, original_summary) * COVERAGE_WEIGHT
    ) / total_weight

    return clamp_unit(weighted)
