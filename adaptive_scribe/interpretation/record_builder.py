"""
Record Builder

Builds Interpretation Records from loosely-shaped pipeline output.

Key Rules:
- Never reject input: missing or unusable fields fall back to defaults
- Score a match only when the caller did not supply a confidence
- A supplied confidence of 0 is a real score, not "missing"
"""

import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel

from ..common.schemas import (
    DocumentPatternMatch,
    SignalRuleMatch,
    UnmatchedSegment,
    InterpretationRecord,
    clamp_unit,
    utc_timestamp,
)
from .confidence import (
    document_pattern_confidence,
    signal_rule_confidence,
    overall_confidence,
)

logger = logging.getLogger("scribe.interpretation.record_builder")


def _fields(raw: Any) -> Dict[str, Any]:
    """View raw input as a dict (mappings and pydantic models accepted)"""
    if isinstance(raw, BaseModel):
        return raw.model_dump()
    if isinstance(raw, Mapping):
        return dict(raw)
    return {}


def _as_str(value: Any, default: str = "") -> str:
    """Falsy values such as 0 or False count as missing"""
    if not value:
        return default
    return value if isinstance(value, str) else str(value)


def _as_optional_str(value: Any) -> Optional[str]:
    return _as_str(value) or None


def _as_float(value: Any) -> Optional[float]:
    """Parse a number, None when absent or unusable"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _as_int(value: Any, default: int = 0) -> int:
    number = _as_float(value)
    if number is None:
        return default
    return max(0, int(number))


class RecordBuilder:
    """
    Builds canonical record entries from raw match data.

    Pipeline for a whole record (build_record):
    1. Default every top-level field
    2. Build each document pattern match, signal rule match and segment
    3. Score matches that arrived without a confidence
    4. Use the supplied overall_confidence or compute it

    The builder is stateless apart from the default orchestrator name, so a
    single instance can be shared.
    """

    def __init__(self, source_orchestrator: str = ""):
        """
        Initialize record builder.

        Args:
            source_orchestrator: Default orchestrator name for new records
        """
        self._source_orchestrator = source_orchestrator

    def build_document_pattern_match(self, raw: Any) -> DocumentPatternMatch:
        """
        Build a DocumentPatternMatch.

        Args:
            raw: Mapping with pattern, type, priority, matched_text,
                file_path and optionally confidence

        Returns:
            Match with confidence computed unless one was supplied
        """
        data = _fields(raw)
        match = DocumentPatternMatch(
            pattern=_as_str(data.get("pattern")),
            type=_as_str(data.get("type")),
            priority=_as_int(data.get("priority")),
            matched_text=_as_str(data.get("matched_text")),
            file_path=_as_str(data.get("file_path")),
        )

        supplied = _as_float(data.get("confidence"))
        if supplied is None:
            match.confidence = document_pattern_confidence(
                match.pattern, match.matched_text, match.file_path, match.priority
            )
        else:
            match.confidence = clamp_unit(supplied)

        return match

    def build_signal_rule_match(self, raw: Any) -> SignalRuleMatch:
        """
        Build a SignalRuleMatch.

        target and category default to None, strength to 0.
        """
        data = _fields(raw)
        condition_type = data.get("condition_type")
        if hasattr(condition_type, "value"):
            condition_type = condition_type.value

        match = SignalRuleMatch(
            condition_type=_as_str(condition_type),
            condition=_as_str(data.get("condition")),
            signal_type=_as_str(data.get("signal_type")),
            target=_as_optional_str(data.get("target")),
            category=_as_optional_str(data.get("category")),
            strength=clamp_unit(_as_float(data.get("strength")) or 0.0),
            priority=_as_int(data.get("priority")),
            matched_text=_as_str(data.get("matched_text")),
        )

        supplied = _as_float(data.get("confidence"))
        if supplied is None:
            match.confidence = signal_rule_confidence(
                match.condition_type, match.condition, match.matched_text, match.priority
            )
        else:
            match.confidence = clamp_unit(supplied)

        return match

    def build_unmatched_segment(self, raw: Any) -> UnmatchedSegment:
        """Build an UnmatchedSegment (no scoring involved)"""
        data = _fields(raw)
        return UnmatchedSegment(
            text=_as_str(data.get("text")),
            start_index=_as_int(data.get("start_index")),
            end_index=_as_int(data.get("end_index")),
        )

    def build_empty_record(self) -> InterpretationRecord:
        """Fresh record stamped with the current time, for incremental filling"""
        return InterpretationRecord(
            timestamp=utc_timestamp(),
            source_orchestrator=self._source_orchestrator,
        )

    def build_record(self, raw: Any) -> InterpretationRecord:
        """
        Build a complete InterpretationRecord from raw pipeline output.

        Args:
            raw: Mapping shaped like an InterpretationRecord; any field may
                be missing

        Returns:
            Record with every match scored and overall_confidence set
        """
        data = _fields(raw)
        record = self.build_empty_record()

        timestamp = _as_str(data.get("timestamp"))
        if timestamp:
            record.timestamp = timestamp
        record.original_summary = _as_str(data.get("original_summary"))
        record.handoff_reason_code = _as_optional_str(data.get("handoff_reason_code"))
        record.source_orchestrator = _as_str(
            data.get("source_orchestrator"), default=self._source_orchestrator
        )
        record.generated_signal_id = _as_str(data.get("generated_signal_id"))
        record.documentation_updates_count = _as_int(data.get("documentation_updates_count"))

        record.matched_document_patterns = [
            self.build_document_pattern_match(item)
            for item in self._items(data, "matched_document_patterns")
        ]
        record.triggered_signal_rules = [
            self.build_signal_rule_match(item)
            for item in self._items(data, "triggered_signal_rules")
        ]
        record.unmatched_segments = [
            self.build_unmatched_segment(item)
            for item in self._items(data, "unmatched_segments")
        ]

        supplied = _as_float(data.get("overall_confidence"))
        if supplied is None:
            self.score_record(record)
        else:
            record.overall_confidence = clamp_unit(supplied)

        return record

    def score_record(self, record: InterpretationRecord) -> InterpretationRecord:
        """Recompute overall_confidence in place from the record's contents"""
        record.overall_confidence = overall_confidence(
            record.matched_document_patterns,
            record.triggered_signal_rules,
            record.unmatched_segments,
            record.original_summary,
        )
        return record

    def _items(self, data: Dict[str, Any], key: str) -> List[Any]:
        """List entries under key, dropping anything that is not a mapping"""
        value = data.get(key)
        if not isinstance(value, (list, tuple)):
            return []

        items = [item for item in value if isinstance(item, (Mapping, BaseModel))]
        if len(items) != len(value):
            logger.debug("Dropped %d malformed entries from %s", len(value) - len(items), key)
        return items
