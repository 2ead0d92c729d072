"""
Interpretation Record Schema

One record per processed orchestration summary: the evidence the Scribe
matched, what it could not match, and how much it trusts the result.
Records are serialized one per line into the interpretation log.
"""

import math
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-02-01T12:00:00.000Z"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def clamp_unit(value: float) -> float:
    """Clamp a score into [0, 1]. NaN counts as 0."""
    if math.isnan(value):
        return 0.0
    return max(0.0, min(1.0, value))


# ============================================================================
# Enums
# ============================================================================

class ConditionType(str, Enum):
    """Known signal rule condition types"""
    CONTAINS = "contains"
    REGEX = "regex"
    HANDOFF_REASON = "handoff_reason"


# ============================================================================
# Sub-models
# ============================================================================

class DocumentPatternMatch(BaseModel):
    """A pattern that classified a referenced file path into a document type"""
    pattern: str = Field(default="", description="The pattern that was matched")
    type: str = Field(default="", description="Document type assigned")
    priority: int = Field(default=0, description="Priority of the pattern")
    matched_text: str = Field(default="")
    file_path: str = Field(default="", description="Extracted file path")
    confidence: Optional[float] = Field(default=None, description="0-1, None until scored")

    @field_validator("priority")
    @classmethod
    def _non_negative_priority(cls, v: int) -> int:
        return max(0, v)

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, v: Optional[float]) -> Optional[float]:
        return None if v is None else clamp_unit(v)


class SignalRuleMatch(BaseModel):
    """A triggered rule that will produce a downstream signal"""
    condition_type: str = Field(default="", description="contains | regex | handoff_reason")
    condition: str = Field(default="")
    signal_type: str = Field(default="", description="Signal type generated")
    target: Optional[str] = None
    category: Optional[str] = None
    strength: float = Field(default=0.0, description="Signal strength (0-1)")
    priority: int = Field(default=0)
    matched_text: str = Field(default="")
    confidence: Optional[float] = Field(default=None, description="0-1, None until scored")

    @field_validator("priority")
    @classmethod
    def _non_negative_priority(cls, v: int) -> int:
        return max(0, v)

    @field_validator("strength")
    @classmethod
    def _clamp_strength(cls, v: float) -> float:
        return clamp_unit(v)

    @field_validator("confidence")
    @classmethod
    def _clamp_confidence(cls, v: Optional[float]) -> Optional[float]:
        return None if v is None else clamp_unit(v)


class UnmatchedSegment(BaseModel):
    """
    A span of the original summary not covered by any pattern or rule.

    Only the text length feeds coverage; the indices are informational.
    """
    text: str = Field(default="")
    start_index: int = Field(default=0)
    end_index: int = Field(default=0)

    @field_validator("start_index", "end_index")
    @classmethod
    def _non_negative_index(cls, v: int) -> int:
        return max(0, v)

    @model_validator(mode="after")
    def _ordered_indices(self) -> "UnmatchedSegment":
        if self.end_index < self.start_index:
            self.end_index = self.start_index
        return self


# ============================================================================
# Main Schema
# ============================================================================

class InterpretationRecord(BaseModel):
    """
    Audit unit for one interpreted summary.

    overall_confidence is derivable from the contained matches and segments
    (see interpretation.confidence.overall_confidence), but a caller may set
    it directly when re-ingesting a previously scored record.
    """
    timestamp: str = Field(default="", description="ISO-8601, filled on append if empty")
    original_summary: str = Field(default="")
    handoff_reason_code: Optional[str] = None
    source_orchestrator: str = Field(default="")

    matched_document_patterns: List[DocumentPatternMatch] = Field(default_factory=list)
    triggered_signal_rules: List[SignalRuleMatch] = Field(default_factory=list)
    unmatched_segments: List[UnmatchedSegment] = Field(default_factory=list)

    overall_confidence: float = Field(default=0.0)
    generated_signal_id: str = Field(default="")
    documentation_updates_count: int = Field(default=0)

    @field_validator("overall_confidence")
    @classmethod
    def _clamp_overall(cls, v: float) -> float:
        return clamp_unit(v)

    @field_validator("documentation_updates_count")
    @classmethod
    def _non_negative_count(cls, v: int) -> int:
        return max(0, v)

    @property
    def has_evidence(self) -> bool:
        """True if at least one document pattern or signal rule matched"""
        return bool(self.matched_document_patterns or self.triggered_signal_rules)

    def to_log_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)"""
        return self.model_dump_json()
