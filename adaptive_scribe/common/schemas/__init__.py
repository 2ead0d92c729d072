"""
Adaptive Scribe Interpretation Schemas

Record shapes written to the interpretation log.
"""

from .interpretation_record import (
    InterpretationRecord,
    DocumentPatternMatch,
    SignalRuleMatch,
    UnmatchedSegment,
    ConditionType,
    clamp_unit,
    utc_timestamp,
)
from .templates import render_record_summary, SUMMARY_TEMPLATE

__all__ = [
    "InterpretationRecord",
    "DocumentPatternMatch",
    "SignalRuleMatch",
    "UnmatchedSegment",
    "ConditionType",
    "clamp_unit",
    "utc_timestamp",
    "render_record_summary",
    "SUMMARY_TEMPLATE",
]
