"""
Scribe Interpretation - Confidence & Audit Log

Scores the evidence behind each interpreted orchestration summary and keeps
an append-only, size-rotated log of the results.

Key Components:
- confidence: Deterministic scoring of matches and whole interpretations
- RecordBuilder: Normalizes raw pipeline matches into InterpretationRecords
- InterpretationLog: Rotating JSONL log, one record per line

Rules:
1. Scoring and building never raise on bad input
2. A supplied confidence is trusted, including 0
3. Log I/O errors go to the caller, unretried
4. One writer per log directory
"""

from .confidence import (
    document_pattern_confidence,
    signal_rule_confidence,
    overall_confidence,
)
from .record_builder import RecordBuilder
from .audit_log import InterpretationLog

__all__ = [
    "document_pattern_confidence",
    "signal_rule_confidence",
    "overall_confidence",
    "RecordBuilder",
    "InterpretationLog",
]
