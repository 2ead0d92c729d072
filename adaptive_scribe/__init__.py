"""
Adaptive Scribe

Interpretation confidence and audit logging for the Scribe, which turns
free-text orchestration summaries into signals and documentation updates.

Philosophy:
- Every interpreted summary leaves exactly one audit record
- Confidence is a fixed heuristic, reproducible from the record itself
- The log is plain JSONL: one record per line, readable without the rest

Usage:
    from adaptive_scribe.common import load_config
    from adaptive_scribe.common.schemas import InterpretationRecord
    from adaptive_scribe.interpretation import RecordBuilder, InterpretationLog
"""

__version__ = "0.1.0"
