"""
Record Summary Templates

Renders an InterpretationRecord as short plain text for operators
reviewing the interpretation log.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .interpretation_record import InterpretationRecord


SUMMARY_TEMPLATE = """Interpretation @ {timestamp}
Orchestrator: {source_orchestrator} | Handoff reason: {handoff_reason_code}
Confidence: {overall_confidence:.2f} | Signal: {generated_signal_id} | Doc updates: {documentation_updates_count}
Summary: {summary}

Document patterns:
{document_block}

Signal rules:
{signal_block}

Unmatched:
{unmatched_block}
"""

MAX_SUMMARY_CHARS = 200
MAX_SNIPPET_CHARS = 60


def _truncate(text: str, limit: int) -> str:
    text = text.replace("\n", " ")
    if len(text) <= limit:
        return text
    return text[:limit - 3] + "..."


def _format_confidence(value) -> str:
    return "unscored" if value is None else f"{value:.2f}"


def render_record_summary(record: "InterpretationRecord") -> str:
    """Render a record as a multi-line summary block"""
    document_lines = [
        f"- [{_format_confidence(m.confidence)}] {m.type or '?'} {m.file_path or '(no path)'}"
        f" <- \"{_truncate(m.pattern, MAX_SNIPPET_CHARS)}\""
        for m in record.matched_document_patterns
    ]
    signal_lines = [
        f"- [{_format_confidence(r.confidence)}] {r.condition_type or '?'}: "
        f"\"{_truncate(r.condition, MAX_SNIPPET_CHARS)}\" -> {r.signal_type or '?'}"
        + (f" (target: {r.target})" if r.target else "")
        for r in record.triggered_signal_rules
    ]
    unmatched_lines = [
        f"- {s.start_index}-{s.end_index}: \"{_truncate(s.text, MAX_SNIPPET_CHARS)}\""
        for s in record.unmatched_segments
    ]

    return SUMMARY_TEMPLATE.format(
        timestamp=record.timestamp or "(no timestamp)",
        source_orchestrator=record.source_orchestrator or "(unknown)",
        handoff_reason_code=record.handoff_reason_code or "-",
        overall_confidence=record.overall_confidence,
        generated_signal_id=record.generated_signal_id or "-",
        documentation_updates_count=record.documentation_updates_count,
        summary=_truncate(record.original_summary, MAX_SUMMARY_CHARS) or "(empty)",
        document_block="\n".join(document_lines) or "- (none)",
        signal_block="\n".join(signal_lines) or "- (none)",
        unmatched_block="\n".join(unmatched_lines) or "- (none)",
    )
