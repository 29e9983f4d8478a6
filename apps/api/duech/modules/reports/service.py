"""
Read side for the admin reports: words in a given editorial status, each with
its meanings (and their examples) and its notes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from duech.core.db import connect
from duech.core.errors import ValidationError
from duech.core.observability import now_iso
from duech.modules.words import repository as repo

from .pdf import render_words_pdf


@dataclass(frozen=True)
class ReportKind:
    statuses: Tuple[str, ...]
    filename: str
    title: str


REPORT_KINDS: Dict[str, ReportKind] = {
    "redacted": ReportKind(("redacted",), "reporte_redactadas.pdf", "Palabras redactadas"),
    "reviewedLex": ReportKind(("reviewed",), "reporte_revisadas.pdf", "Palabras revisadas por lexicógrafos"),
    "both": ReportKind(("redacted", "reviewed"), "reporte_completo.pdf", "Reporte completo"),
}
DEFAULT_REPORT_TYPE = "redacted"


def report_kind(report_type: str | None) -> ReportKind:
    key = (report_type or DEFAULT_REPORT_TYPE).strip()
    kind = REPORT_KINDS.get(key)
    if kind is None:
        raise ValidationError(
            f"invalid report type: {key}",
            {"type": key, "allowed": list(REPORT_KINDS.keys())},
        )
    return kind


def fetch_words_by_status(statuses: Sequence[str]) -> List[Dict[str, Any]]:
    if not statuses:
        return []
    conn = connect()
    try:
        rows = conn.execute(
            f"SELECT * FROM words WHERE status IN ({','.join(['?'] * len(statuses))}) ORDER BY lemma ASC, id ASC;",
            list(statuses),
        ).fetchall()
        words = [repo.row_to_word(r) for r in rows]
        meanings = repo.load_meanings(conn, [w["id"] for w in words])
        for w in words:
            w["values"] = meanings[w["id"]]
            w["notes"] = repo.load_notes(conn, w["id"])
        return words
    finally:
        conn.close()


def export_redacted_words() -> List[Dict[str, Any]]:
    return fetch_words_by_status(REPORT_KINDS["redacted"].statuses)


def build_report(report_type: str | None) -> Tuple[ReportKind, bytes, int]:
    """Returns the report kind, the rendered PDF and the number of words in it."""
    kind = report_kind(report_type)
    words = fetch_words_by_status(kind.statuses)
    pdf = render_words_pdf(kind.title, words, generated_at=now_iso())
    return kind, pdf, len(words)
