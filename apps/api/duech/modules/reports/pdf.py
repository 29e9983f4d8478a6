"""
PDF rendering for word reports (reportlab platypus).

One section per word: lemma heading, status line, numbered meanings with their
examples, then the editorial notes.
"""
from __future__ import annotations

import io
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from duech.modules.words.constants import MEANING_MARKERS

_ACCENT = colors.HexColor("#0b3a6f")


def _p(text: Any) -> str:
    # Paragraph parses a mini-markup; user text must not be read as tags
    return escape(str(text))


def _styles() -> Dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle("ReportTitle", parent=base["Heading1"], fontSize=20, textColor=_ACCENT, spaceAfter=12),
        "lemma": ParagraphStyle("Lemma", parent=base["Heading2"], textColor=_ACCENT, spaceBefore=10, spaceAfter=4),
        "meta": ParagraphStyle("Meta", parent=base["Normal"], fontSize=8, textColor=colors.grey),
        "meaning": ParagraphStyle("Meaning", parent=base["Normal"], leftIndent=12, spaceAfter=2),
        "example": ParagraphStyle("Example", parent=base["Italic"], leftIndent=24, fontSize=9),
        "note": ParagraphStyle("Note", parent=base["Normal"], leftIndent=12, fontSize=9, textColor=colors.darkred),
        "normal": base["Normal"],
    }


def _meaning_line(m: Dict[str, Any]) -> str:
    head = f"<b>{_p(m.get('number', ''))}.</b> "
    if m.get("grammar_category"):
        head += f"<i>{_p(m['grammar_category'])}</i> "
    markers = [str(m[col]) for col in MEANING_MARKERS if m.get(col)]
    if markers:
        head += f"[{_p(', '.join(markers))}] "
    body = _p(m.get("meaning") or "")
    if m.get("remission"):
        body += f" (→ {_p(m['remission'])})"
    return head + body


def _example_line(ex: Dict[str, Any]) -> str:
    source = ", ".join(str(ex[k]) for k in ("author", "publication", "year") if ex.get(k))
    line = f"«{_p(ex.get('value') or '')}»"
    if source:
        line += f" ({_p(source)})"
    return line


def render_words_pdf(title: str, words: List[Dict[str, Any]], *, generated_at: Optional[str] = None) -> bytes:
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, title=title)
    st = _styles()
    story: List[Any] = []

    story.append(Paragraph(_p(title), st["title"]))
    if generated_at:
        story.append(Paragraph(f"Generado: {_p(generated_at)}", st["meta"]))
    story.append(Spacer(1, 0.2 * inch))

    summary = Table([["Palabras", str(len(words))]], hAlign="LEFT")
    summary.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (0, 0), _ACCENT),
                ("TEXTCOLOR", (0, 0), (0, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (0, 0), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ]
        )
    )
    story.append(summary)
    story.append(Spacer(1, 0.2 * inch))

    if not words:
        story.append(Paragraph("No hay palabras para este reporte.", st["normal"]))

    for w in words:
        story.append(Paragraph(_p(w["lemma"]), st["lemma"]))
        meta = f"Estado: {_p(w.get('status') or '')}"
        if w.get("root"):
            meta += f" · Raíz: {_p(w['root'])}"
        story.append(Paragraph(meta, st["meta"]))

        for m in w.get("values") or []:
            story.append(Paragraph(_meaning_line(m), st["meaning"]))
            for ex in m.get("examples") or []:
                story.append(Paragraph(_example_line(ex), st["example"]))

        for n in w.get("notes") or []:
            author = (n.get("user") or {}).get("username") or "?"
            story.append(Paragraph(f"Nota de {_p(author)}: {_p(n.get('note') or '')}", st["note"]))

    doc.build(story)
    return buf.getvalue()
