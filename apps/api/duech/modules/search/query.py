"""
Search query construction.

Turns a `SearchCriteria` into the WHERE/ORDER BY fragments run by the search
service, and computes pagination metadata.

- query text: accent/case-insensitive substring match on lemma or meaning text
- meaning-level filters (category, origin, dictionary, markers): all must hold
  on the same meaning
- letters: word letter
- public mode: status forced to `published`, status/assignee input ignored
"""
from __future__ import annotations

import math
import unicodedata
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Tuple

from duech.core.errors import ValidationError
from duech.modules.words.constants import MEANING_MARKERS, PUBLIC_STATUS, WORD_STATUSES

PAGE_SIZE = 50
SNIPPET_CHARS = 160

# SearchCriteria attribute -> meanings column
MEANING_FILTER_COLUMNS: Dict[str, str] = {
    "categories": "grammar_category",
    "origins": "origin",
    "dictionaries": "dictionary",
    **{col: col for col in MEANING_MARKERS},
}

# SearchCriteria attribute -> URL/query-string parameter
FILTER_PARAMS: Dict[str, str] = {
    "categories": "categories",
    "origins": "origins",
    "letters": "letters",
    "dictionaries": "dictionaries",
    **MEANING_MARKERS,
}

MATCH_EXACT = "exact"
MATCH_PREFIX = "prefix"
MATCH_PARTIAL = "partial"
MATCH_MEANING = "meaning"
MATCH_FILTER = "filter"
_RANK_TO_MATCH = {0: MATCH_EXACT, 1: MATCH_PREFIX, 2: MATCH_PARTIAL, 3: MATCH_MEANING}


def fold(value: Optional[str]) -> str:
    """Lower-case, strip accents (ñ kept). Registered in sqlite as `fold()`."""
    if not value:
        return ""
    out: List[str] = []
    for ch in value.lower():
        if ch == "ñ":
            out.append(ch)
            continue
        for c in unicodedata.normalize("NFD", ch):
            if not unicodedata.combining(c):
                out.append(c)
    return "".join(out)


def _like_escape(s: str) -> str:
    return s.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class SearchCriteria:
    query: str = ""
    categories: Tuple[str, ...] = ()
    origins: Tuple[str, ...] = ()
    letters: Tuple[str, ...] = ()
    dictionaries: Tuple[str, ...] = ()
    social_valuations: Tuple[str, ...] = ()
    social_stratum_markers: Tuple[str, ...] = ()
    style_markers: Tuple[str, ...] = ()
    intentionality_markers: Tuple[str, ...] = ()
    geographical_markers: Tuple[str, ...] = ()
    chronological_markers: Tuple[str, ...] = ()
    frequency_markers: Tuple[str, ...] = ()
    # editor mode only
    status: Optional[str] = None
    assigned_to: Tuple[int, ...] = field(default=())

    def filter_values(self) -> Dict[str, Tuple[str, ...]]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name not in ("query", "status", "assigned_to")}

    def has_criteria(self, editor_mode: bool) -> bool:
        if self.query.strip():
            return True
        if any(self.filter_values().values()):
            return True
        return editor_mode and (bool(self.status) or bool(self.assigned_to))


def clean_values(values: Optional[List[str]]) -> Tuple[str, ...]:
    """Split comma-joined values, trim, drop empties and duplicates (order kept)."""
    out: List[str] = []
    for raw in values or []:
        for part in str(raw).split(","):
            v = part.strip()
            if v and v not in out:
                out.append(v)
    return tuple(out)


def parse_assignees(values: Optional[List[str]]) -> Tuple[int, ...]:
    ids: List[int] = []
    for v in clean_values(values):
        try:
            ids.append(int(v))
        except ValueError:
            raise ValidationError(f"invalid assignedTo value: {v}", {"assignedTo": v})
    return tuple(ids)


def build_where(criteria: SearchCriteria, editor_mode: bool) -> Tuple[str, List[Any]]:
    where: List[str] = []
    args: List[Any] = []

    if editor_mode:
        if criteria.status:
            if criteria.status not in WORD_STATUSES:
                raise ValidationError(f"invalid status: {criteria.status}", {"status": criteria.status})
            where.append("w.status = ?")
            args.append(criteria.status)
        if criteria.assigned_to:
            where.append(f"w.assigned_to IN ({','.join(['?'] * len(criteria.assigned_to))})")
            args.extend(criteria.assigned_to)
    else:
        where.append("w.status = ?")
        args.append(PUBLIC_STATUS)

    q = fold(criteria.query.strip())
    if q:
        pattern = f"%{_like_escape(q)}%"
        where.append(
            "(fold(w.lemma) LIKE ? ESCAPE '\\' OR EXISTS ("
            "SELECT 1 FROM meanings mq WHERE mq.word_id = w.id AND fold(mq.meaning) LIKE ? ESCAPE '\\'))"
        )
        args.extend([pattern, pattern])

    letters = [fold(v)[:1] for v in criteria.letters if fold(v)]
    if letters:
        where.append(f"w.letter IN ({','.join(['?'] * len(letters))})")
        args.extend(letters)

    meaning_conds: List[str] = []
    for attr, col in MEANING_FILTER_COLUMNS.items():
        values = getattr(criteria, attr)
        if not values:
            continue
        meaning_conds.append(f"mf.{col} IN ({','.join(['?'] * len(values))})")
        args.extend(values)
    if meaning_conds:
        where.append(
            "EXISTS (SELECT 1 FROM meanings mf WHERE mf.word_id = w.id AND " + " AND ".join(meaning_conds) + ")"
        )

    return ("WHERE " + " AND ".join(where)) if where else "", args


def build_rank(criteria: SearchCriteria) -> Tuple[str, List[Any]]:
    """Rank expression: 0 exact lemma, 1 prefix, 2 substring, 3 meaning only."""
    q = fold(criteria.query.strip())
    if not q:
        return "0", []
    esc = _like_escape(q)
    expr = (
        "CASE WHEN fold(w.lemma) = ? THEN 0 "
        "WHEN fold(w.lemma) LIKE ? ESCAPE '\\' THEN 1 "
        "WHEN fold(w.lemma) LIKE ? ESCAPE '\\' THEN 2 "
        "ELSE 3 END"
    )
    return expr, [q, f"{esc}%", f"%{esc}%"]


def match_type(rank: int, criteria: SearchCriteria) -> str:
    if not criteria.query.strip():
        return MATCH_FILTER
    return _RANK_TO_MATCH.get(int(rank), MATCH_MEANING)


def make_snippet(text: Optional[str], query: str = "", width: int = SNIPPET_CHARS) -> str:
    if not text:
        return ""
    text = " ".join(text.split())
    if len(text) <= width:
        return text
    q = fold(query.strip())
    start = 0
    if q:
        # fold() keeps the character count for precomposed input
        pos = fold(text).find(q)
        if pos > width // 2:
            start = pos - width // 3
    chunk = text[start : start + width].rstrip()
    prefix = "…" if start > 0 else ""
    suffix = "…" if start + width < len(text) else ""
    return f"{prefix}{chunk}{suffix}"


def clamp_page(raw: Optional[int]) -> int:
    if raw is None:
        return 1
    try:
        v = int(raw)
    except (TypeError, ValueError):
        return 1
    return max(v, 1)


def clamp_page_size(raw: Optional[int]) -> int:
    # lock: default=50, max=50
    if raw is None:
        return PAGE_SIZE
    try:
        v = int(raw)
    except (TypeError, ValueError):
        return PAGE_SIZE
    if v < 1:
        v = 1
    if v > PAGE_SIZE:
        v = PAGE_SIZE
    return v


def paginate(total: int, page: int, page_size: int = PAGE_SIZE) -> Dict[str, Any]:
    total_pages = int(math.ceil(total / page_size)) if total > 0 else 0
    return {
        "total": int(total),
        "total_pages": total_pages,
        "page": page,
        "page_size": page_size,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
