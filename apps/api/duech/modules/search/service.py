from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from duech.core.db import connect
from duech.modules.search.query import (
    PAGE_SIZE,
    SearchCriteria,
    build_rank,
    build_where,
    fold,
    make_snippet,
    match_type,
    paginate,
)


def _connect() -> sqlite3.Connection:
    conn = connect()
    conn.create_function("fold", 1, fold, deterministic=True)
    return conn


def _snippets(conn: sqlite3.Connection, word_ids: List[int], query: str) -> Dict[int, Dict[str, Any]]:
    """word_id -> {"snippet", "count"}; the snippet prefers the first meaning matching the query."""
    out: Dict[int, Dict[str, Any]] = {wid: {"snippet": "", "count": 0} for wid in word_ids}
    if not word_ids:
        return out
    rows = conn.execute(
        f"SELECT word_id, meaning FROM meanings WHERE word_id IN ({','.join(['?'] * len(word_ids))}) "
        "ORDER BY word_id, number, id;",
        word_ids,
    ).fetchall()

    q = fold(query.strip())
    chosen: Dict[int, Optional[str]] = {}
    for r in rows:
        wid = r["word_id"]
        out[wid]["count"] += 1
        text = r["meaning"] or ""
        if wid not in chosen:
            chosen[wid] = text
        elif q and q not in fold(chosen[wid]) and q in fold(text):
            chosen[wid] = text
    for wid, text in chosen.items():
        out[wid]["snippet"] = make_snippet(text, query)
    return out


def search_words(
    criteria: SearchCriteria,
    *,
    page: int = 1,
    page_size: int = PAGE_SIZE,
    editor_mode: bool = False,
) -> Dict[str, Any]:
    if not criteria.has_criteria(editor_mode):
        return {"results": [], "pagination": paginate(0, 1, page_size), "has_criteria": False}

    where_sql, where_args = build_where(criteria, editor_mode)
    rank_sql, rank_args = build_rank(criteria)
    offset = (page - 1) * page_size

    conn = _connect()
    try:
        total = conn.execute(f"SELECT COUNT(1) AS c FROM words w {where_sql};", where_args).fetchone()["c"]
        rows = conn.execute(
            f"""
            SELECT w.id, w.lemma, w.root, w.letter, w.status, w.assigned_to, {rank_sql} AS rank
            FROM words w
            {where_sql}
            ORDER BY rank ASC, fold(w.lemma) ASC, w.id ASC
            LIMIT ? OFFSET ?
            """,
            rank_args + where_args + [page_size, offset],
        ).fetchall()

        word_ids = [int(r["id"]) for r in rows]
        extra = _snippets(conn, word_ids, criteria.query)

        results = []
        for r in rows:
            wid = int(r["id"])
            results.append(
                {
                    "id": wid,
                    "lemma": r["lemma"],
                    "root": r["root"],
                    "letter": r["letter"],
                    "status": r["status"],
                    "assigned_to": r["assigned_to"] if editor_mode else None,
                    "match_type": match_type(r["rank"], criteria),
                    "snippet": extra[wid]["snippet"],
                    "meanings_count": extra[wid]["count"],
                }
            )
        return {"results": results, "pagination": paginate(int(total), page, page_size), "has_criteria": True}
    finally:
        conn.close()
