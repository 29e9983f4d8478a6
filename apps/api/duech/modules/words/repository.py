"""
Connection-level data access for words, meanings, examples and notes.

Every function takes an open sqlite3 connection and never commits: the
transaction boundary belongs to the caller (see service.py).
"""
from __future__ import annotations

import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from duech.core.observability import now_iso
from duech.modules.words.constants import EXAMPLE_FIELDS, MARKER_COLUMNS, MEANING_TEXT_FIELDS
from duech.modules.words.schemas import ExampleIn, MeaningIn


def _insert(conn: sqlite3.Connection, table: str, row: Dict[str, Any]) -> int:
    keys = sorted(row.keys())
    sql = f"INSERT INTO {table} ({','.join(keys)}) VALUES ({','.join(['?'] * len(keys))});"
    cur = conn.execute(sql, [row[k] for k in keys])
    return int(cur.lastrowid)


# -------------------------
# Words
# -------------------------
def find_word_by_lemma(conn: sqlite3.Connection, lemma: str) -> Optional[sqlite3.Row]:
    return conn.execute("SELECT * FROM words WHERE lemma=? LIMIT 1;", (lemma,)).fetchone()


def insert_word(
    conn: sqlite3.Connection,
    *,
    lemma: str,
    root: Optional[str],
    letter: str,
    status: str,
    created_by: Optional[int],
    assigned_to: Optional[int],
) -> int:
    now = now_iso()
    return _insert(
        conn,
        "words",
        {
            "lemma": lemma,
            "root": root,
            "letter": letter,
            "status": status,
            "created_by": created_by,
            "assigned_to": assigned_to,
            "created_at": now,
            "updated_at": now,
        },
    )


def update_word(conn: sqlite3.Connection, word_id: int, fields: Dict[str, Any]) -> None:
    sets = dict(fields)
    sets["updated_at"] = now_iso()
    keys = sorted(sets.keys())
    conn.execute(
        f"UPDATE words SET {', '.join(f'{k}=?' for k in keys)} WHERE id=?;",
        [sets[k] for k in keys] + [word_id],
    )


def delete_word(conn: sqlite3.Connection, word_id: int) -> None:
    conn.execute("DELETE FROM words WHERE id=?;", (word_id,))


# -------------------------
# Meanings / examples
# -------------------------
def clean_example(ex: ExampleIn) -> Dict[str, Any]:
    """Falsy fields -> NULL; legacy `source` fills a missing `publication`."""
    row: Dict[str, Any] = {"value": ex.value}
    for f in EXAMPLE_FIELDS:
        row[f] = getattr(ex, f) or None
    row["publication"] = ex.publication or ex.source or None
    return row


def normalize_examples(examples: Optional[Iterable[ExampleIn]]) -> List[Dict[str, Any]]:
    if not examples:
        return []
    return [clean_example(ex) for ex in examples]


def meaning_row(word_id: int, position: int, meaning: MeaningIn) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "word_id": word_id,
        "number": meaning.number if meaning.number is not None else position,
        "meaning": meaning.meaning,
    }
    for f in MEANING_TEXT_FIELDS:
        row[f] = getattr(meaning, f) or None
    # each marker independently: "" / None -> NULL
    for key in MARKER_COLUMNS:
        row[key] = getattr(meaning, key) or None
    return row


def insert_meaning(conn: sqlite3.Connection, word_id: int, position: int, meaning: MeaningIn) -> int:
    now = now_iso()
    row = meaning_row(word_id, position, meaning)
    row["created_at"] = now
    row["updated_at"] = now
    meaning_id = _insert(conn, "meanings", row)

    for ex in normalize_examples(meaning.examples):
        ex["meaning_id"] = meaning_id
        ex["created_at"] = now
        ex["updated_at"] = now
        _insert(conn, "examples", ex)
    return meaning_id


def insert_meanings(conn: sqlite3.Connection, word_id: int, meanings: Iterable[MeaningIn]) -> int:
    n = 0
    for position, m in enumerate(meanings, start=1):
        insert_meaning(conn, word_id, position, m)
        n += 1
    return n


def delete_meanings(conn: sqlite3.Connection, word_id: int) -> int:
    cur = conn.execute("DELETE FROM meanings WHERE word_id=?;", (word_id,))
    return int(cur.rowcount)


def load_meanings(conn: sqlite3.Connection, word_ids: List[int]) -> Dict[int, List[Dict[str, Any]]]:
    """word_id -> meanings (ordered by number) each with its `examples`."""
    out: Dict[int, List[Dict[str, Any]]] = {wid: [] for wid in word_ids}
    if not word_ids:
        return out

    marks = ",".join(["?"] * len(word_ids))
    rows = conn.execute(
        f"SELECT * FROM meanings WHERE word_id IN ({marks}) ORDER BY word_id, number, id;",
        word_ids,
    ).fetchall()
    by_meaning: Dict[int, Dict[str, Any]] = {}
    for r in rows:
        d = dict(r)
        d["examples"] = []
        by_meaning[d["id"]] = d
        out[d["word_id"]].append(d)

    if by_meaning:
        mids = list(by_meaning.keys())
        ex_rows = conn.execute(
            f"SELECT * FROM examples WHERE meaning_id IN ({','.join(['?'] * len(mids))}) ORDER BY id;",
            mids,
        ).fetchall()
        for e in ex_rows:
            by_meaning[e["meaning_id"]]["examples"].append(dict(e))
    return out


# -------------------------
# Notes
# -------------------------
def insert_note(conn: sqlite3.Connection, word_id: int, note: str, user_id: Optional[int]) -> int:
    return _insert(
        conn,
        "notes",
        {
            "word_id": word_id,
            "user_id": user_id,
            "note": note,
            "resolved": 0,
            "created_at": now_iso(),
        },
    )


_NOTE_SELECT = """
SELECT n.id, n.word_id, n.user_id, n.note, n.resolved, n.created_at,
       u.id AS u_id, u.username AS u_username, u.email AS u_email, u.role AS u_role
FROM notes n
LEFT JOIN users u ON u.id = n.user_id
"""


def _row_to_note(row: sqlite3.Row) -> Dict[str, Any]:
    user = None
    if row["u_id"] is not None:
        user = {"id": row["u_id"], "username": row["u_username"], "email": row["u_email"], "role": row["u_role"]}
    return {
        "id": row["id"],
        "word_id": row["word_id"],
        "user_id": row["user_id"],
        "note": row["note"],
        "resolved": bool(row["resolved"]),
        "created_at": row["created_at"],
        "user": user,
    }


def get_note_with_author(conn: sqlite3.Connection, note_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(_NOTE_SELECT + " WHERE n.id=?;", (note_id,)).fetchone()
    return _row_to_note(row) if row else None


def load_notes(conn: sqlite3.Connection, word_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(_NOTE_SELECT + " WHERE n.word_id=? ORDER BY n.created_at DESC, n.id DESC;", (word_id,)).fetchall()
    return [_row_to_note(r) for r in rows]


def row_to_word(row: sqlite3.Row) -> Dict[str, Any]:
    return dict(row)


# -------------------------
# Users
# -------------------------
def user_exists(conn: sqlite3.Connection, user_id: int) -> bool:
    return conn.execute("SELECT 1 FROM users WHERE id=? LIMIT 1;", (user_id,)).fetchone() is not None
