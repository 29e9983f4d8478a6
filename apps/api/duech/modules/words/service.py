"""
Mutation service for dictionary entries.

Each operation opens its own connection and owns one transaction: a word and
its full meaning/example set are written (or replaced) atomically.
"""
from __future__ import annotations

import sqlite3
import unicodedata
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError as PayloadError

from duech.core.db import connect, transaction
from duech.core.errors import ConflictError, IntegrityError, NotFoundError, ValidationError
from duech.core.observability import emit
from duech.modules.words import repository as repo
from duech.modules.words.constants import DEFAULT_CREATE_STATUS, PUBLIC_STATUS, WORD_STATUSES
from duech.modules.words.schemas import WordIn

# distinguishes "leave unchanged" from an explicit None (unassign)
UNSET: Any = object()


def _coerce_word(data: Union[WordIn, Mapping[str, Any]]) -> WordIn:
    if isinstance(data, WordIn):
        return data
    try:
        return WordIn.model_validate(dict(data))
    except PayloadError as e:
        errors = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()]
        raise ValidationError("invalid word payload", {"errors": errors})


def _normalize_lemma(raw: Optional[str]) -> str:
    lemma = (raw or "").strip()
    if not lemma:
        raise ValidationError("El lema es obligatorio", {"field": "lemma"})
    return lemma


def fold_letter(ch: str) -> str:
    """Lower-case and strip diacritics, keeping ñ as its own letter."""
    low = ch.lower()
    if low == "ñ":
        return low
    decomposed = unicodedata.normalize("NFD", low)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base or low


def resolve_letter(lemma: str, requested: Optional[str] = None) -> str:
    requested = (requested or "").strip()
    first = requested[:1] or lemma[:1] or "a"
    return fold_letter(first)


def _check_status(status: str) -> str:
    if status not in WORD_STATUSES:
        raise ValidationError(f"invalid status: {status}", {"status": status, "allowed": list(WORD_STATUSES)})
    return status


def _duplicate(lemma: str) -> ConflictError:
    return ConflictError(f'Ya existe una palabra con el lema "{lemma}"', {"lemma": lemma})


def _check_user_refs(conn: sqlite3.Connection, **refs: Optional[int]) -> None:
    """ValidationError for any given user id (by field name) with no users row."""
    for field, user_id in refs.items():
        if user_id is not None and not repo.user_exists(conn, user_id):
            raise ValidationError(f"unknown user for {field}: {user_id}", {field: user_id})


def create_word(
    data: Union[WordIn, Mapping[str, Any]],
    *,
    created_by: Optional[int] = None,
    assigned_to: Optional[int] = None,
    letter: Optional[str] = None,
    status: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    word = _coerce_word(data)
    lemma = _normalize_lemma(word.lemma)
    root = (word.root or "").strip() or None
    resolved_letter = resolve_letter(lemma, letter)
    st = _check_status(status or DEFAULT_CREATE_STATUS)

    conn = connect()
    try:
        with transaction(conn):
            if repo.find_word_by_lemma(conn, lemma) is not None:
                raise _duplicate(lemma)
            _check_user_refs(conn, createdBy=created_by, assignedTo=assigned_to)
            try:
                word_id = repo.insert_word(
                    conn,
                    lemma=lemma,
                    root=root,
                    letter=resolved_letter,
                    status=st,
                    created_by=created_by,
                    assigned_to=assigned_to,
                )
            except sqlite3.IntegrityError as e:
                # unique index lost a race with a concurrent create
                if "UNIQUE" in str(e).upper():
                    raise _duplicate(lemma)
                raise
            n = repo.insert_meanings(conn, word_id, word.values)
    finally:
        conn.close()

    emit("audit", "word.created", f"created {lemma}", request_id, __name__, word_id=word_id, lemma=lemma, meanings=n)
    return {"success": True, "word_id": word_id, "lemma": lemma, "letter": resolved_letter}


def update_word_by_lemma(
    prev_lemma: str,
    data: Union[WordIn, Mapping[str, Any]],
    *,
    status: Any = UNSET,
    assigned_to: Any = UNSET,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Update lemma/root (and optionally status/assignee) and replace the whole
    meaning set. Lookup, update, delete and reinsert share one transaction, so
    readers never see the word without meanings and a failed reinsert leaves
    the previous meanings in place.
    """
    word = _coerce_word(data)
    lemma = _normalize_lemma(word.lemma)

    fields: Dict[str, Any] = {"lemma": lemma, "root": (word.root or "").strip() or None}
    if status is not UNSET and status is not None:
        fields["status"] = _check_status(status)
    if assigned_to is not UNSET:
        fields["assigned_to"] = assigned_to

    conn = connect()
    try:
        with transaction(conn):
            existing = repo.find_word_by_lemma(conn, prev_lemma)
            if existing is None:
                raise NotFoundError(f"Word not found: {prev_lemma}", {"lemma": prev_lemma})
            word_id = int(existing["id"])
            if "assigned_to" in fields:
                _check_user_refs(conn, assignedTo=fields["assigned_to"])

            if lemma != prev_lemma:
                other = repo.find_word_by_lemma(conn, lemma)
                if other is not None and int(other["id"]) != word_id:
                    raise _duplicate(lemma)

            repo.update_word(conn, word_id, fields)
            removed = repo.delete_meanings(conn, word_id)
            n = repo.insert_meanings(conn, word_id, word.values)
    finally:
        conn.close()

    emit(
        "audit", "word.updated", f"updated {prev_lemma}", request_id, __name__,
        word_id=word_id, lemma=lemma, prev_lemma=prev_lemma, meanings_removed=removed, meanings=n,
    )
    return {"success": True, "word_id": word_id, "lemma": lemma}


def delete_word_by_lemma(lemma: str, *, request_id: Optional[str] = None) -> Dict[str, Any]:
    conn = connect()
    try:
        with transaction(conn):
            existing = repo.find_word_by_lemma(conn, lemma)
            if existing is None:
                raise NotFoundError(f"Word not found: {lemma}", {"lemma": lemma})
            # meanings, examples and notes go with it (ON DELETE CASCADE)
            repo.delete_word(conn, int(existing["id"]))
    finally:
        conn.close()

    emit("audit", "word.deleted", f"deleted {lemma}", request_id, __name__, word_id=int(existing["id"]), lemma=lemma)
    return {"success": True, "lemma": lemma}


def add_note_to_word(
    lemma: str,
    note: str,
    user_id: Optional[int],
    *,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    text = (note or "").strip()
    if not text:
        raise ValidationError("note text is required", {"field": "note"})

    conn = connect()
    try:
        with transaction(conn):
            existing = repo.find_word_by_lemma(conn, lemma)
            if existing is None:
                raise NotFoundError(f"Word not found: {lemma}", {"lemma": lemma})
            _check_user_refs(conn, userId=user_id)
            note_id = repo.insert_note(conn, int(existing["id"]), text, user_id)
            created = repo.get_note_with_author(conn, note_id)
            if created is None:
                raise IntegrityError("Failed to retrieve the created note", {"note_id": note_id, "lemma": lemma})
    finally:
        conn.close()

    emit("audit", "note.added", f"note on {lemma}", request_id, __name__, note_id=note_id, lemma=lemma, user_id=user_id)
    return created


def get_word_by_lemma(lemma: str, *, include_unpublished: bool = True) -> Dict[str, Any]:
    conn = connect()
    try:
        row = repo.find_word_by_lemma(conn, lemma)
        if row is None or (not include_unpublished and row["status"] != PUBLIC_STATUS):
            raise NotFoundError(f"Word not found: {lemma}", {"lemma": lemma})
        word = repo.row_to_word(row)
        word["values"] = repo.load_meanings(conn, [word["id"]])[word["id"]]
        word["notes"] = repo.load_notes(conn, word["id"]) if include_unpublished else []
        return word
    finally:
        conn.close()
