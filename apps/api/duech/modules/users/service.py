from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from duech.core.auth import ROLES
from duech.core.db import connect, transaction
from duech.core.errors import ConflictError, ValidationError
from duech.core.observability import now_iso

# roles offered in the editor's "assigned to" filter
ASSIGNABLE_ROLES = ("lexicographer", "admin")


def _row_to_user(row: sqlite3.Row) -> Dict[str, Any]:
    return {"id": row["id"], "username": row["username"], "email": row["email"], "role": row["role"]}


def create_user(username: str, password_hash: str, *, email: Optional[str] = None, role: str = "lexicographer") -> Dict[str, Any]:
    """
    Seed an account (fixtures, admin scripts). Sign-up and credentials live
    upstream; this only writes the row the principal headers refer to.
    """
    username = (username or "").strip()
    if not username:
        raise ValidationError("username is required", {"field": "username"})
    if role not in ROLES:
        raise ValidationError(f"invalid role: {role}", {"role": role, "allowed": list(ROLES)})

    conn = connect()
    try:
        with transaction(conn):
            dup = conn.execute(
                "SELECT id FROM users WHERE username=? OR (email IS NOT NULL AND email=?) LIMIT 1;",
                (username, email),
            ).fetchone()
            if dup:
                raise ConflictError(f"user already exists: {username}", {"username": username})
            now = now_iso()
            cur = conn.execute(
                "INSERT INTO users (username, email, password_hash, role, created_at, updated_at) VALUES (?,?,?,?,?,?);",
                (username, email, password_hash, role, now, now),
            )
            user_id = int(cur.lastrowid)
        row = conn.execute("SELECT * FROM users WHERE id=?;", (user_id,)).fetchone()
        return _row_to_user(row)
    finally:
        conn.close()


def get_user(user_id: int) -> Optional[Dict[str, Any]]:
    conn = connect()
    try:
        row = conn.execute("SELECT * FROM users WHERE id=? LIMIT 1;", (user_id,)).fetchone()
        return _row_to_user(row) if row else None
    finally:
        conn.close()


def list_assignable_users() -> List[Dict[str, Any]]:
    conn = connect()
    try:
        rows = conn.execute(
            f"SELECT * FROM users WHERE role IN ({','.join(['?'] * len(ASSIGNABLE_ROLES))}) ORDER BY username ASC;",
            ASSIGNABLE_ROLES,
        ).fetchall()
        return [_row_to_user(r) for r in rows]
    finally:
        conn.close()


def user_options(users: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    return [{"value": str(u["id"]), "label": u["username"]} for u in users]
