"""
DB utilities (sqlite default).

Defaults:
- DATABASE_URL: sqlite:///./data/app.db (relative paths resolve against the repo root)

Services talk to sqlite3 directly through `connect()`; the SQLAlchemy engine is
used for schema creation and the health probe.
"""
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

DEFAULT_DATABASE_URL = "sqlite:///./data/app.db"


def get_database_url() -> str:
    return os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)


def _repo_root() -> Path:
    # apps/api/duech/core/db.py -> repo root = parents[4]
    return Path(__file__).resolve().parents[4]


def resolve_sqlite_path(database_url: str) -> Optional[Path]:
    if not database_url.startswith("sqlite:///"):
        return None
    p = database_url[len("sqlite:///") :]

    # absolute unix
    if p.startswith("/"):
        return Path(p)

    # absolute windows drive, both C:/ and C:\ forms
    if len(p) >= 3 and p[1] == ":" and (p[2] == "/" or p[2] == "\\"):
        return Path(p)

    # relative -> repo root
    return (_repo_root() / p).resolve()


def _sqlite_path() -> Path:
    url = get_database_url()
    sp = resolve_sqlite_path(url)
    if sp is None:
        raise ValueError(f"Only sqlite supported for now, got DATABASE_URL={url!r}")
    sp.parent.mkdir(parents=True, exist_ok=True)
    return sp


_engine: Optional[Engine] = None
_engine_url: Optional[str] = None


def get_engine() -> Engine:
    global _engine, _engine_url
    url = get_database_url()
    if _engine is not None and _engine_url == url:
        return _engine

    connect_args = {}
    engine_url = url
    if url.startswith("sqlite:///"):
        connect_args = {"check_same_thread": False}
        engine_url = "sqlite:///" + _sqlite_path().as_posix()

    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(engine_url, future=True, connect_args=connect_args)
    _engine_url = url
    return _engine


def init_schema() -> None:
    """Create every table declared by the module models (idempotent)."""
    from sqlmodel import SQLModel

    # register tables on the shared metadata
    from duech.modules.users import models as _users  # noqa: F401
    from duech.modules.words import models as _words  # noqa: F401

    SQLModel.metadata.create_all(get_engine())


def connect() -> sqlite3.Connection:
    conn = sqlite3.connect(str(_sqlite_path()), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    # cascades (word -> meanings -> examples, word -> notes) depend on this
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """
    BEGIN ... COMMIT on `conn`; ROLLBACK on any exception, which is re-raised.
    """
    conn.execute("BEGIN;")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    conn.commit()


def db_health() -> Dict[str, Any]:
    url = get_database_url()
    kind = "sqlite" if url.startswith("sqlite") else "unknown"
    sp = resolve_sqlite_path(url)
    path = str(sp.as_posix()) if sp is not None else url

    try:
        eng = get_engine()
        with eng.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ok", "kind": kind, "path": path}
    except Exception as e:
        return {"status": "error", "kind": kind, "path": path, "error": str(e)}
