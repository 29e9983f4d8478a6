"""
Pytest fixtures for the API test suite.

Every test that touches storage gets its own sqlite file under pytest's
tmp_path (DATABASE_URL is monkeypatched), so nothing reaches ./data.
"""
from __future__ import annotations

from typing import Dict, Iterator

import pytest
from fastapi.testclient import TestClient

from duech.core.db import init_schema
from duech.modules.users.service import create_user


@pytest.fixture
def configured_db(tmp_path) -> Iterator[str]:
    """Fresh schema in a temporary sqlite database."""
    url = f"sqlite:///{(tmp_path / 'test.db').as_posix()}"
    # Own MonkeyPatch so a test's monkeypatch.undo() does not drop DATABASE_URL.
    with pytest.MonkeyPatch.context() as mp:
        mp.setenv("DATABASE_URL", url)
        init_schema()
        yield url


@pytest.fixture
def users(configured_db) -> Dict[str, Dict]:
    """One user per role, keyed by role."""
    return {
        "lexicographer": create_user("lexi", "x", email="lexi@duech.cl", role="lexicographer"),
        "editor": create_user("edith", "x", email="edith@duech.cl", role="editor"),
        "admin": create_user("admin", "x", email="admin@duech.cl", role="admin"),
        "superadmin": create_user("root", "x", email=None, role="superadmin"),
    }


def headers_for(user: Dict) -> Dict[str, str]:
    return {"X-User-Id": str(user["id"]), "X-User-Role": user["role"]}


@pytest.fixture
def staff_headers(users) -> Dict[str, str]:
    return headers_for(users["lexicographer"])


@pytest.fixture
def admin_headers(users) -> Dict[str, str]:
    return headers_for(users["admin"])


@pytest.fixture
def client(configured_db) -> Iterator[TestClient]:
    from duech.main import app

    with TestClient(app) as c:
        yield c


def make_word(lemma: str, *meanings: str, status: str = "published", **kwargs) -> Dict:
    """Create a word through the service; meanings given as plain text."""
    from duech.modules.words.service import create_word

    values = [{"meaning": m} for m in meanings] or [{"meaning": f"definición de {lemma}"}]
    return create_word({"lemma": lemma, "values": values}, status=status, **kwargs)
