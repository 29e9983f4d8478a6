"""
Tests for the async HTTP search client, against httpx.MockTransport and
against the real app through httpx.ASGITransport.
"""
import asyncio

import httpx
import pytest

from conftest import headers_for, make_word
from duech.modules.search.client import SearchClient
from duech.modules.search.controller import SearchController
from duech.modules.search.state import SearchFilters


def _mock_client(seen, status_code=200):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = {
            "results": [],
            "pagination": {"total": 0, "totalPages": 0, "page": 1, "pageSize": 50, "hasNext": False, "hasPrev": False},
            "hasCriteria": True,
        }
        return httpx.Response(status_code, json=body)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://duech.test")


class TestBuildParams:
    def test_public_params_drop_editor_filters(self):
        params = SearchClient.build_params(
            {"query": " arbol ", "categories": ["verbo", "sustantivo"], "style_markers": ["coloquial"], "letters": []},
            2,
            50,
            status="draft",
            assigned_to=["1"],
        )

        assert params == [
            ("page", "2"),
            ("pageSize", "50"),
            ("query", "arbol"),
            ("categories", "verbo,sustantivo"),
            ("styleMarkers", "coloquial"),
        ]

    def test_editor_params(self):
        params = SearchClient.build_params({"query": ""}, 1, 50, status="draft", assigned_to=["1", "2"], editor_mode=True)

        assert ("status", "draft") in params
        assert ("assignedTo", "1,2") in params
        assert all(name != "query" for name, _ in params)


class TestSearch:
    def test_public_path(self):
        seen = []

        async def scenario():
            client = SearchClient(client=_mock_client(seen))
            try:
                return await client.search({"query": "arbol"}, 1, 50)
            finally:
                await client.aclose()

        data = asyncio.run(scenario())

        assert data["hasCriteria"] is True
        assert seen[0].url.path == "/search"
        assert seen[0].url.params["query"] == "arbol"

    def test_editor_path(self):
        seen = []

        async def scenario():
            client = SearchClient(client=_mock_client(seen))
            return await client.search({"query": "arbol"}, 1, 50, status="draft", editor_mode=True)

        asyncio.run(scenario())

        assert seen[0].url.path == "/editor/search"
        assert seen[0].url.params["status"] == "draft"

    def test_http_error_raises(self):
        async def scenario():
            client = SearchClient(client=_mock_client([], status_code=500))
            await client.search({"query": "arbol"}, 1, 50)

        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(scenario())


class TestAgainstApp:
    def test_controller_over_http(self, configured_db, users):
        from duech.main import app

        make_word("árbol", "Planta leñosa.")
        make_word("pino", "Un árbol conífero.")

        async def scenario():
            http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://duech.test")
            client = SearchClient(client=http)
            ctrl = SearchController(client.search)
            try:
                await ctrl.submit("arbol", SearchFilters())
            finally:
                await http.aclose()
            return ctrl

        ctrl = asyncio.run(scenario())

        assert [r["lemma"] for r in ctrl.view.results] == ["árbol", "pino"]
        assert ctrl.view.total == 2
        assert ctrl.view.total_pages == 1

    def test_editor_controller_over_http(self, configured_db, users):
        from duech.main import app

        make_word("arbolillo", "Árbol pequeño.", status="draft")

        async def scenario():
            http = httpx.AsyncClient(
                transport=httpx.ASGITransport(app=app),
                base_url="http://duech.test",
                headers=headers_for(users["editor"]),
            )
            client = SearchClient(client=http)
            ctrl = SearchController(client.search, editor_mode=True)
            ctrl.set_status("draft")
            try:
                await ctrl.submit("", SearchFilters())
            finally:
                await http.aclose()
            return ctrl

        ctrl = asyncio.run(scenario())

        assert [r["lemma"] for r in ctrl.view.results] == ["arbolillo"]
