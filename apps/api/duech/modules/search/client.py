from __future__ import annotations

import os
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from duech.modules.search.query import FILTER_PARAMS, PAGE_SIZE


class SearchClient:
    """
    Async client for /search and /editor/search; `search` matches the
    controller's SearchFn signature.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url or os.getenv("DUECH_API_URL", "http://127.0.0.1:7000")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=self.base_url, headers=dict(headers or {}), timeout=timeout)

    @staticmethod
    def build_params(
        criteria: Mapping[str, Any],
        page: int,
        page_size: int,
        *,
        status: Optional[str] = None,
        assigned_to: Optional[List[str]] = None,
        editor_mode: bool = False,
    ) -> List[Tuple[str, str]]:
        params: List[Tuple[str, str]] = [("page", str(page)), ("pageSize", str(page_size))]
        query = str(criteria.get("query") or "").strip()
        if query:
            params.append(("query", query))
        for attr, name in FILTER_PARAMS.items():
            values = [str(v) for v in (criteria.get(attr) or []) if str(v).strip()]
            if values:
                params.append((name, ",".join(values)))
        if editor_mode:
            if status:
                params.append(("status", status))
            if assigned_to:
                params.append(("assignedTo", ",".join(str(v) for v in assigned_to)))
        return params

    async def search(
        self,
        criteria: Dict[str, Any],
        page: int = 1,
        page_size: int = PAGE_SIZE,
        *,
        status: Optional[str] = None,
        assigned_to: Optional[List[str]] = None,
        editor_mode: bool = False,
    ) -> Dict[str, Any]:
        path = "/editor/search" if editor_mode else "/search"
        params = self.build_params(
            criteria, page, page_size, status=status, assigned_to=assigned_to, editor_mode=editor_mode
        )
        resp = await self._client.get(path, params=params)
        resp.raise_for_status()
        return resp.json()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
