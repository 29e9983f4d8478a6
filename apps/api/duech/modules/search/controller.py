"""
Search controller: one per search page, created on mount and closed on
navigation away.

It owns the canonical `SearchState` (changed only through `reduce`) and the
visible results, and sequences overlapping searches with a monotonically
increasing request token: a response is applied only if its token is still
the latest one issued (last request wins, not last response).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Protocol

from duech.modules.search.query import PAGE_SIZE
from duech.modules.search.state import (
    EMPTY_STATE,
    Action,
    AssigneesChanged,
    Cleared,
    EditorFiltersCleared,
    FilterStore,
    InputChanged,
    MemoryFilterStore,
    ParamValue,
    SearchFilters,
    SearchState,
    StatusChanged,
    Submitted,
    UrlChanged,
    reduce,
    state_from_url,
    state_to_url,
    url_signature,
)

_log = logging.getLogger("duech.search")


class SearchFn(Protocol):
    def __call__(
        self,
        criteria: Dict[str, Any],
        page: int,
        page_size: int,
        *,
        status: Optional[str],
        assigned_to: Optional[List[str]],
        editor_mode: bool,
    ) -> Awaitable[Dict[str, Any]]:
        ...


@dataclass(frozen=True)
class ResultsView:
    results: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    page: int = 1
    total_pages: int = 0
    has_next: bool = False
    has_prev: bool = False
    has_searched: bool = False
    is_loading: bool = False
    last_executed_query: str = ""


def _pick(d: Mapping[str, Any], camel: str, snake: str, default: Any) -> Any:
    if camel in d:
        return d[camel]
    return d.get(snake, default)


class SearchController:
    def __init__(
        self,
        search_fn: SearchFn,
        *,
        editor_mode: bool = False,
        url_params: Optional[Mapping[str, ParamValue]] = None,
        store: Optional[FilterStore] = None,
        page_size: int = PAGE_SIZE,
        on_url_change: Optional[Callable[[Dict[str, str]], None]] = None,
    ) -> None:
        self._search_fn = search_fn
        self.editor_mode = editor_mode
        self.page_size = page_size
        self._store: FilterStore = store if store is not None else MemoryFilterStore()
        self._on_url_change = on_url_change

        if editor_mode:
            initial = self._store.load() or EMPTY_STATE
        else:
            initial = state_from_url(url_params or {})

        self._state = initial
        self._view = ResultsView(is_loading=initial.has_criteria(editor_mode))
        self._latest_token = 0
        self._initial_triggered = False
        self._closed = False
        self._url_signature = url_signature(initial)

    # -------------------------
    # read side
    # -------------------------
    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def view(self) -> ResultsView:
        return self._view

    @property
    def latest_token(self) -> int:
        return self._latest_token

    def has_criteria(self) -> bool:
        return self._state.has_criteria(self.editor_mode)

    def url_params(self) -> Dict[str, str]:
        return state_to_url(self._state)

    # -------------------------
    # state transitions
    # -------------------------
    def dispatch(self, action: Action, *, push_url: bool = True) -> bool:
        """Apply `action`; False when it was a no-op."""
        nxt = reduce(self._state, action, editor_mode=self.editor_mode)
        if nxt is self._state:
            return False
        self._state = nxt
        if push_url and not self.editor_mode:
            params = state_to_url(nxt)
            self._url_signature = url_signature(nxt)
            if self._on_url_change is not None:
                self._on_url_change(params)
        return True

    def update_input(self, query: str, filters: SearchFilters) -> bool:
        changed = self.dispatch(InputChanged(query=query, filters=filters))
        if changed and not self.editor_mode:
            # public: the URL moved, so the next auto-search runs for the new state
            self._rearm()
        return changed

    def _rearm(self) -> None:
        """Arm the auto-search for the current state; with no criteria, drop results and anything in flight."""
        self._initial_triggered = False
        if self.has_criteria():
            self._view = replace(self._view, has_searched=False, is_loading=True, page=1)
            return
        self._next_token()
        self._view = ResultsView()

    def set_status(self, status: str) -> bool:
        return self.dispatch(StatusChanged(status=status))

    def set_assignees(self, values: List[str]) -> bool:
        return self.dispatch(AssigneesChanged(assigned_to=tuple(values)))

    def clear_editor_filters(self) -> bool:
        return self.dispatch(EditorFiltersCleared())

    # -------------------------
    # searching
    # -------------------------
    def _next_token(self) -> int:
        self._latest_token += 1
        return self._latest_token

    def _save(self, snapshot: SearchState) -> None:
        if self.editor_mode:
            self._store.save(snapshot)

    async def search(self, query: str, filters: SearchFilters, page: int = 1) -> bool:
        """Run a search; True when its response was applied."""
        if self._closed:
            return False
        token = self._next_token()
        self._view = replace(self._view, is_loading=True)
        self.dispatch(Submitted(query=query, filters=filters))
        snapshot = self._state

        criteria: Dict[str, Any] = {"query": snapshot.query}
        criteria.update(snapshot.filters.as_dict())
        try:
            data = await self._search_fn(
                criteria,
                page,
                self.page_size,
                status=snapshot.status if self.editor_mode else None,
                assigned_to=list(snapshot.assigned_to) if self.editor_mode else None,
                editor_mode=self.editor_mode,
            )
        except Exception as e:
            if token != self._latest_token:
                _log.debug("search %s failed after being superseded by %s", token, self._latest_token)
                return False
            # shown as "no results"; a new user action retries
            _log.warning("search %s failed: %s: %s", token, type(e).__name__, e)
            self._view = replace(
                self._view,
                results=[],
                total=0,
                total_pages=0,
                has_next=False,
                has_prev=False,
                has_searched=True,
                is_loading=False,
            )
            self._save(snapshot)
            return False

        if token != self._latest_token:
            _log.debug("discarding stale search response %s (latest %s)", token, self._latest_token)
            return False

        pagination = data.get("pagination") or {}
        self._view = ResultsView(
            results=list(data.get("results") or []),
            total=int(_pick(pagination, "total", "total", 0)),
            page=page,
            total_pages=int(_pick(pagination, "totalPages", "total_pages", 0)),
            has_next=bool(_pick(pagination, "hasNext", "has_next", False)),
            has_prev=bool(_pick(pagination, "hasPrev", "has_prev", False)),
            has_searched=True,
            is_loading=False,
            last_executed_query=snapshot.query,
        )
        self._save(snapshot)
        return True

    async def submit(self, query: str, filters: SearchFilters) -> bool:
        return await self.search(query.strip(), filters, page=1)

    async def change_page(self, page: int) -> bool:
        if page < 1 or page > self._view.total_pages:
            return False
        return await self.search(self._state.query, self._state.filters, page=page)

    async def run_initial_search(self) -> bool:
        """Automatic search on mount (or after navigation) when the state already has criteria."""
        if self._closed or self._view.has_searched or self._initial_triggered:
            return False
        if not self.has_criteria():
            self._view = replace(self._view, is_loading=False)
            return False
        self._initial_triggered = True
        return await self.search(self._state.query, self._state.filters)

    async def navigate(self, url_params: Mapping[str, ParamValue]) -> bool:
        """Public mode back/forward: restore the result set the URL describes."""
        if self.editor_mode or self._closed:
            return False
        target = state_from_url(url_params)
        signature = url_signature(target)
        if signature == self._url_signature:
            return False
        self._url_signature = signature
        self.dispatch(UrlChanged(state=target), push_url=False)
        self._rearm()
        return await self.run_initial_search()

    def clear_all(self) -> None:
        """Reset query, filters, status, assignees, results and pagination in one step."""
        self._next_token()
        self._state = reduce(self._state, Cleared(), editor_mode=self.editor_mode)
        self._view = ResultsView()
        self._initial_triggered = False
        if self.editor_mode:
            self._store.clear()
        else:
            self._url_signature = url_signature(self._state)
            if self._on_url_change is not None:
                self._on_url_change({})

    def close(self) -> None:
        """Teardown; responses still in flight are discarded."""
        self._closed = True
        self._next_token()
