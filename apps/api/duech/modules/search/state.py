"""
Canonical search state and its reducer.

`SearchState` is immutable; every change goes through `reduce()`, which
returns the *same* object when the action does not change the query text or
the filter contents, so callers can skip redundant renders/requests with an
identity check.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, Union

from duech.modules.search.query import FILTER_PARAMS, clean_values

ParamValue = Union[str, Iterable[str], None]


@dataclass(frozen=True)
class SearchFilters:
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

    @classmethod
    def build(cls, **values: Any) -> "SearchFilters":
        """Accepts lists, tuples or comma-joined strings per category."""
        return cls(**{k: clean_values(_as_list(v)) for k, v in values.items()})

    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def as_dict(self) -> Dict[str, List[str]]:
        return {f.name: list(getattr(self, f.name)) for f in fields(self)}


def _as_list(value: ParamValue) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def filters_changed(a: SearchFilters, b: SearchFilters) -> bool:
    """Structural comparison per category; selection order and duplicates don't count."""
    for f in fields(SearchFilters):
        if set(getattr(a, f.name)) != set(getattr(b, f.name)):
            return True
    return False


@dataclass(frozen=True)
class SearchState:
    query: str = ""
    filters: SearchFilters = field(default_factory=SearchFilters)
    status: str = ""
    assigned_to: Tuple[str, ...] = ()

    def has_criteria(self, include_editor_filters: bool) -> bool:
        if self.query.strip() or not self.filters.is_empty():
            return True
        return include_editor_filters and (bool(self.status) or bool(self.assigned_to))


EMPTY_STATE = SearchState()


# -------------------------
# Actions
# -------------------------
@dataclass(frozen=True)
class InputChanged:
    """Live keystrokes / filter widget changes from the search bar."""

    query: str
    filters: SearchFilters


@dataclass(frozen=True)
class Submitted:
    """Explicit search: the query text is (re)executed."""

    query: str
    filters: SearchFilters


@dataclass(frozen=True)
class StatusChanged:
    status: str


@dataclass(frozen=True)
class AssigneesChanged:
    assigned_to: Tuple[str, ...]


@dataclass(frozen=True)
class EditorFiltersCleared:
    pass


@dataclass(frozen=True)
class UrlChanged:
    state: SearchState


@dataclass(frozen=True)
class Cleared:
    pass


Action = Union[InputChanged, Submitted, StatusChanged, AssigneesChanged, EditorFiltersCleared, UrlChanged, Cleared]


def _with_query_and_filters(prev: SearchState, query: str, filters: SearchFilters) -> SearchState:
    f_changed = filters_changed(prev.filters, filters)
    if not f_changed and prev.query == query:
        return prev
    return replace(prev, query=query, filters=filters if f_changed else prev.filters)


def reduce(state: SearchState, action: Action, *, editor_mode: bool) -> SearchState:
    if isinstance(action, InputChanged):
        if editor_mode:
            # editor: typing never runs the query; filter widgets still update
            if not filters_changed(state.filters, action.filters):
                return state
            return replace(state, filters=action.filters)
        return _with_query_and_filters(state, action.query, action.filters)

    if isinstance(action, Submitted):
        return _with_query_and_filters(state, action.query.strip(), action.filters)

    if isinstance(action, StatusChanged):
        if state.status == action.status:
            return state
        return replace(state, status=action.status)

    if isinstance(action, AssigneesChanged):
        values = clean_values(list(action.assigned_to))
        if set(values) == set(state.assigned_to):
            return state
        return replace(state, assigned_to=values)

    if isinstance(action, EditorFiltersCleared):
        if not state.status and not state.assigned_to:
            return state
        return replace(state, status="", assigned_to=())

    if isinstance(action, UrlChanged):
        return _with_query_and_filters(state, action.state.query, action.state.filters)

    if isinstance(action, Cleared):
        return state if state == EMPTY_STATE else EMPTY_STATE

    raise TypeError(f"unknown search action: {type(action).__name__}")


# -------------------------
# URL (public mode)
# -------------------------
def state_from_url(params: Mapping[str, ParamValue]) -> SearchState:
    query = params.get("query") or params.get("q") or ""
    if not isinstance(query, str):
        query = next(iter(query), "")
    filters = SearchFilters.build(**{attr: params.get(name) for attr, name in FILTER_PARAMS.items()})
    return SearchState(query=query.strip(), filters=filters)


def state_to_url(state: SearchState) -> Dict[str, str]:
    """Comma-joined, empty categories omitted; suitable for the address bar."""
    out: Dict[str, str] = {}
    if state.query.strip():
        out["query"] = state.query.strip()
    for attr, name in FILTER_PARAMS.items():
        values = getattr(state.filters, attr)
        if values:
            out[name] = ",".join(values)
    return out


def url_signature(state: SearchState) -> str:
    parts = [state.query]
    parts.extend(",".join(getattr(state.filters, attr)) for attr in FILTER_PARAMS)
    parts.append(state.status)
    parts.append(",".join(state.assigned_to))
    return "|".join(parts)


# -------------------------
# Saved filters (editor mode)
# -------------------------
class FilterStore(Protocol):
    def load(self) -> Optional[SearchState]:
        ...

    def save(self, state: SearchState) -> None:
        ...

    def clear(self) -> None:
        ...


def state_to_json(state: SearchState) -> Dict[str, Any]:
    return {
        "query": state.query,
        "filters": state.filters.as_dict(),
        "status": state.status,
        "assignedTo": list(state.assigned_to),
    }


def state_from_json(data: Mapping[str, Any]) -> SearchState:
    raw_filters = data.get("filters") or {}
    known = {f.name for f in fields(SearchFilters)}
    filters = SearchFilters.build(**{k: v for k, v in raw_filters.items() if k in known})
    return SearchState(
        query=str(data.get("query") or "").strip(),
        filters=filters,
        status=str(data.get("status") or ""),
        assigned_to=clean_values(_as_list(data.get("assignedTo"))),
    )


class MemoryFilterStore:
    def __init__(self, initial: Optional[SearchState] = None) -> None:
        self._state = initial

    def load(self) -> Optional[SearchState]:
        return self._state

    def save(self, state: SearchState) -> None:
        self._state = state

    def clear(self) -> None:
        self._state = None


class JsonFileFilterStore:
    """Editor filters persisted between sessions as a small JSON document."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def load(self) -> Optional[SearchState]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        return state_from_json(data)

    def save(self, state: SearchState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(state_to_json(state), ensure_ascii=False), encoding="utf-8")

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
