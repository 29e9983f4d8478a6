from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, Request

from duech.core.auth import Principal, require_staff

from .query import FILTER_PARAMS, SearchCriteria, clamp_page, clamp_page_size, clean_values, parse_assignees
from .schemas import SearchOut
from .service import search_words

router = APIRouter(tags=["search"])


def _criteria(request: Request, query: str, editor_mode: bool) -> SearchCriteria:
    params = request.query_params
    kwargs: Dict[str, Any] = {
        attr: clean_values(params.getlist(name)) for attr, name in FILTER_PARAMS.items()
    }
    if editor_mode:
        kwargs["status"] = (params.get("status") or "").strip() or None
        kwargs["assigned_to"] = parse_assignees(params.getlist("assignedTo"))
    return SearchCriteria(query=(query or "").strip(), **kwargs)


@router.get("/search", response_model=SearchOut)
def api_search(
    request: Request,
    query: str = Query("", description="Free text matched against lemma and meaning text"),
    page: int | None = Query(None),
    page_size: int | None = Query(None, alias="pageSize", description="Default and max 50"),
) -> Dict[str, Any]:
    # status/assignedTo are editor-only and ignored here
    criteria = _criteria(request, query, editor_mode=False)
    return search_words(criteria, page=clamp_page(page), page_size=clamp_page_size(page_size), editor_mode=False)


@router.get("/editor/search", response_model=SearchOut)
def api_search_editor(
    request: Request,
    query: str = Query(""),
    page: int | None = Query(None),
    page_size: int | None = Query(None, alias="pageSize"),
    principal: Principal = Depends(require_staff),
) -> Dict[str, Any]:
    criteria = _criteria(request, query, editor_mode=True)
    return search_words(criteria, page=clamp_page(page), page_size=clamp_page_size(page_size), editor_mode=True)
