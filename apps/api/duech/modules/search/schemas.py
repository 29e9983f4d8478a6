from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from duech.modules.words.schemas import CamelModel


class PaginationOut(CamelModel):
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    has_next: bool
    has_prev: bool


class SearchResultOut(CamelModel):
    id: int
    lemma: str
    root: Optional[str] = None
    letter: str
    status: str
    assigned_to: Optional[int] = None
    match_type: str
    snippet: str = ""
    meanings_count: int = 0


class SearchOut(CamelModel):
    results: List[SearchResultOut]
    pagination: PaginationOut
    # false: nothing to search for (distinct from a search with zero hits)
    has_criteria: bool = True
