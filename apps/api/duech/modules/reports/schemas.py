from __future__ import annotations

from typing import List

from duech.modules.words.schemas import CamelModel, WordOut


class WordsExportOut(CamelModel):
    success: bool = True
    words: List[WordOut]
    count: int


class ReportEmailOut(CamelModel):
    success: bool = True
    email: str
