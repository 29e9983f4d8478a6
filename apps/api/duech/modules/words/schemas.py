from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

WordStatus = Literal[
    "draft",
    "in_review",
    "reviewed",
    "rejected",
    "published",
    "imported",
    "included",
    "preredacted",
    "redacted",
    "archaic",
    "quarantined",
]


class CamelModel(BaseModel):
    # JSON bodies are camelCase; python attributes stay snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExampleIn(CamelModel):
    value: str
    author: Optional[str] = None
    year: Optional[str] = None
    publication: Optional[str] = None
    source: Optional[str] = None  # legacy name of `publication`
    format: Optional[str] = None
    title: Optional[str] = None
    date: Optional[str] = None
    city: Optional[str] = None
    editorial: Optional[str] = None
    volume: Optional[str] = None
    number: Optional[str] = None
    page: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None


class MeaningIn(CamelModel):
    number: Optional[int] = None  # defaults to the submission position
    meaning: str
    origin: Optional[str] = None
    observation: Optional[str] = None
    remission: Optional[str] = None
    grammar_category: Optional[str] = None
    social_valuations: Optional[str] = None
    social_stratum_markers: Optional[str] = None
    style_markers: Optional[str] = None
    intentionality_markers: Optional[str] = None
    geographical_markers: Optional[str] = None
    chronological_markers: Optional[str] = None
    frequency_markers: Optional[str] = None
    dictionary: Optional[str] = None
    variant: Optional[str] = None
    examples: Optional[List[ExampleIn]] = None


class WordIn(CamelModel):
    lemma: str
    root: Optional[str] = None
    values: List[MeaningIn] = Field(default_factory=list)


class WordCreateIn(WordIn):
    letter: Optional[str] = None
    assigned_to: Optional[int] = None
    created_by: Optional[int] = None
    status: Optional[WordStatus] = None


class WordUpdateIn(WordIn):
    status: Optional[WordStatus] = None
    assigned_to: Optional[int] = None


class NoteCreateIn(CamelModel):
    note: str


class ExampleOut(CamelModel):
    id: int
    value: str
    author: Optional[str] = None
    year: Optional[str] = None
    publication: Optional[str] = None
    format: Optional[str] = None
    title: Optional[str] = None
    date: Optional[str] = None
    city: Optional[str] = None
    editorial: Optional[str] = None
    volume: Optional[str] = None
    number: Optional[str] = None
    page: Optional[str] = None
    doi: Optional[str] = None
    url: Optional[str] = None


class MeaningOut(CamelModel):
    id: int
    number: int
    meaning: str
    origin: Optional[str] = None
    observation: Optional[str] = None
    remission: Optional[str] = None
    grammar_category: Optional[str] = None
    social_valuations: Optional[str] = None
    social_stratum_markers: Optional[str] = None
    style_markers: Optional[str] = None
    intentionality_markers: Optional[str] = None
    geographical_markers: Optional[str] = None
    chronological_markers: Optional[str] = None
    frequency_markers: Optional[str] = None
    dictionary: Optional[str] = None
    variant: Optional[str] = None
    examples: List[ExampleOut] = Field(default_factory=list)


class NoteUserOut(CamelModel):
    id: int
    username: str
    email: Optional[str] = None
    role: str


class NoteOut(CamelModel):
    id: int
    word_id: int
    user_id: Optional[int] = None
    note: str
    resolved: bool = False
    created_at: Optional[str] = None
    user: Optional[NoteUserOut] = None


class WordOut(CamelModel):
    id: int
    lemma: str
    root: Optional[str] = None
    letter: str
    variant: Optional[str] = None
    status: str
    created_by: Optional[int] = None
    assigned_to: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    values: List[MeaningOut] = Field(default_factory=list)
    notes: List[NoteOut] = Field(default_factory=list)


class WordCreatedData(CamelModel):
    word_id: int
    lemma: str
    letter: str


class WordCreateOut(CamelModel):
    success: bool = True
    data: WordCreatedData


class LemmaData(CamelModel):
    lemma: str


class WordMutationOut(CamelModel):
    success: bool = True
    data: LemmaData


class NoteCreateOut(CamelModel):
    success: bool = True
    data: NoteOut


class WordGetOut(CamelModel):
    success: bool = True
    data: WordOut
