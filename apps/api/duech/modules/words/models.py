from __future__ import annotations

from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer
from sqlmodel import Field, SQLModel


# status: see constants.WORD_STATUSES
class Word(SQLModel, table=True):
    __tablename__ = "words"

    id: Optional[int] = Field(default=None, primary_key=True)
    lemma: str = Field(unique=True, index=True)
    root: Optional[str] = Field(default=None)
    letter: str = Field(index=True)  # single character (a-z, ñ)
    variant: Optional[str] = Field(default=None)
    status: str = Field(default="draft", index=True)
    created_by: Optional[int] = Field(default=None, foreign_key="users.id")
    assigned_to: Optional[int] = Field(default=None, foreign_key="users.id", index=True)

    created_at: str
    updated_at: str


# acepción; replaced wholesale when its word is edited
class Meaning(SQLModel, table=True):
    __tablename__ = "meanings"

    id: Optional[int] = Field(default=None, primary_key=True)
    word_id: int = Field(
        sa_column=Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    number: int
    origin: Optional[str] = Field(default=None)
    meaning: str
    observation: Optional[str] = Field(default=None)
    remission: Optional[str] = Field(default=None)  # cross-reference to another lemma
    grammar_category: Optional[str] = Field(default=None)

    social_valuations: Optional[str] = Field(default=None)
    social_stratum_markers: Optional[str] = Field(default=None)
    style_markers: Optional[str] = Field(default=None)
    intentionality_markers: Optional[str] = Field(default=None)
    geographical_markers: Optional[str] = Field(default=None)
    chronological_markers: Optional[str] = Field(default=None)
    frequency_markers: Optional[str] = Field(default=None)

    dictionary: Optional[str] = Field(default=None)  # source tag: duech, difruech, ...
    variant: Optional[str] = Field(default=None)

    created_at: str
    updated_at: str


class Example(SQLModel, table=True):
    __tablename__ = "examples"

    id: Optional[int] = Field(default=None, primary_key=True)
    meaning_id: int = Field(
        sa_column=Column(Integer, ForeignKey("meanings.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    value: str
    author: Optional[str] = Field(default=None)
    year: Optional[str] = Field(default=None)
    publication: Optional[str] = Field(default=None)
    format: Optional[str] = Field(default=None)
    title: Optional[str] = Field(default=None)
    date: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None)
    editorial: Optional[str] = Field(default=None)
    volume: Optional[str] = Field(default=None)
    number: Optional[str] = Field(default=None)
    page: Optional[str] = Field(default=None)
    doi: Optional[str] = Field(default=None)
    url: Optional[str] = Field(default=None)

    created_at: str
    updated_at: str


# append-only editorial comments
class Note(SQLModel, table=True):
    __tablename__ = "notes"

    id: Optional[int] = Field(default=None, primary_key=True)
    word_id: int = Field(
        sa_column=Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    user_id: Optional[int] = Field(default=None, foreign_key="users.id")
    note: str
    resolved: bool = Field(default=False)
    created_at: str
