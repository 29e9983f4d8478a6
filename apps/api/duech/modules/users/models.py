from __future__ import annotations

from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer
from sqlmodel import Field, SQLModel


# role: lexicographer|editor|admin|superadmin
class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True)
    email: Optional[str] = Field(default=None, unique=True)
    password_hash: str
    role: str = Field(default="lexicographer")
    # one live session per user; a new login replaces it
    current_session_id: Optional[str] = Field(default=None)

    created_at: str
    updated_at: str


class PasswordResetToken(SQLModel, table=True):
    __tablename__ = "password_reset_tokens"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(
        sa_column=Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    )
    token: str = Field(unique=True)
    created_at: str
