from __future__ import annotations

from typing import List, Literal, Optional

from duech.modules.words.schemas import CamelModel

Role = Literal["lexicographer", "editor", "admin", "superadmin"]


class UserOut(CamelModel):
    id: int
    username: str
    email: Optional[str] = None
    role: Role


class UserOption(CamelModel):
    value: str
    label: str


class AssignableUsersOut(CamelModel):
    items: List[UserOut]
    options: List[UserOption]
