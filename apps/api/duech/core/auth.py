"""
Request principal forwarded by the authenticating proxy.

Sessions and credentials are handled upstream; this module only reads
X-User-Id / X-User-Role and gates routes by role.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Request

from duech.core.errors import AuthorizationError

ROLES = ("lexicographer", "editor", "admin", "superadmin")
STAFF_ROLES = ROLES
ADMIN_ROLES = ("admin", "superadmin")


@dataclass(frozen=True)
class Principal:
    user_id: Optional[int]
    role: Optional[str]

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES


def current_principal(request: Request) -> Principal:
    raw_id = (request.headers.get("X-User-Id") or "").strip()
    role = (request.headers.get("X-User-Role") or "").strip().lower() or None
    user_id: Optional[int] = None
    if raw_id:
        try:
            user_id = int(raw_id)
        except ValueError:
            raise AuthorizationError("invalid X-User-Id header", {"x_user_id": raw_id})
    if role is not None and role not in ROLES:
        role = None
    return Principal(user_id=user_id, role=role)


def require_roles(*roles: str) -> Callable[[Request], Principal]:
    allowed = tuple(roles)

    def _dep(request: Request) -> Principal:
        p = current_principal(request)
        if p.role not in allowed:
            raise AuthorizationError(
                f"role required: {'|'.join(allowed)}",
                {"role": p.role},
            )
        return p

    return _dep


require_staff = require_roles(*STAFF_ROLES)
require_admin = require_roles(*ADMIN_ROLES)
