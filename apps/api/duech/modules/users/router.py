from __future__ import annotations

from fastapi import APIRouter, Depends

from duech.core.auth import Principal, require_staff

from .schemas import AssignableUsersOut
from .service import list_assignable_users, user_options

router = APIRouter(tags=["users"])


@router.get("/users/assignable", response_model=AssignableUsersOut)
def api_assignable_users(principal: Principal = Depends(require_staff)) -> AssignableUsersOut:
    users = list_assignable_users()
    return AssignableUsersOut(items=users, options=user_options(users))
