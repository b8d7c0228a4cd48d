"""Auth dependencies — JWT validation, capability enforcement."""

from __future__ import annotations

import uuid
from typing import Callable

from fastapi import Depends, Request
from fastapi.exceptions import HTTPException
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from hr_backend.auth.schemas import Caller
from hr_backend.auth.service import get_user_by_username
from hr_backend.common.exceptions import ForbiddenException
from hr_backend.config import settings
from hr_backend.database import get_db


def _extract_bearer(request: Request) -> str:
    """Extract Bearer token from Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header.")
    return auth_header[7:]


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> Caller:
    """Validate the JWT and resolve the caller from the stored account.

    The role comes from the ``users`` row, not from the token claim, so a
    role change takes effect on the next request.
    """
    token = _extract_bearer(request)

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token has expired.")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token.")

    if payload.get("type") != "access" or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token type.")

    user = await get_user_by_username(db, payload["sub"])
    if user is None:
        raise HTTPException(status_code=401, detail="User account not found.")

    caller = Caller(username=user.username, role=user.role, employee_id=user.employee_id)
    request.state.caller = caller
    return caller


# ── Permission-based dependency ─────────────────────────────────────

def require_permission(*capabilities: str) -> Callable:
    """Return a dependency that admits callers holding any of ``capabilities``."""

    async def _check(caller: Caller = Depends(get_current_user)) -> Caller:
        if not caller.can(*capabilities):
            raise ForbiddenException(
                detail=f"Role '{caller.role.value}' is not permitted. Required: {list(capabilities)}.",
            )
        return caller

    return _check


# ── Employee-scoped dependency ──────────────────────────────────────

async def require_employee(caller: Caller = Depends(get_current_user)) -> uuid.UUID:
    """Return the caller's employee id; accounts without a profile get 403."""
    if caller.employee_id is None:
        raise ForbiddenException(detail="No employee profile is linked to this account.")
    return caller.employee_id
