"""Auth service — password hashing, credential checks, JWT issuing."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi.exceptions import HTTPException
from jose import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_backend.auth.models import User
from hr_backend.common.constants import UserRole
from hr_backend.common.exceptions import ConflictError
from hr_backend.config import settings

logger = logging.getLogger(__name__)

_INVALID_CREDENTIALS = "Invalid username or password."


# ── Passwords ───────────────────────────────────────────────────────

def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except (ValueError, UnicodeDecodeError, UnicodeEncodeError):
        # Malformed stored hash
        return False


# ── JWT ─────────────────────────────────────────────────────────────

def create_access_token(username: str, role: UserRole) -> tuple[str, int]:
    """Return (encoded_jwt, expires_in_seconds)."""
    expires_in = settings.JWT_EXPIRY_HOURS * 3600
    payload = {
        "sub": username,
        "role": role.value,
        "type": "access",
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRY_HOURS),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_in


# ── Users ───────────────────────────────────────────────────────────

async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalars().first()


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    """Return the matching user or raise 401 without revealing which part was wrong."""
    user = await get_user_by_username(db, username)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login attempt for username %r", username)
        raise HTTPException(status_code=401, detail=_INVALID_CREDENTIALS)
    logger.info("User %r logged in", username)
    return user


async def create_user(
    db: AsyncSession,
    *,
    username: str,
    password: str,
    role: UserRole,
    employee_id: Optional[uuid.UUID] = None,
) -> User:
    """Create a login account; used by the bootstrap script and tests."""
    if await get_user_by_username(db, username) is not None:
        raise ConflictError("username", username)

    if employee_id is not None:
        linked = await db.execute(select(User.id).where(User.employee_id == employee_id).limit(1))
        if linked.first() is not None:
            raise ConflictError("employee_id", employee_id)

    user = User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        employee_id=employee_id,
    )
    db.add(user)
    await db.flush()
    return user
