"""Auth router — password login and current caller."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hr_backend.auth.dependencies import get_current_user
from hr_backend.auth.schemas import AuthResponse, Caller, LoginRequest, MeResponse
from hr_backend.auth.service import authenticate, create_access_token
from hr_backend.common.rate_limit import limiter
from hr_backend.config import settings
from hr_backend.database import get_db

router = APIRouter(prefix="", tags=["auth"])


# ── POST /login ─────────────────────────────────────────────────────

@router.post("/login")
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """Exchange username + password for a bearer token."""
    user = await authenticate(db, body.username, body.password)
    token, _ = create_access_token(user.username, user.role)
    response = AuthResponse(token=token, username=user.username, role=user.role)
    return {
        "data": response.model_dump(mode="json"),
        "message": "Login successful.",
    }


# ── GET /me ─────────────────────────────────────────────────────────

@router.get("/me")
async def get_me(caller: Caller = Depends(get_current_user)):
    """Return the authenticated caller and the capabilities of their role."""
    return {
        "data": MeResponse.from_caller(caller).model_dump(mode="json"),
        "message": "Current user retrieved successfully.",
    }
