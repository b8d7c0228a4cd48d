"""Auth Pydantic schemas for request / response validation."""


import uuid
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field

from hr_backend.common.constants import PERMISSIONS, UserRole, has_permission


# ── Caller identity (handed to every service call) ─────────────────

@dataclass(frozen=True)
class Caller:
    """The authenticated principal behind a request."""

    username: str
    role: UserRole
    employee_id: Optional[uuid.UUID] = None

    def can(self, *capabilities: str) -> bool:
        return has_permission(self.role, *capabilities)


# ── Requests ────────────────────────────────────────────────────────

class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


# ── Responses ───────────────────────────────────────────────────────

class AuthResponse(BaseModel):
    token: str
    type: str = "Bearer"
    username: str
    role: UserRole


class MeResponse(BaseModel):
    username: str
    role: UserRole
    employee_id: Optional[uuid.UUID] = None
    permissions: list[str]

    @classmethod
    def from_caller(cls, caller: Caller) -> "MeResponse":
        return cls(
            username=caller.username,
            role=caller.role,
            employee_id=caller.employee_id,
            permissions=sorted(PERMISSIONS.get(caller.role, ())),
        )
