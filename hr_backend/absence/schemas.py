"""Absence Pydantic schemas."""


import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hr_backend.common.constants import ABSENCE_REASON_MAX_LENGTH, AbsenceStatus, AbsenceType
from hr_backend.core_hr.schemas import EmployeeResponse


# ── Requests ────────────────────────────────────────────────────────

class AbsenceRequestCreate(BaseModel):
    start_date: date
    end_date: date
    type: AbsenceType
    reason: Optional[str] = Field(None, max_length=ABSENCE_REASON_MAX_LENGTH)


class AbsenceRespond(BaseModel):
    """Manager decision on a pending request."""

    status: AbsenceStatus
    manager_comment: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _must_resolve(cls, value: AbsenceStatus) -> AbsenceStatus:
        if value == AbsenceStatus.pending:
            raise ValueError("status must be APPROVED or REJECTED")
        return value


# ── Responses ───────────────────────────────────────────────────────

class AbsenceRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    employee: EmployeeResponse
    start_date: date
    end_date: date
    type: AbsenceType
    reason: Optional[str] = None
    status: AbsenceStatus
    approved_by: Optional[EmployeeResponse] = None
    requested_at: datetime
    responded_at: Optional[datetime] = None
    manager_comment: Optional[str] = None

    @classmethod
    def from_request(cls, request) -> "AbsenceRequestResponse":
        return cls(
            id=request.id,
            employee=EmployeeResponse.from_employee(request.employee),
            start_date=request.start_date,
            end_date=request.end_date,
            type=request.type,
            reason=request.reason,
            status=request.status,
            approved_by=(
                EmployeeResponse.from_employee(request.approved_by)
                if request.approved_by is not None
                else None
            ),
            requested_at=request.requested_at,
            responded_at=request.responded_at,
            manager_comment=request.manager_comment,
        )
