"""Core HR Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *Create / *Update  → request bodies (write)
  - *Response          → view-shaped read bodies
"""


import uuid
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hr_backend.common.constants import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    ORG_FIELD_MAX_LENGTH,
)


# ═════════════════════════════════════════════════════════════════════
# Employee — write schemas
# ═════════════════════════════════════════════════════════════════════


class EmployeeCreate(BaseModel):
    """Payload for creating a new employee."""

    first_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr = Field(..., max_length=EMAIL_MAX_LENGTH)
    position: str = Field(..., min_length=1, max_length=ORG_FIELD_MAX_LENGTH)
    department: str = Field(..., min_length=1, max_length=ORG_FIELD_MAX_LENGTH)
    hire_date: date
    salary: float = Field(..., gt=0)
    manager_id: Optional[uuid.UUID] = None
    team_ids: Optional[list[uuid.UUID]] = None


class EmployeeUpdate(BaseModel):
    """Payload for updating an employee.

    Names and email are always replaced. The remaining fields are applied
    only when present; ``team_ids`` (even ``[]``) replaces all memberships.
    """

    first_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr = Field(..., max_length=EMAIL_MAX_LENGTH)
    position: Optional[str] = Field(None, max_length=ORG_FIELD_MAX_LENGTH)
    department: Optional[str] = Field(None, max_length=ORG_FIELD_MAX_LENGTH)
    hire_date: Optional[date] = None
    salary: Optional[float] = Field(None, gt=0)
    manager_id: Optional[uuid.UUID] = None
    team_ids: Optional[list[uuid.UUID]] = None


class OwnProfileUpdate(BaseModel):
    """Fields an employee may change on their own record."""

    first_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    last_name: str = Field(..., min_length=NAME_MIN_LENGTH, max_length=NAME_MAX_LENGTH)
    email: EmailStr = Field(..., max_length=EMAIL_MAX_LENGTH)
    position: Optional[str] = Field(None, max_length=ORG_FIELD_MAX_LENGTH)
    department: Optional[str] = Field(None, max_length=ORG_FIELD_MAX_LENGTH)
    team_ids: Optional[list[uuid.UUID]] = None


# ═════════════════════════════════════════════════════════════════════
# Employee — read schemas
# ═════════════════════════════════════════════════════════════════════


class EmployeeResponse(BaseModel):
    """View of an employee; manager and teams flattened to ids and a name."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    position: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[date] = None
    salary: Optional[float] = None
    manager_id: Optional[uuid.UUID] = None
    manager_name: Optional[str] = None
    team_ids: list[uuid.UUID] = []

    @classmethod
    def from_employee(cls, employee) -> "EmployeeResponse":
        view = cls.model_validate(employee)
        if employee.manager is not None:
            view.manager_name = employee.manager.full_name
        view.team_ids = [team.id for team in employee.teams]
        return view


# ═════════════════════════════════════════════════════════════════════
# Team
# ═════════════════════════════════════════════════════════════════════


class TeamCreate(BaseModel):
    """Payload for creating or updating a team.

    On update an omitted ``manager_id`` clears the manager and an omitted
    or empty ``employee_ids`` clears the members.
    """

    name: str = Field(..., min_length=1, max_length=100)
    manager_id: Optional[uuid.UUID] = None
    employee_ids: Optional[list[uuid.UUID]] = None


TeamUpdate = TeamCreate


class TeamResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    manager_id: Optional[uuid.UUID] = None
    employee_ids: list[uuid.UUID] = []

    @classmethod
    def from_team(cls, team) -> "TeamResponse":
        view = cls.model_validate(team)
        view.employee_ids = [member.id for member in team.members]
        return view
