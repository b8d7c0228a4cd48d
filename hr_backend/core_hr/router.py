"""Core HR router — Employee and Team API endpoints.

Routes:
    /employees              — List (role-scoped), create employees
    /employees/managers     — Visible employees holding manager / lead positions
    /employees/me           — Own profile read + self-service update
    /employees/{id}         — Get, update, delete employee
    /teams                  — List, create teams
    /teams/{id}             — Update team
    /teams/my-team          — First team containing the caller
    /teams/my-team/members  — Colleagues across the caller's teams
"""


import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hr_backend.auth.dependencies import get_current_user, require_employee, require_permission
from hr_backend.auth.schemas import Caller
from hr_backend.common.exceptions import NotFoundException
from hr_backend.core_hr.schemas import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    OwnProfileUpdate,
    TeamCreate,
    TeamResponse,
    TeamUpdate,
)
from hr_backend.core_hr.service import EmployeeService, TeamService
from hr_backend.database import get_db


# ═════════════════════════════════════════════════════════════════════
# Routers
# ═════════════════════════════════════════════════════════════════════

employees_router = APIRouter(prefix="", tags=["employees"])
teams_router = APIRouter(prefix="", tags=["teams"])

_can_manage_employees = require_permission("employee:create", "employee:create_report")
_can_delete_employees = require_permission("employee:delete")
_can_manage_teams = require_permission("team:manage")


def _employee_list(employees) -> list[dict]:
    return [EmployeeResponse.from_employee(emp).model_dump(mode="json") for emp in employees]


# ═════════════════════════════════════════════════════════════════════
# Employee Endpoints
# ═════════════════════════════════════════════════════════════════════


# ── GET /employees — List employees ─────────────────────────────────

@employees_router.get("")
async def list_employees(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """List the employees visible to the caller.

    - **HR / ADMIN**: everyone
    - **MANAGER**: direct reports
    - **EMPLOYEE**: empty list
    """
    employees = await EmployeeService.list_employees(db, caller)
    return {
        "data": _employee_list(employees),
        "message": f"Found {len(employees)} employee(s).",
    }


# ── GET /employees/managers ─────────────────────────────────────────

@employees_router.get("/managers")
async def list_managers(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(_can_manage_employees),
):
    managers = await EmployeeService.list_managers(db, caller)
    return {
        "data": _employee_list(managers),
        "message": f"Found {len(managers)} manager(s).",
    }


# ── GET /employees/me ───────────────────────────────────────────────

@employees_router.get("/me")
async def get_my_profile(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    employee = await EmployeeService.get_own_profile(db, caller)
    return {
        "data": EmployeeResponse.from_employee(employee).model_dump(mode="json"),
        "message": "Profile retrieved successfully.",
    }


# ── PUT /employees/me ───────────────────────────────────────────────

@employees_router.put("/me")
async def update_my_profile(
    body: OwnProfileUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Self-service update. Manager and salary cannot be changed here."""
    employee = await EmployeeService.update_own_profile(db, caller, body)
    return {
        "data": EmployeeResponse.from_employee(employee).model_dump(mode="json"),
        "message": "Profile updated successfully.",
    }


# ── GET /employees/{id} ─────────────────────────────────────────────

@employees_router.get("/{employee_id}")
async def get_employee(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(get_current_user),
):
    """Retrieve one employee; out-of-scope records answer 404."""
    employee = await EmployeeService.get_employee(db, caller, employee_id)
    return {
        "data": EmployeeResponse.from_employee(employee).model_dump(mode="json"),
        "message": "Employee retrieved successfully.",
    }


# ── POST /employees ─────────────────────────────────────────────────

@employees_router.post("", status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(_can_manage_employees),
):
    """Create an employee. Requires **HR**, **ADMIN** or **MANAGER**.

    Employees created by a manager always report to that manager.
    """
    employee = await EmployeeService.create_employee(db, caller, body)
    return {
        "data": EmployeeResponse.from_employee(employee).model_dump(mode="json"),
        "message": "Employee created successfully.",
    }


# ── PUT /employees/{id} ─────────────────────────────────────────────

@employees_router.put("/{employee_id}")
async def update_employee(
    employee_id: uuid.UUID,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(_can_manage_employees),
):
    employee = await EmployeeService.update_employee(db, caller, employee_id, body)
    return {
        "data": EmployeeResponse.from_employee(employee).model_dump(mode="json"),
        "message": "Employee updated successfully.",
    }


# ── DELETE /employees/{id} ──────────────────────────────────────────

@employees_router.delete("/{employee_id}", status_code=204)
async def delete_employee(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(_can_delete_employees),
):
    if not await EmployeeService.delete_employee(db, employee_id):
        raise NotFoundException("Employee", employee_id)
    return Response(status_code=204)


# ═════════════════════════════════════════════════════════════════════
# Team Endpoints
# ═════════════════════════════════════════════════════════════════════


# ── GET /teams ──────────────────────────────────────────────────────

@teams_router.get("")
async def list_teams(
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(require_permission("team:read")),
):
    teams = await TeamService.list_teams(db)
    return {
        "data": [TeamResponse.from_team(team).model_dump(mode="json") for team in teams],
        "message": f"Found {len(teams)} team(s).",
    }


# ── POST /teams ─────────────────────────────────────────────────────

@teams_router.post("", status_code=201)
async def create_team(
    body: TeamCreate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(_can_manage_teams),
):
    team = await TeamService.create_team(db, body)
    return {
        "data": TeamResponse.from_team(team).model_dump(mode="json"),
        "message": "Team created successfully.",
    }


# ── GET /teams/my-team/members ──────────────────────────────────────

@teams_router.get("/my-team/members")
async def get_my_team_members(
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    members = await TeamService.get_my_team_members(db, employee_id)
    return {
        "data": _employee_list(members),
        "message": f"Found {len(members)} team member(s).",
    }


# ── GET /teams/my-team ──────────────────────────────────────────────

@teams_router.get("/my-team")
async def get_my_team(
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    team = await TeamService.get_my_team(db, employee_id)
    if team is None:
        raise NotFoundException("Team", employee_id, detail="You are not a member of any team.")
    return {
        "data": TeamResponse.from_team(team).model_dump(mode="json"),
        "message": "Team retrieved successfully.",
    }


# ── PUT /teams/{id} ─────────────────────────────────────────────────

@teams_router.put("/{team_id}")
async def update_team(
    team_id: uuid.UUID,
    body: TeamUpdate,
    db: AsyncSession = Depends(get_db),
    caller: Caller = Depends(_can_manage_teams),
):
    team = await TeamService.update_team(db, team_id, body)
    return {
        "data": TeamResponse.from_team(team).model_dump(mode="json"),
        "message": "Team updated successfully.",
    }
