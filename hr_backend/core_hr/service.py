"""Core HR service layer — role-scoped employee access and team management.

Every ``EmployeeService`` call takes the ``Caller`` explicitly; visibility
and mutation rights are derived from the caller's capabilities (see
``hr_backend.common.constants.PERMISSIONS``) plus the manager relationship
stored on each employee.

Uses:
  - ``NotFoundException / DuplicateEmailException / AuthorizationDeniedException``
    from hr_backend.common.exceptions
"""

from __future__ import annotations

import logging
import uuid
from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_backend.auth.models import User
from hr_backend.auth.schemas import Caller
from hr_backend.common.constants import MANAGER_POSITION_KEYWORDS
from hr_backend.common.exceptions import (
    AuthorizationDeniedException,
    DuplicateEmailException,
    NotFoundException,
    ValidationException,
)
from hr_backend.core_hr.models import Employee, Team
from hr_backend.core_hr.schemas import (
    EmployeeCreate,
    EmployeeUpdate,
    OwnProfileUpdate,
    TeamCreate,
    TeamUpdate,
)

logger = logging.getLogger(__name__)

# Relationships read by EmployeeResponse / TeamResponse; async sessions
# cannot lazy-load, so every query that feeds a view loads them up front.
EMPLOYEE_VIEW_OPTIONS = (
    selectinload(Employee.manager),
    selectinload(Employee.teams),
)

TEAM_VIEW_OPTIONS = (
    selectinload(Team.members).selectinload(Employee.manager),
    selectinload(Team.members).selectinload(Employee.teams),
    selectinload(Team.manager).selectinload(Employee.manager),
    selectinload(Team.manager).selectinload(Employee.teams),
)


# ── Shared lookups ──────────────────────────────────────────────────

async def load_employee(db: AsyncSession, employee_id: uuid.UUID) -> Optional[Employee]:
    """Fetch one employee with everything its view needs, or ``None``."""
    result = await db.execute(
        select(Employee)
        .where(Employee.id == employee_id)
        .options(*EMPLOYEE_VIEW_OPTIONS),
    )
    return result.scalars().first()


async def _resolve_teams(db: AsyncSession, team_ids: Sequence[uuid.UUID]) -> list[Team]:
    """Teams for the ids that exist; unknown ids are skipped."""
    if not team_ids:
        return []
    result = await db.execute(select(Team).where(Team.id.in_(set(team_ids))))
    return list(result.scalars().all())


async def _email_taken(
    db: AsyncSession,
    email: str,
    *,
    exclude_id: Optional[uuid.UUID] = None,
) -> bool:
    stmt = select(Employee.id).where(Employee.email == email)
    if exclude_id is not None:
        stmt = stmt.where(Employee.id != exclude_id)
    result = await db.execute(stmt.limit(1))
    return result.first() is not None


async def _flush_email_change(db: AsyncSession, email: str) -> None:
    """Flush an employee write; a unique-email race surfaces as DuplicateEmail."""
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmailException(email)


async def _ensure_no_cycle(
    db: AsyncSession,
    employee_id: uuid.UUID,
    manager_id: uuid.UUID,
) -> None:
    """Reject a manager assignment that would make the chain loop back to the employee."""
    current: Optional[uuid.UUID] = manager_id
    seen: set[uuid.UUID] = set()
    while current is not None and current not in seen:
        if current == employee_id:
            raise ValidationException(
                {"manager_id": ["Manager assignment would create a reporting cycle."]},
                detail="Manager assignment would create a reporting cycle.",
            )
        seen.add(current)
        result = await db.execute(select(Employee.manager_id).where(Employee.id == current))
        current = result.scalar_one_or_none()


# ═════════════════════════════════════════════════════════════════════
# EmployeeService
# ═════════════════════════════════════════════════════════════════════


class EmployeeService:
    """Role-scoped reads and writes over employee records."""

    # ── List ────────────────────────────────────────────────────────

    @staticmethod
    async def list_employees(db: AsyncSession, caller: Caller) -> list[Employee]:
        """HR/ADMIN see everyone, managers their direct reports, others nothing."""
        stmt = select(Employee).options(*EMPLOYEE_VIEW_OPTIONS)

        if caller.can("employee:read_all"):
            pass
        elif caller.can("employee:read_reports") and caller.employee_id is not None:
            stmt = stmt.where(Employee.manager_id == caller.employee_id)
        else:
            return []

        result = await db.execute(stmt.order_by(Employee.last_name, Employee.first_name))
        return list(result.scalars().all())

    @staticmethod
    async def list_managers(db: AsyncSession, caller: Caller) -> list[Employee]:
        """Visible employees whose position reads like a manager or a lead."""
        employees = await EmployeeService.list_employees(db, caller)
        return [
            emp for emp in employees
            if emp.position
            and any(word in emp.position.lower() for word in MANAGER_POSITION_KEYWORDS)
        ]

    # ── Get ─────────────────────────────────────────────────────────

    @staticmethod
    async def get_employee(
        db: AsyncSession,
        caller: Caller,
        employee_id: uuid.UUID,
    ) -> Employee:
        """Return the employee if the caller may see it.

        Records outside the caller's scope raise the same ``NotFoundException``
        as ids that do not exist.
        """
        employee = await load_employee(db, employee_id)
        if employee is None:
            raise NotFoundException("Employee", employee_id)

        if caller.can("employee:read_all"):
            return employee

        is_own = caller.employee_id is not None and employee.id == caller.employee_id
        if is_own and caller.can("employee:read_own"):
            return employee

        is_report = (
            caller.employee_id is not None
            and employee.manager_id == caller.employee_id
        )
        if is_report and caller.can("employee:read_reports"):
            return employee

        raise NotFoundException("Employee", employee_id)

    @staticmethod
    async def get_own_profile(db: AsyncSession, caller: Caller) -> Employee:
        employee = None
        if caller.employee_id is not None:
            employee = await load_employee(db, caller.employee_id)
        if employee is None:
            raise NotFoundException("Employee profile", caller.username)
        return employee

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_employee(
        db: AsyncSession,
        caller: Caller,
        data: EmployeeCreate,
    ) -> Employee:
        """Create an employee.

        A manager always becomes the new employee's manager; HR and admins
        may name any existing manager. Unknown team ids are ignored.
        """
        if not caller.can("employee:create", "employee:create_report"):
            raise AuthorizationDeniedException("You do not have permission to create employee records.")

        if await _email_taken(db, data.email):
            raise DuplicateEmailException(data.email)

        manager: Optional[Employee] = None
        if not caller.can("employee:create"):
            if caller.employee_id is not None:
                manager = await db.get(Employee, caller.employee_id)
        elif data.manager_id is not None:
            manager = await db.get(Employee, data.manager_id)

        employee = Employee(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            position=data.position,
            department=data.department,
            hire_date=data.hire_date,
            salary=data.salary,
            manager=manager,
            teams=await _resolve_teams(db, data.team_ids or []),
        )
        db.add(employee)
        await _flush_email_change(db, data.email)

        logger.info("Employee %s (%s) created by %s", employee.id, employee.email, caller.username)
        return employee

    # ── Update ──────────────────────────────────────────────────────

    @staticmethod
    async def update_employee(
        db: AsyncSession,
        caller: Caller,
        employee_id: uuid.UUID,
        data: EmployeeUpdate,
    ) -> Employee:
        """Update an employee record.

        Access rules:
        - **HR / ADMIN**: any employee
        - **MANAGER**: direct reports only, never their own record
        - anyone else: denied
        """
        full_access = caller.can("employee:update_all")
        if not full_access and (
            not caller.can("employee:update_reports") or caller.employee_id is None
        ):
            raise AuthorizationDeniedException("You do not have permission to update employee records.")

        employee = await load_employee(db, employee_id)
        if employee is None:
            raise NotFoundException("Employee", employee_id)

        if not full_access:
            if employee.id == caller.employee_id:
                raise AuthorizationDeniedException("Managers cannot edit their own data.")
            if employee.manager_id != caller.employee_id:
                raise AuthorizationDeniedException("You can only edit your direct reports.")

        if data.email != employee.email and await _email_taken(db, data.email, exclude_id=employee.id):
            raise DuplicateEmailException(data.email)

        employee.first_name = data.first_name
        employee.last_name = data.last_name
        employee.email = data.email

        for field in ("position", "department", "hire_date", "salary"):
            value = getattr(data, field)
            if value is not None:
                setattr(employee, field, value)

        if data.manager_id is not None:
            manager = await load_employee(db, data.manager_id)
            if manager is not None:
                await _ensure_no_cycle(db, employee.id, manager.id)
                employee.manager = manager

        if data.team_ids is not None:
            employee.teams = await _resolve_teams(db, data.team_ids)

        await _flush_email_change(db, data.email)
        logger.info("Employee %s updated by %s", employee.id, caller.username)
        return employee

    @staticmethod
    async def update_own_profile(
        db: AsyncSession,
        caller: Caller,
        data: OwnProfileUpdate,
    ) -> Employee:
        """Apply self-service edits; manager and salary stay untouched."""
        employee = await EmployeeService.get_own_profile(db, caller)

        if data.email != employee.email and await _email_taken(db, data.email, exclude_id=employee.id):
            raise DuplicateEmailException(data.email)

        employee.first_name = data.first_name
        employee.last_name = data.last_name
        employee.email = data.email
        if data.position is not None:
            employee.position = data.position
        if data.department is not None:
            employee.department = data.department

        if data.team_ids is not None:
            employee.teams = await _resolve_teams(db, data.team_ids)

        await _flush_email_change(db, data.email)
        return employee

    # ── Delete ──────────────────────────────────────────────────────

    @staticmethod
    async def delete_employee(db: AsyncSession, employee_id: uuid.UUID) -> bool:
        """Delete the employee, its team memberships and its login account.

        Returns ``False`` when there was nothing to delete.
        """
        employee = await load_employee(db, employee_id)
        if employee is None:
            return False

        employee.teams = []
        await db.execute(delete(User).where(User.employee_id == employee.id))
        await db.delete(employee)
        await db.flush()

        logger.info("Employee %s deleted", employee_id)
        return True


# ═════════════════════════════════════════════════════════════════════
# TeamService
# ═════════════════════════════════════════════════════════════════════


class TeamService:
    """Team CRUD and "my team" lookups."""

    @staticmethod
    async def _load_team(db: AsyncSession, team_id: uuid.UUID) -> Optional[Team]:
        result = await db.execute(
            select(Team).where(Team.id == team_id).options(*TEAM_VIEW_OPTIONS),
        )
        return result.scalars().first()

    @staticmethod
    async def _resolve_members(
        db: AsyncSession,
        employee_ids: Optional[Sequence[uuid.UUID]],
    ) -> list[Employee]:
        """Every id must exist; the first unknown id fails the whole request."""
        members: list[Employee] = []
        for employee_id in dict.fromkeys(employee_ids or []):
            employee = await db.get(Employee, employee_id)
            if employee is None:
                raise NotFoundException("Employee", employee_id)
            members.append(employee)
        return members

    @staticmethod
    async def _resolve_manager(
        db: AsyncSession,
        manager_id: Optional[uuid.UUID],
    ) -> Optional[Employee]:
        if manager_id is None:
            return None
        manager = await db.get(Employee, manager_id)
        if manager is None:
            raise NotFoundException("Manager", manager_id)
        return manager

    # ── List / Create / Update ──────────────────────────────────────

    @staticmethod
    async def list_teams(db: AsyncSession) -> list[Team]:
        result = await db.execute(
            select(Team).options(selectinload(Team.members)).order_by(Team.name),
        )
        return list(result.scalars().all())

    @staticmethod
    async def create_team(db: AsyncSession, data: TeamCreate) -> Team:
        team = Team(
            name=data.name,
            manager=await TeamService._resolve_manager(db, data.manager_id),
            members=await TeamService._resolve_members(db, data.employee_ids),
        )
        db.add(team)
        await db.flush()
        logger.info("Team %s (%r) created", team.id, team.name)
        return team

    @staticmethod
    async def update_team(db: AsyncSession, team_id: uuid.UUID, data: TeamUpdate) -> Team:
        """Overwrite name, manager and members; omitted manager / members are cleared."""
        team = await TeamService._load_team(db, team_id)
        if team is None:
            raise NotFoundException("Team", team_id)

        team.name = data.name
        team.manager = await TeamService._resolve_manager(db, data.manager_id)
        team.members = await TeamService._resolve_members(db, data.employee_ids)

        await db.flush()
        logger.info("Team %s updated", team.id)
        return team

    # ── My team ─────────────────────────────────────────────────────

    @staticmethod
    async def get_my_team_members(
        db: AsyncSession,
        employee_id: uuid.UUID,
    ) -> list[Employee]:
        """Members and managers of every team the employee is in, minus the employee."""
        result = await db.execute(
            select(Team)
            .where(Team.members.any(Employee.id == employee_id))
            .options(*TEAM_VIEW_OPTIONS),
        )

        colleagues: dict[uuid.UUID, Employee] = {}
        for team in result.scalars().all():
            candidates = list(team.members)
            if team.manager is not None:
                candidates.append(team.manager)
            for person in candidates:
                if person.id != employee_id:
                    colleagues.setdefault(person.id, person)
        return list(colleagues.values())

    @staticmethod
    async def get_my_team(db: AsyncSession, employee_id: uuid.UUID) -> Optional[Team]:
        if await db.get(Employee, employee_id) is None:
            raise NotFoundException("Employee", employee_id)

        result = await db.execute(
            select(Team)
            .where(Team.members.any(Employee.id == employee_id))
            .options(selectinload(Team.members))
            .limit(1),
        )
        return result.scalars().first()
