"""Absence workflow — request creation, listings and manager responses.

Status machine::

    PENDING ──approve──▶ APPROVED
       │
       └────reject────▶ REJECTED

Both outcomes are terminal. Only the requester's direct manager may respond.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_backend.absence.models import AbsenceRequest
from hr_backend.absence.schemas import AbsenceRequestCreate, AbsenceRespond
from hr_backend.common.constants import ABSENCE_REASON_MAX_LENGTH, AbsenceStatus
from hr_backend.common.exceptions import (
    AlreadyProcessedException,
    AuthorizationDeniedException,
    InvalidRangeException,
    NotFoundException,
    ValidationException,
)
from hr_backend.common.sanitizer import sanitize
from hr_backend.core_hr.models import Employee
from hr_backend.core_hr.service import load_employee

logger = logging.getLogger(__name__)

REQUEST_VIEW_OPTIONS = (
    selectinload(AbsenceRequest.employee).selectinload(Employee.manager),
    selectinload(AbsenceRequest.employee).selectinload(Employee.teams),
    selectinload(AbsenceRequest.approved_by).selectinload(Employee.manager),
    selectinload(AbsenceRequest.approved_by).selectinload(Employee.teams),
)


class AbsenceService:
    """Async operations for absence requests."""

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_request(
        db: AsyncSession,
        employee_id: uuid.UUID,
        data: AbsenceRequestCreate,
    ) -> AbsenceRequest:
        requester = await load_employee(db, employee_id)
        if requester is None:
            raise NotFoundException("Employee", employee_id)

        if data.end_date < data.start_date:
            raise InvalidRangeException()

        # Escaping can lengthen the text past the column width.
        reason = sanitize(data.reason)
        if reason is not None and len(reason) > ABSENCE_REASON_MAX_LENGTH:
            raise ValidationException(
                {"reason": [f"Reason must be at most {ABSENCE_REASON_MAX_LENGTH} characters."]},
            )

        request = AbsenceRequest(
            employee=requester,
            start_date=data.start_date,
            end_date=data.end_date,
            type=data.type,
            reason=reason,
            status=AbsenceStatus.pending,
            approved_by=None,
            requested_at=datetime.now(timezone.utc),
        )
        db.add(request)
        await db.flush()

        logger.info(
            "Absence request %s (%s %s..%s) created by employee %s",
            request.id, data.type.value, data.start_date, data.end_date, employee_id,
        )
        return request

    # ── Listings ────────────────────────────────────────────────────

    @staticmethod
    async def list_my_requests(
        db: AsyncSession,
        employee_id: uuid.UUID,
    ) -> list[AbsenceRequest]:
        """Requests filed by the employee, most recent first."""
        result = await db.execute(
            select(AbsenceRequest)
            .where(AbsenceRequest.employee_id == employee_id)
            .options(*REQUEST_VIEW_OPTIONS)
            .order_by(AbsenceRequest.requested_at.desc()),
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_team_requests(
        db: AsyncSession,
        manager_id: uuid.UUID,
        *,
        pending_only: bool = False,
    ) -> list[AbsenceRequest]:
        """Requests filed by the manager's direct reports, most recent first."""
        stmt = (
            select(AbsenceRequest)
            .join(AbsenceRequest.employee)
            .where(Employee.manager_id == manager_id)
            .options(*REQUEST_VIEW_OPTIONS)
            .order_by(AbsenceRequest.requested_at.desc())
        )
        if pending_only:
            stmt = stmt.where(AbsenceRequest.status == AbsenceStatus.pending)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    # ── Respond ─────────────────────────────────────────────────────

    @staticmethod
    async def respond(
        db: AsyncSession,
        request_id: uuid.UUID,
        responder_id: uuid.UUID,
        data: AbsenceRespond,
    ) -> AbsenceRequest:
        """Approve or reject a pending request as the requester's manager."""
        result = await db.execute(
            select(AbsenceRequest)
            .where(AbsenceRequest.id == request_id)
            .options(*REQUEST_VIEW_OPTIONS),
        )
        request = result.scalars().first()
        if request is None:
            raise NotFoundException("Absence request", request_id)

        responder = await load_employee(db, responder_id)
        if responder is None:
            raise NotFoundException("Manager", responder_id)

        requester_manager_id = request.employee.manager_id
        if requester_manager_id is None or requester_manager_id != responder.id:
            raise AuthorizationDeniedException("You are not authorized to respond to this request.")

        if request.status != AbsenceStatus.pending:
            raise AlreadyProcessedException(request.status.value)

        request.status = data.status
        request.approved_by = responder
        request.responded_at = datetime.now(timezone.utc)
        request.manager_comment = data.manager_comment
        await db.flush()

        logger.info(
            "Absence request %s %s by %s", request.id, data.status.value, responder.id,
        )
        return request
