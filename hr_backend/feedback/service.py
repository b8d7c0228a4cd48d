"""Feedback service — create and list peer feedback."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hr_backend.common.exceptions import NotFoundException, SelfReferenceException
from hr_backend.core_hr.models import Employee
from hr_backend.core_hr.service import load_employee
from hr_backend.feedback.models import Feedback
from hr_backend.feedback.schemas import FeedbackCreate

logger = logging.getLogger(__name__)

FEEDBACK_VIEW_OPTIONS = (
    selectinload(Feedback.from_employee).selectinload(Employee.manager),
    selectinload(Feedback.from_employee).selectinload(Employee.teams),
    selectinload(Feedback.to_employee).selectinload(Employee.manager),
    selectinload(Feedback.to_employee).selectinload(Employee.teams),
)


class FeedbackService:

    @staticmethod
    async def create_feedback(
        db: AsyncSession,
        from_employee_id: uuid.UUID,
        data: FeedbackCreate,
    ) -> Feedback:
        author = await load_employee(db, from_employee_id)
        if author is None:
            raise NotFoundException("From employee", from_employee_id)

        recipient = await load_employee(db, data.to_employee_id)
        if recipient is None:
            raise NotFoundException("To employee", data.to_employee_id)

        if author.id == recipient.id:
            raise SelfReferenceException()

        feedback = Feedback(
            from_employee=author,
            to_employee=recipient,
            feedback_text=data.feedback_text,
            timestamp=datetime.now(timezone.utc),
        )
        db.add(feedback)
        await db.flush()

        logger.info("Feedback %s given by %s to %s", feedback.id, author.id, recipient.id)
        return feedback

    @staticmethod
    async def list_received(db: AsyncSession, employee_id: uuid.UUID) -> list[Feedback]:
        result = await db.execute(
            select(Feedback)
            .where(Feedback.to_employee_id == employee_id)
            .options(*FEEDBACK_VIEW_OPTIONS),
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_given(db: AsyncSession, employee_id: uuid.UUID) -> list[Feedback]:
        result = await db.execute(
            select(Feedback)
            .where(Feedback.from_employee_id == employee_id)
            .options(*FEEDBACK_VIEW_OPTIONS),
        )
        return list(result.scalars().all())
