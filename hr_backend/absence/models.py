"""Absence ORM model — time-off requests and their manager decision."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_backend.common.constants import ABSENCE_REASON_MAX_LENGTH, AbsenceStatus, AbsenceType
from hr_backend.core_hr.models import Employee
from hr_backend.database import Base


class AbsenceRequest(Base):
    """One employee's request for time off."""

    __tablename__ = "absence_requests"
    __table_args__ = (
        sa.CheckConstraint("end_date >= start_date", name="ck_absence_date_range"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    type: Mapped[AbsenceType] = mapped_column(
        sa.Enum(AbsenceType, name="absence_type"), nullable=False,
    )
    reason: Mapped[Optional[str]] = mapped_column(sa.String(ABSENCE_REASON_MAX_LENGTH))
    status: Mapped[AbsenceStatus] = mapped_column(
        sa.Enum(AbsenceStatus, name="absence_status"),
        nullable=False,
        default=AbsenceStatus.pending,
    )
    approved_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("employees.id", ondelete="SET NULL"),
    )
    requested_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False,
    )
    responded_at: Mapped[Optional[datetime]] = mapped_column(sa.DateTime(timezone=True))
    manager_comment: Mapped[Optional[str]] = mapped_column(sa.Text)

    # ── Relationships ───────────────────────────────────────────────
    employee: Mapped[Employee] = relationship(foreign_keys=[employee_id])
    approved_by: Mapped[Optional[Employee]] = relationship(foreign_keys=[approved_by_id])

    def __repr__(self) -> str:
        return f"<AbsenceRequest {self.employee_id} {self.start_date}..{self.end_date} {self.status.value}>"
