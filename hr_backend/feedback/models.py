"""Feedback ORM model — directed peer feedback between employees."""

from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_backend.core_hr.models import Employee
from hr_backend.database import Base


class Feedback(Base):
    __tablename__ = "feedback"
    __table_args__ = (
        sa.CheckConstraint("from_employee_id <> to_employee_id", name="ck_feedback_not_self"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    from_employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    to_employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        sa.ForeignKey("employees.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    feedback_text: Mapped[str] = mapped_column(sa.String(1000), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(sa.DateTime(timezone=True), nullable=False)

    # ── Relationships ───────────────────────────────────────────────
    from_employee: Mapped[Employee] = relationship(foreign_keys=[from_employee_id])
    to_employee: Mapped[Employee] = relationship(foreign_keys=[to_employee_id])

    def __repr__(self) -> str:
        return f"<Feedback {self.from_employee_id} → {self.to_employee_id}>"
