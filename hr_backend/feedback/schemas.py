"""Feedback Pydantic schemas."""


import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from hr_backend.common.constants import FEEDBACK_MAX_LENGTH, FEEDBACK_MIN_LENGTH
from hr_backend.core_hr.schemas import EmployeeResponse


# ── Requests ────────────────────────────────────────────────────────

class FeedbackCreate(BaseModel):
    to_employee_id: uuid.UUID
    feedback_text: str = Field(
        ..., min_length=FEEDBACK_MIN_LENGTH, max_length=FEEDBACK_MAX_LENGTH,
    )


# ── Responses ───────────────────────────────────────────────────────

class FeedbackResponse(BaseModel):
    id: uuid.UUID
    from_employee: EmployeeResponse
    to_employee: EmployeeResponse
    feedback_text: str
    timestamp: datetime

    @classmethod
    def from_feedback(cls, feedback) -> "FeedbackResponse":
        return cls(
            id=feedback.id,
            from_employee=EmployeeResponse.from_employee(feedback.from_employee),
            to_employee=EmployeeResponse.from_employee(feedback.to_employee),
            feedback_text=feedback.feedback_text,
            timestamp=feedback.timestamp,
        )


class SuggestionResponse(BaseModel):
    suggestion: str
