"""Feedback router — give, list and draft peer feedback."""


import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_backend.auth.dependencies import require_employee, require_permission
from hr_backend.database import get_db
from hr_backend.feedback.schemas import FeedbackCreate, FeedbackResponse, SuggestionResponse
from hr_backend.feedback.service import FeedbackService
from hr_backend.feedback.suggestions import FeedbackSuggestionService, get_suggestion_service

router = APIRouter(prefix="", tags=["feedback"])


def _feedback_list(items) -> list[dict]:
    return [FeedbackResponse.from_feedback(f).model_dump(mode="json") for f in items]


# ── POST / — Give feedback ──────────────────────────────────────────

@router.post(
    "",
    status_code=201,
    dependencies=[Depends(require_permission("feedback:give"))],
)
async def create_feedback(
    body: FeedbackCreate,
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    feedback = await FeedbackService.create_feedback(db, employee_id, body)
    return {
        "data": FeedbackResponse.from_feedback(feedback).model_dump(mode="json"),
        "message": "Feedback submitted.",
    }


# ── GET /received ───────────────────────────────────────────────────

@router.get("/received")
async def list_received(
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    items = await FeedbackService.list_received(db, employee_id)
    return {
        "data": _feedback_list(items),
        "message": f"Found {len(items)} feedback item(s).",
    }


# ── GET /given ──────────────────────────────────────────────────────

@router.get("/given")
async def list_given(
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    items = await FeedbackService.list_given(db, employee_id)
    return {
        "data": _feedback_list(items),
        "message": f"Found {len(items)} feedback item(s).",
    }


# ── GET /suggest ────────────────────────────────────────────────────

@router.get(
    "/suggest",
    dependencies=[Depends(require_permission("feedback:suggest"))],
)
async def suggest_feedback(
    employee_name: str = Query(..., min_length=1, max_length=200),
    context: Optional[str] = Query(None, max_length=500),
    gateway: FeedbackSuggestionService = Depends(get_suggestion_service),
):
    """Draft feedback text with the AI assistant. Always answers 200."""
    suggestion = await gateway.suggest(employee_name, context)
    return {
        "data": SuggestionResponse(suggestion=suggestion).model_dump(),
        "message": "Suggestion generated.",
    }
