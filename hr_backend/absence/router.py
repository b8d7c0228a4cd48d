"""Absence router — file, list and respond to absence requests.

Every route acts on the caller's own employee profile: requests are filed
as the caller, team listings cover the caller's direct reports, and
responses are made as the caller.
"""


import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hr_backend.absence.schemas import (
    AbsenceRequestCreate,
    AbsenceRequestResponse,
    AbsenceRespond,
)
from hr_backend.absence.service import AbsenceService
from hr_backend.auth.dependencies import require_employee, require_permission
from hr_backend.database import get_db

router = APIRouter(prefix="", tags=["absence"])


def _request_list(requests) -> list[dict]:
    return [AbsenceRequestResponse.from_request(r).model_dump(mode="json") for r in requests]


# ── POST / — File a request ─────────────────────────────────────────

@router.post(
    "",
    status_code=201,
    dependencies=[Depends(require_permission("absence:request"))],
)
async def create_request(
    body: AbsenceRequestCreate,
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    request = await AbsenceService.create_request(db, employee_id, body)
    return {
        "data": AbsenceRequestResponse.from_request(request).model_dump(mode="json"),
        "message": "Absence request submitted.",
    }


# ── GET /my-requests ────────────────────────────────────────────────

@router.get("/my-requests")
async def list_my_requests(
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    requests = await AbsenceService.list_my_requests(db, employee_id)
    return {
        "data": _request_list(requests),
        "message": f"Found {len(requests)} absence request(s).",
    }


# ── GET /team-requests ──────────────────────────────────────────────

@router.get("/team-requests")
async def list_team_requests(
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    requests = await AbsenceService.list_team_requests(db, employee_id)
    return {
        "data": _request_list(requests),
        "message": f"Found {len(requests)} team absence request(s).",
    }


# ── GET /team-requests/pending ──────────────────────────────────────

@router.get("/team-requests/pending")
async def list_pending_team_requests(
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    requests = await AbsenceService.list_team_requests(db, employee_id, pending_only=True)
    return {
        "data": _request_list(requests),
        "message": f"Found {len(requests)} pending team absence request(s).",
    }


# ── PUT /{id}/respond ───────────────────────────────────────────────

@router.put(
    "/{request_id}/respond",
    dependencies=[Depends(require_permission("absence:respond"))],
)
async def respond_to_request(
    request_id: uuid.UUID,
    body: AbsenceRespond,
    db: AsyncSession = Depends(get_db),
    employee_id: uuid.UUID = Depends(require_employee),
):
    """Approve or reject a direct report's pending request."""
    request = await AbsenceService.respond(db, request_id, employee_id, body)
    return {
        "data": AbsenceRequestResponse.from_request(request).model_dump(mode="json"),
        "message": f"Absence request {request.status.value.lower()}.",
    }
