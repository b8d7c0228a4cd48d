"""Shared infrastructure tests — sanitizer, problem+json errors, health."""

from __future__ import annotations

import uuid

import pytest

from hr_backend.common.constants import UserRole, has_permission
from hr_backend.common.exceptions import (
    AlreadyProcessedException,
    DuplicateEmailException,
    InvalidRangeException,
    NotFoundException,
    SelfReferenceException,
)
from hr_backend.common.sanitizer import sanitize
from tests.conftest import _auth_headers


class TestSanitize:

    @pytest.mark.parametrize(
        "raw, cleaned",
        [
            ("<script>alert(1)</script>hello", "hello"),
            ("<p>Hello World</p>", "Hello World"),
            ("Hello & goodbye", "Hello &amp; goodbye"),
            ("plain text", "plain text"),
        ],
    )
    def test_markup_is_removed(self, raw, cleaned):
        assert sanitize(raw) == cleaned

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_values_pass_through(self, value):
        assert sanitize(value) == value


class TestExceptions:

    def test_status_codes(self):
        assert NotFoundException("Employee", uuid.uuid4()).status_code == 404
        assert DuplicateEmailException("a@b.io").status_code == 409
        assert AlreadyProcessedException("APPROVED").status_code == 409
        assert InvalidRangeException().status_code == 400
        assert SelfReferenceException().status_code == 400

    def test_duplicate_email_message(self):
        exc = DuplicateEmailException("a@b.io")
        assert exc.detail == "Email already exists: a@b.io"
        assert exc.errors == {"email": ["'a@b.io' is already in use."]}

    def test_not_found_custom_detail(self):
        exc = NotFoundException("Team", "x", detail="You are not a member of any team.")
        assert exc.detail == "You are not a member of any team."
        assert exc.title == "Team Not Found"

    async def test_problem_json_shape(self, client, hr_headers):
        missing = uuid.uuid4()
        resp = await client.get(f"/api/employees/{missing}", headers=hr_headers)

        assert resp.status_code == 404
        assert resp.headers["content-type"].startswith("application/problem+json")
        body = resp.json()
        assert body["status"] == 404
        assert body["type"].endswith("/not-found")
        assert body["instance"] == f"/api/employees/{missing}"
        assert str(missing) in body["detail"]

    async def test_malformed_path_id_is_400(self, client, hr_headers):
        resp = await client.get("/api/employees/not-a-uuid", headers=hr_headers)
        assert resp.status_code == 400


class TestPermissions:

    @pytest.mark.parametrize(
        "role, capability, expected",
        [
            (UserRole.employee, "employee:read_own", True),
            (UserRole.employee, "employee:delete", False),
            (UserRole.manager, "employee:delete", True),
            (UserRole.manager, "employee:update_all", False),
            (UserRole.hr, "employee:update_all", True),
            (UserRole.admin, "team:manage", True),
        ],
    )
    def test_role_capabilities(self, role, capability, expected):
        assert has_permission(role, capability) is expected

    def test_any_of_semantics(self):
        assert has_permission(UserRole.manager, "employee:create", "employee:create_report")


class TestHealth:

    async def test_health_needs_no_auth(self, client):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    async def test_unknown_token_user_is_rejected(self, client):
        resp = await client.get("/api/teams", headers=_auth_headers("nobody"))
        assert resp.status_code == 401
