"""AI feedback suggestion gateway tests.

The upstream chat-completions API is replaced with ``httpx.MockTransport``;
no network traffic leaves the test process.
"""

from __future__ import annotations

import json

import httpx
import pytest

from hr_backend.common.constants import UserRole
from hr_backend.feedback.suggestions import (
    DEFAULT_CONTEXT,
    NO_SUGGESTION,
    NOT_CONFIGURED,
    UNAVAILABLE,
    UNEXPECTED_ERROR,
    FeedbackSuggestionService,
    build_prompt,
    get_suggestion_service,
)
from tests.conftest import _login_as, _seed_employee

BASE_URL = "https://llm.test/v1/chat/completions"


def _service(handler, api_key: str = "hf_test_key") -> FeedbackSuggestionService:
    return FeedbackSuggestionService(
        api_key,
        base_url=BASE_URL,
        model="test-model",
        transport=httpx.MockTransport(handler),
    )


def _completion(content) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


# ═════════════════════════════════════════════════════════════════════
# 1. Prompt
# ═════════════════════════════════════════════════════════════════════


class TestPrompt:

    def test_prompt_names_employee_and_context(self):
        prompt = build_prompt("Jane Doe", "teamwork")
        assert "Jane Doe" in prompt
        assert "about teamwork" in prompt
        assert "under 100 words" in prompt

    @pytest.mark.parametrize("context", [None, "", "   "])
    def test_blank_context_falls_back(self, context):
        assert f"about {DEFAULT_CONTEXT}" in build_prompt("Jane", context)


# ═════════════════════════════════════════════════════════════════════
# 2. Gateway outcomes
# ═════════════════════════════════════════════════════════════════════


class TestSuggest:

    async def test_success_returns_trimmed_content(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_completion("  Jane is a reliable teammate.  \n"))

        result = await _service(handler).suggest("Jane", "reliability")

        assert result == "Jane is a reliable teammate."
        request = seen[0]
        assert str(request.url) == BASE_URL
        assert request.headers["Authorization"] == "Bearer hf_test_key"
        body = json.loads(request.content)
        assert body["model"] == "test-model"
        assert body["stream"] is False
        assert body["messages"][0]["role"] == "user"
        assert "Jane" in body["messages"][0]["content"]

    async def test_uses_client_default_timeout(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_completion("Fine."))

        await _service(handler).suggest("Jane")

        assert seen[0].extensions["timeout"] == httpx.Timeout(5.0).as_dict()

    async def test_missing_key_skips_the_call(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("upstream must not be called")

        assert await _service(handler, api_key="").suggest("Jane") == NOT_CONFIGURED
        assert await _service(handler, api_key="   ").suggest("Jane") == NOT_CONFIGURED

    async def test_error_status_is_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "boom"})

        assert await _service(handler).suggest("Jane") == UNAVAILABLE

    async def test_transport_failure_is_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        assert await _service(handler).suggest("Jane") == UNAVAILABLE

    async def test_malformed_json_is_unexpected(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>not json</html>")

        assert await _service(handler).suggest("Jane") == UNEXPECTED_ERROR

    @pytest.mark.parametrize(
        "payload",
        [
            {"choices": []},
            {"choices": [{"message": {"content": None}}]},
            {"choices": [{"message": {"content": "   "}}]},
            {"result": "unexpected shape"},
        ],
    )
    async def test_empty_payload_has_no_suggestion(self, payload):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=payload)

        assert await _service(handler).suggest("Jane") == NO_SUGGESTION


# ═════════════════════════════════════════════════════════════════════
# 3. HTTP API
# ═════════════════════════════════════════════════════════════════════


class TestSuggestAPI:

    async def test_suggest_endpoint_uses_gateway(self, app, client, db):
        emp = await _seed_employee(db)
        headers = await _login_as(db, "emp", UserRole.employee, employee=emp)
        await db.commit()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_completion("Keep it up!"))

        app.dependency_overrides[get_suggestion_service] = lambda: _service(handler)

        resp = await client.get(
            "/api/feedback/suggest",
            params={"employee_name": "Jane Doe", "context": "mentoring"},
            headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json()["data"] == {"suggestion": "Keep it up!"}

    async def test_suggest_endpoint_answers_200_on_failure(self, app, client, db):
        emp = await _seed_employee(db)
        headers = await _login_as(db, "emp", UserRole.employee, employee=emp)
        await db.commit()

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        app.dependency_overrides[get_suggestion_service] = lambda: _service(handler)

        resp = await client.get(
            "/api/feedback/suggest", params={"employee_name": "Jane"}, headers=headers,
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["suggestion"] == UNAVAILABLE

    async def test_employee_name_is_required(self, client, db):
        emp = await _seed_employee(db)
        headers = await _login_as(db, "emp", UserRole.employee, employee=emp)
        await db.commit()

        resp = await client.get("/api/feedback/suggest", headers=headers)
        assert resp.status_code == 400
