"""AI feedback suggestions via the Hugging Face chat-completions router.

``FeedbackSuggestionService.suggest`` never raises: a missing API key,
transport failures, error statuses and unusable payloads each map to a
fixed, human-readable fallback string.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from hr_backend.config import settings

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT = "their general performance"
MAX_WORDS = 100

NOT_CONFIGURED = "AI feedback assistant not configured."
UNAVAILABLE = "Unable to generate feedback suggestion at this time."
UNEXPECTED_ERROR = "An unexpected error occurred."
NO_SUGGESTION = "No suggestion available"


def build_prompt(employee_name: str, context: Optional[str] = None) -> str:
    about = context if context and context.strip() else DEFAULT_CONTEXT
    return (
        f"Generate brief, professional feedback for employee {employee_name} "
        f"about {about}. Be constructive and positive. "
        f"Keep it under {MAX_WORDS} words."
    )


def _extract_content(payload: Any) -> Optional[str]:
    """First choice's message content, or ``None`` when the payload has none."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content.strip():
        return None
    return content.strip()


class FeedbackSuggestionService:
    """Thin async client for one chat-completions round trip."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = settings.HUGGINGFACE_BASE_URL,
        model: str = settings.HUGGINGFACE_MODEL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    async def suggest(self, employee_name: str, context: Optional[str] = None) -> str:
        if not self.configured:
            return NOT_CONFIGURED

        body = {
            "messages": [{"role": "user", "content": build_prompt(employee_name, context)}],
            "model": self.model,
            "stream": False,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                resp = await client.post(self.base_url, json=body, headers=headers)
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPError as exc:
            logger.warning("Feedback suggestion request failed: %s", exc)
            return UNAVAILABLE
        except Exception:
            logger.exception("Unexpected error while requesting a feedback suggestion")
            return UNEXPECTED_ERROR

        content = _extract_content(payload)
        if content is None:
            logger.warning("Feedback suggestion response carried no content")
            return NO_SUGGESTION
        return content


def get_suggestion_service() -> FeedbackSuggestionService:
    """FastAPI dependency: a gateway built from current settings."""
    return FeedbackSuggestionService(settings.HUGGINGFACE_API_KEY)
