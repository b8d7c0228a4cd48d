"""Markup stripping for free-text fields stored from user input."""

from __future__ import annotations

from typing import Optional

import nh3


def sanitize(text: Optional[str]) -> Optional[str]:
    """Strip every HTML tag from ``text``, keeping its readable content.

    ``<script>`` / ``<style>`` bodies are dropped entirely and the remaining
    ``&``, ``<`` and ``>`` characters come back entity-escaped. ``None`` and
    blank strings are returned as-is.
    """
    if text is None or not text.strip():
        return text
    return nh3.clean(text, tags=set())
