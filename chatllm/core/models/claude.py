"""Anthropic Claude adapter."""

from __future__ import annotations

from chatllm.config import ClaudeConfig
from chatllm.core.models.base import ModelAdapter


class ClaudeAdapter(ModelAdapter):
    """Claude through Anthropic's OpenAI-compatible endpoint."""

    name = "claude"
    title = "Claude"
    config: ClaudeConfig
