"""OpenAI ChatGPT adapter."""

from __future__ import annotations

from chatllm.config import ChatGPTConfig
from chatllm.core.models.base import ModelAdapter


class ChatGPTAdapter(ModelAdapter):
    """ChatGPT through the OpenAI chat completions API."""

    name = "chatgpt"
    title = "ChatGPT"
    config: ChatGPTConfig
