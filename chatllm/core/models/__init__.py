"""Model adapters for OpenAI-compatible backends."""

from chatllm.core.models.base import ModelAdapter
from chatllm.core.models.chatgpt import ChatGPTAdapter
from chatllm.core.models.claude import ClaudeAdapter
from chatllm.core.models.kimi import KimiAdapter
from chatllm.core.models.registry import ModelRegistry

__all__ = ["ModelAdapter", "ChatGPTAdapter", "KimiAdapter", "ClaudeAdapter", "ModelRegistry"]
