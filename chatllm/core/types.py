"""Shared data types for chatllm."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Message role in conversation."""

    USER = "user"
    ASSISTANT = "assistant"


class PartType(str, Enum):
    """Kind of a multimodal content part."""

    TEXT = "text"
    IMAGE = "image_url"
    FILE = "file_url"


@dataclass(frozen=True)
class ContentPart:
    """One piece of multimodal content: text, an image or a file reference."""

    type: PartType
    value: str  # The text itself, or the referenced URL

    @classmethod
    def text(cls, value: str) -> ContentPart:
        return cls(PartType.TEXT, value)

    @classmethod
    def image(cls, url: str) -> ContentPart:
        return cls(PartType.IMAGE, url)

    @classmethod
    def file(cls, url: str) -> ContentPart:
        return cls(PartType.FILE, url)

    def to_litellm(self) -> dict[str, Any]:
        """Convert to an OpenAI-style content part."""
        if self.type == PartType.TEXT:
            return {"type": "text", "text": self.value}
        return {"type": self.type.value, self.type.value: {"url": self.value}}


@dataclass(frozen=True)
class Turn:
    """A single message in a conversation."""

    role: Role
    content: str | tuple[ContentPart, ...]

    @property
    def length(self) -> int:
        """Characters counted against the context budget.

        Only text counts; image and file parts contribute nothing.
        """
        if isinstance(self.content, str):
            return len(self.content)
        return sum(len(p.value) for p in self.content if p.type == PartType.TEXT)

    def to_litellm(self) -> dict[str, Any]:
        """Convert to LiteLLM-compatible message dict."""
        if isinstance(self.content, str):
            return {"role": self.role.value, "content": self.content}
        return {
            "role": self.role.value,
            "content": [p.to_litellm() for p in self.content],
        }


@dataclass
class ChatRequest:
    """A normalized request for one model call."""

    text: str
    conversation_id: str
    images: list[str] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    # Turns from another model's conversation, placed before the stored history
    prior_history: list[Turn] | None = None


@dataclass
class ChatReply:
    """Result of a successful model call."""

    conversation_id: str
    text: str
    model: str = ""


@dataclass(frozen=True)
class LastChat:
    """Snapshot of the most recent exchange, used by --continue."""

    model: str
    turns: tuple[Turn, ...] = ()
