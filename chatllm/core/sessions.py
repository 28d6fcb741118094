"""Conversation session router.

Maps a chat-platform session (platform, channel, user) to the id of the
conversation it is currently talking in, plus a snapshot of the last
exchange so another model can pick the conversation up with --continue.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable
from uuid import uuid4

import structlog

from chatllm.core.types import LastChat

logger = structlog.get_logger()


class Interaction(str, Enum):
    """How conversations are shared between users."""

    USER = "user"  # One conversation per user, across channels
    CHANNEL = "channel"  # Everyone in a channel shares one conversation
    BOTH = "both"  # One conversation per user within each channel


@dataclass
class PlatformSession:
    """What the chat platform tells us about an incoming message."""

    platform: str
    channel_id: str
    user_id: str
    attachments: list[str] = field(default_factory=list)  # Image URLs

    @property
    def uid(self) -> str:
        return f"{self.platform}:{self.user_id}"

    @property
    def cid(self) -> str:
        return f"{self.platform}:{self.channel_id}"


@dataclass
class ConversationBinding:
    """The live conversation for one session key."""

    conversation_id: str
    last_chat: LastChat | None = None


class ConversationRouter:
    """Resolves session keys to conversation ids.

    Every key is guarded by its own lock so a reset cannot race a new
    message for the same key.
    """

    def __init__(
        self,
        interaction: Interaction | str = Interaction.CHANNEL,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self.interaction = Interaction(interaction)
        self._new_id = id_factory
        self._bindings: dict[str, ConversationBinding] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def session_key(self, session: PlatformSession) -> str:
        """Derive the session key according to the interaction scope."""
        if self.interaction == Interaction.USER:
            return session.uid
        if self.interaction == Interaction.CHANNEL:
            return session.cid
        return f"{session.platform}:{session.channel_id}:{session.user_id}"

    def _lock(self, key: str) -> asyncio.Lock:
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    def get(self, key: str) -> ConversationBinding | None:
        return self._bindings.get(key)

    async def resolve(self, key: str) -> ConversationBinding:
        """Return the key's binding, starting a new conversation if needed."""
        async with self._lock(key):
            binding = self._bindings.get(key)
            if binding is None:
                binding = ConversationBinding(conversation_id=self._new_id())
                self._bindings[key] = binding
                logger.info(
                    "conversation_started",
                    session_key=key,
                    conversation_id=binding.conversation_id,
                )
            return binding

    async def reset(self, key: str) -> ConversationBinding | None:
        """Drop the key's binding. Returns the binding that was live, if any."""
        async with self._lock(key):
            binding = self._bindings.pop(key, None)
            if binding is not None:
                logger.info(
                    "conversation_reset",
                    session_key=key,
                    conversation_id=binding.conversation_id,
                )
            return binding

    async def record(self, key: str, conversation_id: str, last_chat: LastChat) -> bool:
        """Store the last-chat snapshot if ``conversation_id`` is still live.

        A reply that finishes after the key was reset must not resurrect
        or overwrite the new conversation. Returns True if recorded.
        """
        async with self._lock(key):
            binding = self._bindings.get(key)
            if binding is None or binding.conversation_id != conversation_id:
                logger.debug("last_chat_stale", session_key=key)
                return False
            binding.last_chat = last_chat
            return True

    @property
    def binding_count(self) -> int:
        """Number of live conversations."""
        return len(self._bindings)
