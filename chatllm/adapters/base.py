"""Base adapter interface for chat platforms.

Platform adapters (console, QQ bots, ...) implement this interface. The
adapter turns raw platform messages into chat commands, runs them through
the ChatService, and converts errors into messages for the user.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace

import structlog

from chatllm.adapters.command import parse_command
from chatllm.config import ChatLLMConfig
from chatllm.core.chat import ChatCommand, ChatService
from chatllm.core.errors import ChatLLMError, EmptyInput, UnknownModel
from chatllm.core.sessions import PlatformSession

logger = structlog.get_logger()


class BaseAdapter(ABC):
    """Abstract base class for chat platform adapters.

    Subclasses must implement:
    - start(): Initialize and begin receiving messages
    - stop(): Gracefully shutdown the adapter

    and may override prompt() to ask the user for text when a command
    arrives without any.
    """

    name: str = "base"

    def __init__(self, service: ChatService, config: ChatLLMConfig) -> None:
        self.service = service
        self.config = config

    @abstractmethod
    async def start(self) -> None:
        """Start the adapter (connect, begin polling/listening)."""
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Gracefully stop the adapter."""
        ...

    async def prompt(self, session: PlatformSession, message: str) -> str | None:
        """Ask the user for input. Returns None if the platform cannot ask."""
        return None

    async def on_message(self, session: PlatformSession, content: str) -> str | None:
        """Handle a raw platform message.

        Returns the reply to send, or None if the message is not a chat
        command.
        """
        command = parse_command(content, self.config.trigger_word)
        if command is None:
            return None
        return await self.run_command(session, command)

    async def run_command(self, session: PlatformSession, command: ChatCommand) -> str:
        """Run a parsed command, prompting once for text if it had none."""
        try:
            try:
                return await self.service.handle(command, session)
            except EmptyInput:
                follow_up = await self.prompt(session, self.service.text("expect-prompt"))
                if not follow_up or not follow_up.strip():
                    return self.service.text("expect-prompt")
                return await self.service.handle(replace(command, text=follow_up), session)

        except UnknownModel as e:
            logger.info("unknown_model", adapter=self.name, model=e.name)
            return self.service.text(
                e.message_key, name=e.name, available=", ".join(e.available)
            )
        except ChatLLMError as e:
            logger.warning(
                "chat_failed",
                adapter=self.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            return self.service.text(e.message_key)
        except Exception as e:
            logger.error(
                "chat_unexpected_error",
                adapter=self.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            return self.service.text("unknown-error")
