"""Chat service: runs one parsed chat command for a platform session.

Resolves the conversation, picks the model adapter, prepares media,
calls the model, records the continuation snapshot and renders the
reply. Errors from the model and media layers propagate to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import pangu
import structlog

from chatllm import locales
from chatllm.config import ChatLLMConfig
from chatllm.core.errors import EmptyInput
from chatllm.core.media import extract_files, extract_images, qq_stable_image_urls
from chatllm.core.models.base import ModelAdapter
from chatllm.core.models.registry import ModelRegistry
from chatllm.core.sessions import ConversationRouter, PlatformSession
from chatllm.core.types import ChatRequest, LastChat, Turn
from chatllm.render.template import CardTitle, Renderer

logger = structlog.get_logger()


@dataclass
class ChatCommand:
    """A parsed ``chat`` command: options plus free text."""

    text: str = ""
    reset: bool = False
    picture: bool = False
    continue_: bool = False  # Carry over the last chat from another model
    model: str | None = None
    version: bool = False


class ChatService:
    """Executes chat commands against the registered models."""

    def __init__(
        self,
        config: ChatLLMConfig,
        registry: ModelRegistry,
        router: ConversationRouter | None = None,
        renderer: Renderer | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self.registry = registry
        self.router = router or ConversationRouter(config.interaction)
        self.renderer = renderer or Renderer()
        self._http = http_client

    def text(self, key: str, **params: object) -> str:
        """Localized message in the configured locale."""
        return locales.text(key, self.config.locale, **params)

    async def handle(self, command: ChatCommand, session: PlatformSession) -> str:
        """Run ``command`` and return what should be sent back.

        Raises:
            UnknownModel: ``--model`` names no registered adapter.
            EmptyInput: Nothing to send; the caller should prompt for text.
            MediaFetchFailure: A QQ image could not be downloaded.
            BackendUnavailable: The model call failed.
        """
        key = self.router.session_key(session)

        if command.reset:
            await self.reset(key)
            return self.text("reset-success")

        adapter = self.registry.get(command.model)

        if command.version:
            return self.text("version", title=adapter.title, model=adapter.model)

        text = (command.text or "").strip()
        # Attachments the model cannot read do not count as input
        images: list[str] = []
        files: list[str] = []
        if adapter.config.parse_images:
            images = list(session.attachments) + extract_images(text)
        if adapter.config.parse_files:
            files = extract_files(text)
        if not text and not images and not files:
            raise EmptyInput()

        if (
            images
            and session.platform == "qq"
            and self.config.qq_image_proxy
        ):
            images = await qq_stable_image_urls(images, self._http)

        binding = await self.router.resolve(key)
        prior = self._prior_history(command, binding.last_chat, adapter)

        logger.info(
            "chat_request",
            session_key=key,
            model=adapter.name,
            conversation_id=binding.conversation_id,
            text_len=len(text),
            images=len(images),
            files=len(files),
            carried_turns=len(prior or []),
        )

        reply = await adapter.generate_response(
            ChatRequest(
                text=text,
                conversation_id=binding.conversation_id,
                images=images,
                files=files,
                prior_history=prior,
            )
        )

        snapshot = LastChat(
            model=adapter.name,
            turns=tuple(adapter.recent_turns(reply.conversation_id, self.config.continue_turns)),
        )
        if not await self.router.record(key, reply.conversation_id, snapshot):
            # Reset while the model was answering; nothing points at this id now
            adapter.pool.forget(reply.conversation_id)

        message = pangu.spacing_text(reply.text) if self.config.cjk_spacing else reply.text
        picture = adapter.config.picture if command.picture else None
        return await self.renderer.render(
            CardTitle(content=adapter.title, sub=adapter.model),
            message,
            picture,
        )

    async def reset(self, key: str) -> None:
        """Start over: unbind the session key and drop its history everywhere."""
        binding = await self.router.reset(key)
        if binding is not None:
            self.registry.forget(binding.conversation_id)

    @staticmethod
    def _prior_history(
        command: ChatCommand,
        last_chat: LastChat | None,
        adapter: ModelAdapter,
    ) -> list[Turn] | None:
        """Turns to carry over when continuing another model's conversation."""
        if not command.continue_ or last_chat is None:
            return None
        if last_chat.model == adapter.name:
            return None
        return list(last_chat.turns)
