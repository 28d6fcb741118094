"""Model adapter: one OpenAI-compatible backend plus its conversation history.

The adapter assembles the request from the stored history and the new
user turn, truncates it to the configured character budget, calls the
backend through LiteLLM, and persists the exchange only when the call
succeeds.
"""

from __future__ import annotations

import asyncio
from typing import Any, ClassVar

import litellm
import structlog

from chatllm.config import ModelConfig
from chatllm.core.errors import BackendUnavailable
from chatllm.core.history import HistoryPool
from chatllm.core.truncation import truncate_turns
from chatllm.core.types import ChatReply, ChatRequest, ContentPart, Role, Turn

logger = structlog.get_logger()

# Suppress LiteLLM's verbose logging
litellm.suppress_debug_info = True


class ModelAdapter:
    """Base adapter for an OpenAI-compatible chat completion backend.

    Subclasses set ``name`` (registry key) and ``title`` (display name) and
    may extend :meth:`_request_options` with backend-specific parameters.
    """

    name: ClassVar[str] = "base"
    title: ClassVar[str] = "LLM"
    provider: ClassVar[str] = "openai"  # LiteLLM provider prefix

    def __init__(
        self,
        config: ModelConfig,
        pool: HistoryPool | None = None,
        request_timeout: float | None = 60.0,
    ) -> None:
        self.config = config
        self.pool = pool if pool is not None else HistoryPool(config.forget_time)
        self.request_timeout = request_timeout

    @property
    def model(self) -> str:
        """Backend model name."""
        return self.config.model

    def build_user_turn(self, request: ChatRequest) -> Turn:
        """Encode the user's message, with images or files when enabled.

        Images win over files; the two are never mixed in one turn.
        """
        if request.images and self.config.parse_images:
            parts = [ContentPart.image(url) for url in request.images]
        elif request.files and self.config.parse_files:
            parts = [ContentPart.file(url) for url in request.files]
        else:
            return Turn(Role.USER, request.text)

        parts.append(ContentPart.text(request.text))
        return Turn(Role.USER, tuple(parts))

    async def generate_response(self, request: ChatRequest) -> ChatReply:
        """Send the user's message with its history and store the exchange.

        Runs under the conversation's lock. On any failure nothing is
        added to the stored history.

        Raises:
            BackendUnavailable: The backend failed, timed out, or answered
                without a usable completion.
        """
        cid = request.conversation_id

        async with self.pool.lock(cid):
            entry = self.pool.touch(self.pool.get_or_create(cid))

            user_turn = self.build_user_turn(request)
            working = list(request.prior_history or []) + entry.history + [user_turn]
            view = truncate_turns(working, self.config.max_context_length)

            logger.debug(
                "model_request",
                model=self.name,
                conversation_id=cid,
                history_turns=len(working),
                sent_turns=len(view),
            )
            text = await self._complete([t.to_litellm() for t in view])

            self.pool.append(entry, user_turn)
            self.pool.append(entry, Turn(Role.ASSISTANT, text))

        return ChatReply(conversation_id=cid, text=text, model=self.model)

    def recent_turns(self, conversation_id: str, count: int) -> list[Turn]:
        """The last ``count`` stored turns of a conversation."""
        entry = self.pool.get(conversation_id)
        if entry is None or count <= 0:
            return []
        return list(entry.history[-count:])

    def _request_options(self) -> dict[str, Any]:
        """Sampling parameters and stop sequences for the completion call."""
        cfg = self.config
        options: dict[str, Any] = {}
        for key in ("temperature", "max_tokens", "top_p", "frequency_penalty", "presence_penalty"):
            value = getattr(cfg, key)
            if value is not None:
                options[key] = value
        if cfg.stop:
            options["stop"] = list(cfg.stop)
        return options

    async def _complete(self, messages: list[dict[str, Any]]) -> str:
        """Call the backend and return the first choice's text."""
        kwargs: dict[str, Any] = {
            "model": f"{self.provider}/{self.config.model}",
            "messages": messages,
            "api_base": self.config.endpoint,
            "stream": False,
            **self._request_options(),
        }
        api_key = self.config.get_api_key()
        if api_key:
            kwargs["api_key"] = api_key

        try:
            call = litellm.acompletion(**kwargs)
            if self.request_timeout:
                response = await asyncio.wait_for(call, timeout=self.request_timeout)
            else:
                response = await call
        except asyncio.TimeoutError as e:
            logger.warning("backend_timeout", model=self.name, timeout=self.request_timeout)
            raise BackendUnavailable(self.name, f"timed out after {self.request_timeout}s") from e
        except Exception as e:
            logger.warning("backend_failed", model=self.name, error=str(e))
            raise BackendUnavailable(self.name, str(e)) from e

        choice = response.choices[0] if getattr(response, "choices", None) else None
        content = getattr(getattr(choice, "message", None), "content", None)
        if not isinstance(content, str):
            logger.warning("backend_malformed_response", model=self.name)
            raise BackendUnavailable(self.name, "response has no completion text")

        logger.debug("model_response", model=self.name, reply_len=len(content))
        return content
