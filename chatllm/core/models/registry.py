"""Model registry: the set of adapters available at runtime.

Built once at startup from the configuration. Each adapter gets its own
history pool, so two models never share a conversation's turns.
"""

from __future__ import annotations

from typing import Callable

import structlog

from chatllm.config import ChatLLMConfig
from chatllm.core.errors import UnknownModel
from chatllm.core.history import HistoryPool, monotonic_ms
from chatllm.core.models.base import ModelAdapter
from chatllm.core.models.chatgpt import ChatGPTAdapter
from chatllm.core.models.claude import ClaudeAdapter
from chatllm.core.models.kimi import KimiAdapter

logger = structlog.get_logger()

ADAPTER_TYPES: dict[str, type[ModelAdapter]] = {
    ChatGPTAdapter.name: ChatGPTAdapter,
    KimiAdapter.name: KimiAdapter,
    ClaudeAdapter.name: ClaudeAdapter,
}


class ModelRegistry:
    """Named adapters, looked up by the ``--model`` option."""

    def __init__(self, default: str | None = None) -> None:
        self._adapters: dict[str, ModelAdapter] = {}
        self._default = default

    def register(self, adapter: ModelAdapter) -> None:
        """Register an adapter under its name."""
        self._adapters[adapter.name] = adapter
        logger.info("model_registered", model=adapter.name, backend_model=adapter.model)

    def get(self, name: str | None = None) -> ModelAdapter:
        """Look up an adapter, falling back to the default.

        Raises:
            UnknownModel: Nothing is registered under the name.
        """
        key = (name or self._default or "").strip().lower()
        adapter = self._adapters.get(key)
        if adapter is None:
            raise UnknownModel(key, self.names)
        return adapter

    @property
    def names(self) -> list[str]:
        return list(self._adapters.keys())

    @property
    def default(self) -> str | None:
        return self._default

    def __iter__(self):
        return iter(self._adapters.values())

    def forget(self, conversation_id: str) -> int:
        """Drop a conversation from every adapter's pool."""
        return sum(1 for adapter in self if adapter.pool.forget(conversation_id))

    def sweep(self) -> int:
        """Sweep idle conversations from every pool."""
        return sum(adapter.pool.sweep() for adapter in self)

    @classmethod
    def from_config(
        cls,
        config: ChatLLMConfig,
        clock: Callable[[], float] = monotonic_ms,
    ) -> ModelRegistry:
        """Create a registry with an adapter for every enabled model section."""
        registry = cls(default=config.default_model)

        for name, adapter_cls in ADAPTER_TYPES.items():
            model_cfg = getattr(config.models, name)
            if not model_cfg.enabled:
                continue
            pool = HistoryPool(forget_time=model_cfg.forget_time, clock=clock)
            registry.register(
                adapter_cls(model_cfg, pool=pool, request_timeout=config.request_timeout)
            )

        if config.default_model not in registry.names:
            logger.warning(
                "default_model_not_registered",
                default=config.default_model,
                available=registry.names,
            )
        return registry
