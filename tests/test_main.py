"""Tests for application wiring."""

from __future__ import annotations

import asyncio

import pytest

from chatllm.config import ChatLLMConfig, KimiConfig, ModelsConfig
from chatllm.core.chat import ChatService
from chatllm.core.models.registry import ModelRegistry
from chatllm.core.sessions import Interaction
from chatllm.main import build_service, sweep_history
from chatllm.render.template import CardRenderer


class TestBuildService:
    def test_wiring(self):
        config = ChatLLMConfig(
            interaction="both",
            models=ModelsConfig(kimi=KimiConfig(enabled=True)),
        )
        service = build_service(config)
        assert isinstance(service, ChatService)
        assert isinstance(service.renderer, CardRenderer)
        assert service.router.interaction == Interaction.BOTH
        assert service.registry.names == ["chatgpt", "kimi"]


class TestSweep:
    @pytest.mark.asyncio
    async def test_sweep_loop_removes_idle_history(self):
        now = [0.0]
        config = ChatLLMConfig()
        config.models.chatgpt.forget_time = 10
        registry = ModelRegistry.from_config(config, clock=lambda: now[0])
        pool = registry.get("chatgpt").pool
        pool.get_or_create("idle")
        now[0] = 100.0

        task = asyncio.create_task(sweep_history(registry, interval=0))
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert "idle" not in pool
