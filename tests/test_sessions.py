"""Tests for the conversation session router."""

from __future__ import annotations

import itertools

import pytest

from chatllm.core.sessions import ConversationRouter, Interaction, PlatformSession
from chatllm.core.types import LastChat, Role, Turn


# === Shared fixtures ===

@pytest.fixture
def session():
    return PlatformSession(platform="qq", channel_id="g1", user_id="u1")


def _router(interaction=Interaction.CHANNEL) -> ConversationRouter:
    counter = itertools.count(1)
    return ConversationRouter(interaction, id_factory=lambda: f"conv-{next(counter)}")


# =============================================================
# Session keys
# =============================================================

class TestSessionKey:
    def test_user_scope(self, session):
        assert _router("user").session_key(session) == "qq:u1"

    def test_channel_scope(self, session):
        assert _router("channel").session_key(session) == "qq:g1"

    def test_both_scope(self, session):
        assert _router("both").session_key(session) == "qq:g1:u1"

    def test_channel_scope_shares_between_users(self, session):
        router = _router("channel")
        other = PlatformSession(platform="qq", channel_id="g1", user_id="u2")
        assert router.session_key(session) == router.session_key(other)

    def test_user_scope_follows_user_across_channels(self, session):
        router = _router("user")
        elsewhere = PlatformSession(platform="qq", channel_id="g2", user_id="u1")
        assert router.session_key(session) == router.session_key(elsewhere)

    def test_invalid_scope(self):
        with pytest.raises(ValueError):
            ConversationRouter("everyone")


# =============================================================
# Bindings
# =============================================================

class TestBindings:
    @pytest.mark.asyncio
    async def test_resolve_creates_once(self):
        router = _router()
        first = await router.resolve("k")
        second = await router.resolve("k")
        assert first is second
        assert first.conversation_id == "conv-1"
        assert router.binding_count == 1

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        router = _router()
        a = await router.resolve("a")
        b = await router.resolve("b")
        assert a.conversation_id != b.conversation_id

    @pytest.mark.asyncio
    async def test_reset_issues_new_conversation(self):
        router = _router()
        old = await router.resolve("k")
        dropped = await router.reset("k")
        assert dropped is old
        assert router.get("k") is None
        new = await router.resolve("k")
        assert new.conversation_id != old.conversation_id

    @pytest.mark.asyncio
    async def test_reset_unknown_key(self):
        assert await _router().reset("nobody") is None

    @pytest.mark.asyncio
    async def test_record_last_chat(self):
        router = _router()
        binding = await router.resolve("k")
        snapshot = LastChat(model="chatgpt", turns=(Turn(Role.USER, "hi"),))
        assert await router.record("k", binding.conversation_id, snapshot) is True
        assert router.get("k").last_chat == snapshot

    @pytest.mark.asyncio
    async def test_record_after_reset_is_ignored(self):
        router = _router()
        stale = await router.resolve("k")
        await router.reset("k")
        fresh = await router.resolve("k")

        snapshot = LastChat(model="chatgpt")
        assert await router.record("k", stale.conversation_id, snapshot) is False
        assert fresh.last_chat is None
