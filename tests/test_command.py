"""Tests for chat command parsing."""

from __future__ import annotations

import pytest

from chatllm.adapters.command import parse_command
from chatllm.core.chat import ChatCommand


class TestParseCommand:
    def test_requires_trigger_word(self):
        assert parse_command("hello") is None
        assert parse_command("") is None
        assert parse_command("chatter hi") is None

    def test_plain_text(self):
        assert parse_command("chat how are you?") == ChatCommand(text="how are you?")

    def test_trigger_is_case_insensitive(self):
        assert parse_command("CHAT hi").text == "hi"

    def test_custom_trigger(self):
        assert parse_command("gpt hi", trigger_word="gpt").text == "hi"
        assert parse_command("chat hi", trigger_word="gpt") is None

    @pytest.mark.parametrize("flag,field", [
        ("-r", "reset"), ("--reset", "reset"),
        ("-p", "picture"), ("--picture", "picture"),
        ("-c", "continue_"), ("--continue", "continue_"),
        ("-v", "version"), ("--version", "version"),
    ])
    def test_flags(self, flag, field):
        command = parse_command(f"chat {flag} hi")
        assert getattr(command, field) is True
        assert command.text == "hi"

    def test_model_option(self):
        command = parse_command("chat -m kimi tell me a joke")
        assert command.model == "kimi"
        assert command.text == "tell me a joke"

    def test_model_equals_form(self):
        assert parse_command("chat --model=claude hi").model == "claude"

    def test_combined_options(self):
        command = parse_command("chat -p -c --model kimi  summarize this")
        assert command == ChatCommand(
            text="summarize this", picture=True, continue_=True, model="kimi"
        )

    def test_options_after_text_are_text(self):
        command = parse_command("chat explain -p please")
        assert command.picture is False
        assert command.text == "explain -p please"

    def test_multiline_text_preserved(self):
        command = parse_command("chat -p line one\nline two")
        assert command.picture is True
        assert command.text == "line one\nline two"

    def test_reset_without_text(self):
        command = parse_command("chat --reset")
        assert command.reset is True
        assert command.text == ""

    def test_dangling_model_option(self):
        command = parse_command("chat -m")
        assert command.model is None
        assert command.text == ""
