"""Tests for configuration loading."""

from __future__ import annotations

import pytest
import yaml

from chatllm.config import (
    ChatGPTConfig,
    ChatLLMConfig,
    ClaudeConfig,
    KimiConfig,
    load_config,
    save_default_config,
)
from chatllm import locales


class TestDefaults:
    def test_root_defaults(self):
        cfg = ChatLLMConfig()
        assert cfg.trigger_word == "chat"
        assert cfg.interaction == "channel"
        assert cfg.default_model == "chatgpt"
        assert cfg.history_sweep_interval == 0
        assert cfg.cjk_spacing is True
        assert cfg.models.chatgpt.enabled is True
        assert cfg.models.kimi.enabled is False
        assert cfg.models.claude.enabled is False

    def test_chatgpt_defaults(self):
        cfg = ChatGPTConfig()
        assert cfg.endpoint == "https://api.openai.com/v1"
        assert cfg.model == "gpt-3.5-turbo"
        assert cfg.max_context_length == 4000
        assert cfg.forget_time == 3_600_000
        assert cfg.stop == []

    def test_kimi_defaults(self):
        cfg = KimiConfig()
        assert cfg.endpoint == "https://api.moonshot.cn/v1"
        assert cfg.max_context_length == 200_000
        assert cfg.use_search is False
        assert cfg.picture.logo_color == "blue"

    def test_claude_defaults(self):
        cfg = ClaudeConfig()
        assert cfg.endpoint == "https://api.anthropic.com/v1"
        assert cfg.picture.logo_color == "#cc9b7a"

    def test_invalid_interaction(self):
        with pytest.raises(ValueError):
            ChatLLMConfig(interaction="everyone")


class TestApiKey:
    def test_env_var_wins(self, monkeypatch):
        monkeypatch.setenv("TEST_CHATLLM_KEY", "from-env")
        cfg = ChatGPTConfig(api_key_env="TEST_CHATLLM_KEY", api_key="direct")
        assert cfg.get_api_key() == "from-env"

    def test_direct_key_fallback(self, monkeypatch):
        monkeypatch.delenv("TEST_CHATLLM_KEY", raising=False)
        cfg = ChatGPTConfig(api_key_env="TEST_CHATLLM_KEY", api_key="direct")
        assert cfg.get_api_key() == "direct"


class TestLoading:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == ChatLLMConfig()

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "interaction": "both",
            "models": {"kimi": {"enabled": True, "use_search": True, "stop": ["END"]}},
        }), encoding="utf-8")

        cfg = load_config(path)
        assert cfg.interaction == "both"
        assert cfg.models.kimi.enabled is True
        assert cfg.models.kimi.use_search is True
        assert cfg.models.kimi.stop == ["END"]
        assert cfg.models.kimi.max_context_length == 200_000

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == ChatLLMConfig()

    def test_save_default_roundtrip(self, tmp_path):
        path = save_default_config(tmp_path / "sub" / "config.yaml")
        assert path.exists()
        assert load_config(path) == ChatLLMConfig()

    def test_home_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CHATLLM_HOME", str(tmp_path))
        path = save_default_config()
        assert path == tmp_path / "config.yaml"


class TestLocales:
    def test_lookup(self):
        assert locales.text("reset-success", "en-US") == "Conversation reset."

    def test_params(self):
        assert locales.text("version", "en-US", title="Kimi", model="kimi") == "Kimi (kimi)"

    def test_unknown_locale_falls_back(self):
        assert locales.text("reset-success", "fr-FR") == locales.text("reset-success", "zh-CN")

    def test_unknown_key_returns_key(self):
        assert locales.text("no-such-key", "en-US") == "no-such-key"
