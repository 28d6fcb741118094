"""Configuration management for chatllm.

Loads settings from YAML config file with Pydantic validation.
Config file location: ~/.chatllm/config.yaml
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field


# === Default paths ===

def get_chatllm_home() -> Path:
    """Get the chatllm data directory (~/.chatllm)."""
    return Path(os.environ.get("CHATLLM_HOME", Path.home() / ".chatllm"))


# === Configuration Models ===


class PictureConfig(BaseModel):
    """Presentation metadata used by the picture-mode card."""

    logo: str = ""  # Inline SVG markup or an image URL
    logo_color: str = "green"


class ModelConfig(BaseModel):
    """Settings shared by every OpenAI-compatible backend."""

    enabled: bool = True
    api_key_env: str | None = None  # Environment variable name for API key
    api_key: str | None = None  # Direct API key (not recommended)
    endpoint: str = "https://api.openai.com/v1"
    model: str = "gpt-3.5-turbo"

    # Sampling parameters; None means "let the backend decide"
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None

    max_context_length: int = 4000  # characters, not tokens
    forget_time: int = 60 * 60 * 1000  # milliseconds of inactivity
    stop: list[str] = Field(default_factory=list)
    parse_images: bool = False
    parse_files: bool = False
    picture: PictureConfig = Field(default_factory=PictureConfig)

    def get_api_key(self) -> str | None:
        """Resolve API key from env var or direct value."""
        if self.api_key_env:
            key = os.environ.get(self.api_key_env)
            if key:
                return key
        return self.api_key


class ChatGPTConfig(ModelConfig):
    """OpenAI ChatGPT backend."""

    api_key_env: str | None = "OPENAI_API_KEY"
    temperature: float | None = 1.0
    max_tokens: int | None = 1000
    top_p: float | None = 1.0
    frequency_penalty: float | None = 0.0
    presence_penalty: float | None = 0.0
    picture: PictureConfig = Field(
        default_factory=lambda: PictureConfig(logo_color="green")
    )


class KimiConfig(ModelConfig):
    """Moonshot Kimi backend."""

    api_key_env: str | None = "MOONSHOT_API_KEY"
    endpoint: str = "https://api.moonshot.cn/v1"
    model: str = "kimi"
    max_context_length: int = 200_000
    use_search: bool = False  # Ask the backend to ground answers with web search
    picture: PictureConfig = Field(
        default_factory=lambda: PictureConfig(logo_color="blue")
    )


class ClaudeConfig(ModelConfig):
    """Anthropic Claude through its OpenAI-compatible endpoint."""

    api_key_env: str | None = "ANTHROPIC_API_KEY"
    endpoint: str = "https://api.anthropic.com/v1"
    model: str = "claude"
    max_context_length: int = 200_000
    picture: PictureConfig = Field(
        default_factory=lambda: PictureConfig(logo_color="#cc9b7a")
    )


class ModelsConfig(BaseModel):
    """Per-backend configuration sections."""

    chatgpt: ChatGPTConfig = Field(default_factory=ChatGPTConfig)
    kimi: KimiConfig = Field(default_factory=lambda: KimiConfig(enabled=False))
    claude: ClaudeConfig = Field(default_factory=lambda: ClaudeConfig(enabled=False))


class RenderConfig(BaseModel):
    """Picture-mode card layout."""

    width: int = 500  # pixels
    code_max_width: int = 450


class ChatLLMConfig(BaseModel):
    """Root configuration for chatllm."""

    trigger_word: str = "chat"
    # How conversations are shared: per user, per channel, or per user in each channel
    interaction: Literal["user", "channel", "both"] = "channel"
    default_model: str = "chatgpt"
    locale: Literal["zh-CN", "en-US"] = "zh-CN"
    request_timeout: float = 60.0  # seconds
    continue_turns: int = 10  # Turns carried over by --continue
    history_sweep_interval: int = 0  # seconds; 0 disables the background sweep
    qq_image_proxy: bool = True  # Rebuild QQ image URLs from the picture MD5
    cjk_spacing: bool = True  # Space out CJK and Latin text in replies

    models: ModelsConfig = Field(default_factory=ModelsConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)


# === Config Loading ===


def load_config(config_path: Path | None = None) -> ChatLLMConfig:
    """Load configuration from YAML file.

    Falls back to defaults if the config file doesn't exist.
    """
    if config_path is None:
        config_path = get_chatllm_home() / "config.yaml"

    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return ChatLLMConfig(**raw)

    return ChatLLMConfig()


def save_default_config(config_path: Path | None = None) -> Path:
    """Save the default configuration to a YAML file.

    Creates parent directories if needed. Returns the path.
    """
    if config_path is None:
        config_path = get_chatllm_home() / "config.yaml"

    config_path.parent.mkdir(parents=True, exist_ok=True)

    config = ChatLLMConfig()
    data = config.model_dump()

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    return config_path
