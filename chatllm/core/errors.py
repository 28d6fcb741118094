"""Error kinds raised by the chatllm core."""

from __future__ import annotations


class ChatLLMError(Exception):
    """Base class for errors the chat layer knows how to present."""

    #: Key of the localized message shown to the chat user
    message_key: str = "unknown-error"


class BackendUnavailable(ChatLLMError, RuntimeError):
    """The completion endpoint failed, timed out, or returned garbage."""

    message_key = "backend-failed"

    def __init__(self, model: str, reason: str) -> None:
        super().__init__(f"Model '{model}' unavailable: {reason}")
        self.model = model
        self.reason = reason


class UnknownModel(ChatLLMError, LookupError):
    """No adapter is registered under the requested name."""

    message_key = "unknown-model"

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(
            f"Unknown model '{name}'. Available: {', '.join(available) or '(none)'}"
        )
        self.name = name
        self.available = available


class EmptyInput(ChatLLMError, ValueError):
    """Neither text nor a usable attachment was supplied."""

    message_key = "expect-prompt"

    def __init__(self) -> None:
        super().__init__("No text or attachment to send")


class MediaFetchFailure(ChatLLMError, RuntimeError):
    """An attachment could not be downloaded."""

    message_key = "media-failed"

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to download {url}: {reason}")
        self.url = url
        self.reason = reason
