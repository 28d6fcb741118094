"""Moonshot Kimi adapter."""

from __future__ import annotations

from typing import Any

from chatllm.config import KimiConfig
from chatllm.core.models.base import ModelAdapter


class KimiAdapter(ModelAdapter):
    """Kimi through Moonshot's OpenAI-compatible API.

    With ``use_search`` enabled the request asks Kimi to search the web
    before answering.
    """

    name = "kimi"
    title = "Kimi"
    config: KimiConfig

    def _request_options(self) -> dict[str, Any]:
        options = super()._request_options()
        if self.config.use_search:
            options["extra_body"] = {"use_search": True}
        return options
