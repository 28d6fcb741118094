"""Reply rendering: plain text, or an HTML card captured as an image.

Capturing the card is delegated to an injected ``screenshot`` coroutine
(for example a headless browser); without one, picture mode degrades to
plain text.
"""

from __future__ import annotations

import base64
import html
from dataclasses import dataclass
from typing import Awaitable, Callable

import structlog

from chatllm.config import PictureConfig, RenderConfig

logger = structlog.get_logger()

Screenshot = Callable[[str], Awaitable[bytes]]

_CARD_TEMPLATE = """<html>
  <style>
    body {{ background-color: white; font-family: sans-serif; margin: 0; }}
    html, body {{ width: {width}px; height: auto; }}
    .card {{ border: 1px solid #e6e7e9; border-radius: 4px; padding: 16px; position: relative; }}
    .card-stamp {{ position: absolute; top: 0; right: 0; width: 60px; height: 60px;
      border-radius: 0 4px 0 60px; background: {logo_color}; opacity: .8; }}
    .card-stamp svg, .card-stamp img {{ width: 32px; height: 32px; margin: 8px 0 0 20px; }}
    .card-title {{ margin: 0 0 12px 0; }}
    .message {{ color: #49566c; white-space: pre-wrap; word-wrap: break-word; }}
    pre, code {{ max-width: {code_max_width}px; word-break: break-all; white-space: pre-wrap; }}
  </style>
  <div class="card" id="message">
    <div class="card-stamp">{logo}</div>
    <h3 class="card-title">{title}{sub}</h3>
    <div class="message">{message}</div>
  </div>
</html>"""


@dataclass(frozen=True)
class CardTitle:
    """Heading of a reply card: display name plus backend model."""

    content: str
    sub: str = ""


class Renderer:
    """Turns a reply into something the chat platform can display."""

    async def render(
        self,
        title: CardTitle,
        message: str,
        picture: PictureConfig | None = None,
    ) -> str:
        """Return the message as-is. Subclasses may produce images."""
        return message


class CardRenderer(Renderer):
    """Renders replies as an image card when picture mode is requested."""

    def __init__(
        self,
        config: RenderConfig | None = None,
        screenshot: Screenshot | None = None,
    ) -> None:
        self.config = config or RenderConfig()
        self._screenshot = screenshot

    def build_html(self, title: CardTitle, message: str, picture: PictureConfig) -> str:
        """Fill the card template. Message text is HTML-escaped."""
        logo = picture.logo
        if logo and not logo.lstrip().startswith("<"):
            logo = f'<img src="{html.escape(logo, quote=True)}"/>'
        sub = f" (<small>{html.escape(title.sub)}</small>)" if title.sub else ""
        return _CARD_TEMPLATE.format(
            width=self.config.width,
            code_max_width=self.config.code_max_width,
            logo_color=html.escape(picture.logo_color, quote=True),
            logo=logo,
            title=html.escape(title.content),
            sub=sub,
            message=html.escape(message),
        )

    async def render(
        self,
        title: CardTitle,
        message: str,
        picture: PictureConfig | None = None,
    ) -> str:
        """Render a card image as a ``data:image/png;base64`` URI.

        Returns the plain message when no picture config is given or no
        screenshot function is available.
        """
        if picture is None:
            return message
        if self._screenshot is None:
            logger.warning("picture_mode_unavailable", reason="no screenshot backend")
            return message

        png = await self._screenshot(self.build_html(title, message, picture))
        b64 = base64.b64encode(png).decode("ascii")
        return f"data:image/png;base64,{b64}"
