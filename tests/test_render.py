"""Tests for reply rendering."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from chatllm.config import PictureConfig, RenderConfig
from chatllm.render.template import CardRenderer, CardTitle, Renderer


@pytest.fixture
def title():
    return CardTitle(content="ChatGPT", sub="gpt-4o")


class TestRenderer:
    @pytest.mark.asyncio
    async def test_text_mode_returns_message(self, title):
        assert await Renderer().render(title, "hello") == "hello"
        assert await Renderer().render(title, "hello", PictureConfig()) == "hello"


class TestCardRenderer:
    def test_html_escapes_message(self, title):
        html = CardRenderer().build_html(title, "<script>alert(1)</script>", PictureConfig())
        assert "<script>alert" not in html
        assert "&lt;script&gt;" in html

    def test_html_contains_title_and_sub(self, title):
        html = CardRenderer().build_html(title, "hi", PictureConfig())
        assert "ChatGPT" in html
        assert "<small>gpt-4o</small>" in html

    def test_no_sub(self):
        html = CardRenderer().build_html(CardTitle("Kimi"), "hi", PictureConfig())
        assert "<small>" not in html

    def test_inline_svg_logo_kept(self, title):
        svg = '<svg viewBox="0 0 1 1"></svg>'
        html = CardRenderer().build_html(title, "hi", PictureConfig(logo=svg, logo_color="#cc9b7a"))
        assert svg in html
        assert "#cc9b7a" in html

    def test_url_logo_becomes_img(self, title):
        html = CardRenderer().build_html(title, "hi", PictureConfig(logo="https://x/logo.png"))
        assert '<img src="https://x/logo.png"/>' in html

    def test_width_from_config(self, title):
        html = CardRenderer(RenderConfig(width=640)).build_html(title, "hi", PictureConfig())
        assert "width: 640px" in html

    @pytest.mark.asyncio
    async def test_picture_mode_returns_data_uri(self, title):
        screenshot = AsyncMock(return_value=b"abc")
        reply = await CardRenderer(screenshot=screenshot).render(title, "hi", PictureConfig())
        assert reply == "data:image/png;base64,YWJj"
        screenshot.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_without_screenshot_falls_back_to_text(self, title):
        assert await CardRenderer().render(title, "hi", PictureConfig()) == "hi"

    @pytest.mark.asyncio
    async def test_without_picture_config_is_text(self, title):
        screenshot = AsyncMock()
        assert await CardRenderer(screenshot=screenshot).render(title, "hi") == "hi"
        screenshot.assert_not_called()
