"""User-facing message tables."""

from __future__ import annotations

MESSAGES: dict[str, dict[str, str]] = {
    "zh-CN": {
        "reset-success": "会话已重置。",
        "expect-prompt": "请输入你要发送的内容。",
        "loading": "请稍等，正在思考中……",
        "unknown-error": "发生未知错误。",
        "unknown-model": "未知的模型：{name}。可用模型：{available}",
        "media-failed": "图片下载失败，请稍后再试。",
        "backend-failed": "模型服务暂时不可用，请稍后再试。",
        "version": "{title}（{model}）",
    },
    "en-US": {
        "reset-success": "Conversation reset.",
        "expect-prompt": "Please enter the message you want to send.",
        "loading": "Thinking, please wait...",
        "unknown-error": "An unknown error occurred.",
        "unknown-model": "Unknown model: {name}. Available models: {available}",
        "media-failed": "Failed to download the image. Please try again later.",
        "backend-failed": "The model service is unavailable. Please try again later.",
        "version": "{title} ({model})",
    },
}

DEFAULT_LOCALE = "zh-CN"


def text(key: str, locale: str = DEFAULT_LOCALE, **params: object) -> str:
    """Look up a message, falling back to the default locale, then the key."""
    table = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    template = table.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
    return template.format(**params) if params else template
