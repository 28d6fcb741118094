"""Media helpers: find attachment URLs in text and build stable QQ image URLs."""

from __future__ import annotations

import hashlib
import re

import httpx
import structlog

from chatllm.core.errors import MediaFetchFailure

logger = structlog.get_logger()

_IMAGE_RE = re.compile(r"(https?://\S*?\.(?:png|jpg|jpeg|gif|bmp))", re.IGNORECASE)
_FILE_RE = re.compile(r"(https?://\S*?\.(?:pdf|docx?|xlsx?|pptx?))", re.IGNORECASE)

_DOWNLOAD_TIMEOUT = 30  # seconds


def extract_images(content: str) -> list[str]:
    """Return image URLs (png/jpg/jpeg/gif/bmp) found in ``content``."""
    return _IMAGE_RE.findall(content)


def extract_files(content: str) -> list[str]:
    """Return document URLs (pdf/doc/xls/ppt and their x variants) in ``content``."""
    return _FILE_RE.findall(content)


async def fetch_md5(url: str, client: httpx.AsyncClient | None = None) -> str:
    """Download ``url`` and return the upper-case hex MD5 of its bytes.

    Raises:
        MediaFetchFailure: Transport error or a non-200 response.
    """
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=_DOWNLOAD_TIMEOUT) as own_client:
                resp = await own_client.get(url)
        else:
            resp = await client.get(url)
    except httpx.HTTPError as e:
        logger.warning("media_fetch_failed", url=url, error=str(e))
        raise MediaFetchFailure(url, str(e)) from e

    if resp.status_code != 200:
        logger.warning("media_fetch_failed", url=url, status=resp.status_code)
        raise MediaFetchFailure(url, f"status code {resp.status_code}")

    return hashlib.md5(resp.content).hexdigest().upper()


def qq_pic_url(md5: str) -> str:
    """Stable QQ group-chat picture URL for an image MD5."""
    # The format query is a fake extension so backends treat it as a JPEG
    return f"https://gchat.qpic.cn/gchatpic_new/0/0-0-{md5}/0?format=.jpg"


async def qq_stable_image_urls(
    urls: list[str],
    client: httpx.AsyncClient | None = None,
) -> list[str]:
    """Rewrite QQ attachment URLs (which expire) into MD5-based ones."""
    return [qq_pic_url(await fetch_md5(url, client)) for url in urls]
