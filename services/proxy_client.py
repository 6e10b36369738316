"""
Outbound calls made on behalf of the browser: fetching remote product images
and forwarding LLM requests with the server-held key.

One round-trip per call, no retry. Transport failures surface as ``ProxyError``.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

from core.config import settings
from utils.logger import logger


class ProxyError(Exception):
    """The upstream could not be reached or answered with garbage."""


@dataclass
class UpstreamResponse:
    status: int
    body: Any
    content_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


async def fetch_image(url: str) -> UpstreamResponse:
    headers = {
        "User-Agent": settings.IMAGE_PROXY_USER_AGENT,
        "Accept": "image/*",
    }
    timeout = aiohttp.ClientTimeout(total=settings.IMAGE_PROXY_TIMEOUT)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(url, headers=headers) as resp:
                body = await resp.read()
                return UpstreamResponse(resp.status, body, resp.headers.get("Content-Type"))
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"IMAGE PROXY: {url} failed: {e!r}")
        raise ProxyError(str(e) or e.__class__.__name__) from e


async def forward_llm(payload: Dict[str, Any]) -> UpstreamResponse:
    """POST ``payload`` verbatim to the LLM API; the JSON answer comes back as is."""
    headers = {
        "Content-Type": "application/json",
        "x-api-key": settings.LLM_API_KEY,
        "anthropic-version": settings.LLM_API_VERSION,
    }
    if settings.LLM_API_BETA:
        headers["anthropic-beta"] = settings.LLM_API_BETA

    timeout = aiohttp.ClientTimeout(total=settings.LLM_TIMEOUT)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(settings.LLM_API_URL, json=payload, headers=headers) as resp:
                data = await resp.json(content_type=None)
                return UpstreamResponse(resp.status, data, resp.headers.get("Content-Type"))
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error(f"LLM PROXY: request failed: {e!r}")
        raise ProxyError(str(e) or e.__class__.__name__) from e
