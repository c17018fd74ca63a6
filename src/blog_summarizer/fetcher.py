"""Download a blog page with browser-like headers and a hard deadline."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit

import httpx
from loguru import logger

from .config import get_settings
from .errors import FetchTimeout, HttpError, InvalidUrl, NetworkError

BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}


@dataclass(frozen=True)
class RawPage:
    url: str
    final_url: str
    status_code: int
    html: str


def validate_url(url: Optional[str]) -> str:
    """Return the trimmed URL or raise InvalidUrl for anything but absolute http(s)."""
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidUrl("URL is required")
    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise InvalidUrl() from exc
    if parts.scheme.lower() not in {"http", "https"} or not parts.netloc:
        raise InvalidUrl()
    return candidate


def build_http_client(timeout: float | None = None) -> httpx.AsyncClient:
    """Create a pooled client; separated for reuse by the server and tests."""
    seconds = timeout if timeout is not None else get_settings().fetch_timeout_seconds
    return httpx.AsyncClient(
        headers=BROWSER_HEADERS,
        follow_redirects=True,
        timeout=httpx.Timeout(seconds),
    )


async def _get(client: httpx.AsyncClient, url: str, timeout: float) -> httpx.Response:
    return await client.get(
        url,
        headers=BROWSER_HEADERS,
        follow_redirects=True,
        timeout=httpx.Timeout(timeout),
    )


async def fetch(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float | None = None,
) -> RawPage:
    """
    Fetch ``url`` once and return its HTML.

    The whole request (connect, redirects, body) must finish within
    ``timeout`` seconds. No retries are attempted; callers decide whether to
    try again.
    """
    target = validate_url(url)
    seconds = timeout if timeout is not None else get_settings().fetch_timeout_seconds

    logger.info(f"Fetching {target}")
    try:
        if client is None:
            async with build_http_client(seconds) as owned:
                response = await asyncio.wait_for(_get(owned, target, seconds), seconds)
        else:
            response = await asyncio.wait_for(_get(client, target, seconds), seconds)
    except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
        logger.warning(f"Timed out after {seconds}s fetching {target}")
        raise FetchTimeout() from exc
    except httpx.InvalidURL as exc:
        raise InvalidUrl() from exc
    except httpx.HTTPError as exc:
        logger.warning(f"Network error fetching {target}: {exc!r}")
        raise NetworkError() from exc

    if not response.is_success:
        logger.warning(f"{target} returned HTTP {response.status_code}")
        raise HttpError(response.status_code)

    logger.info(f"Fetched {target} ({response.status_code}, {len(response.text)} chars)")
    return RawPage(
        url=target,
        final_url=str(response.url),
        status_code=response.status_code,
        html=response.text,
    )
