"""Download .torrent files from trackers and classify what came back."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlparse

import aiohttp

from seedmatch import logger
from seedmatch.config import SnatchConfig
from seedmatch.metafile import Metafile, MetafileDecodeError
from seedmatch.snatch.types import SnatchError, SnatchResult

MAGNET_PREFIX = "magnet:"
RSS_CONTENT_TYPE = "application/rss+xml"
# Some trackers answer throttled snatches with a feed page mentioning the status.
RSS_RATE_LIMIT_MARKER = "429"
BODY_SNIPPET_LENGTH = 100


@dataclass(frozen=True)
class SnatchResponse:
    """Everything the classifier needs from a settled HTTP response."""

    status: int
    reason: str
    headers: Dict[str, str]
    body: bytes

    def header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    @property
    def content_type(self) -> str:
        value = self.header("Content-Type") or ""
        return value.split(";", 1)[0].strip().lower()

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


def _snippet(text: str) -> str:
    if len(text) > BODY_SNIPPET_LENGTH:
        return text[:BODY_SNIPPET_LENGTH] + "..."
    return text


def _validate_url(url: str) -> None:
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"Snatch URL must be an absolute http(s) URL: {url!r}")


def classify_response(url: str, response: SnatchResponse) -> SnatchResult:
    """Map a settled response onto a SnatchResult; first matching rule wins."""
    log = logger.get_logger()
    location = response.header("Location") or ""

    if 300 <= response.status < 400 and location.startswith(MAGNET_PREFIX):
        log.snatch_failed(url, SnatchError.MAGNET_LINK.value, "unsupported magnet link")
        return SnatchResult.err(SnatchError.MAGNET_LINK)

    if response.status == 429:
        log.snatch_failed(url, SnatchError.RATE_LIMITED.value, f"status {response.status}")
        return SnatchResult.err(SnatchError.RATE_LIMITED)

    if not 200 <= response.status < 300:
        log.snatch_failed(url, SnatchError.UNKNOWN_ERROR.value, f"{response.status} {response.reason}")
        log.debug(f"response: {_snippet(response.text())}")
        return SnatchResult.err(SnatchError.UNKNOWN_ERROR)

    if response.content_type == RSS_CONTENT_TYPE:
        text = response.text()
        if RSS_RATE_LIMIT_MARKER in text:
            log.snatch_failed(url, SnatchError.RATE_LIMITED.value, "feed response")
            return SnatchResult.err(SnatchError.RATE_LIMITED)
        log.snatch_failed(url, SnatchError.INVALID_CONTENTS.value)
        log.debug(f'contents: "{_snippet(text)}"')
        return SnatchResult.err(SnatchError.INVALID_CONTENTS)

    try:
        meta = Metafile.decode(response.body)
    except MetafileDecodeError:
        log.snatch_failed(url, SnatchError.INVALID_CONTENTS.value)
        log.debug(f"Content-Type: {response.header('Content-Type')}")
        log.debug(f"Content-Length: {response.header('Content-Length')}")
        return SnatchResult.err(SnatchError.INVALID_CONTENTS)
    return SnatchResult.ok(meta)


class TorrentSnatcher:
    """Fetches .torrent files with one GET each, never following redirects."""

    def __init__(self, config: Optional[SnatchConfig] = None):
        self.config = config or SnatchConfig()
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def snatch(self, url: str) -> SnatchResult:
        """GET ``url`` and return a decoded metafile or the reason it failed."""
        _validate_url(url)
        log = logger.get_logger()
        timeout = self.config.timeout_seconds
        log.snatch_request(url, timeout)
        request_start = time.time()

        session = await self._ensure_session()
        try:
            if timeout is None:
                response = await self._fetch(session, url)
            else:
                # wait_for cancels the request and disarms its timer once the fetch settles
                response = await asyncio.wait_for(self._fetch(session, url), timeout)
        except asyncio.TimeoutError:
            log.snatch_failed(url, SnatchError.ABORTED.value, "timed out")
            return SnatchResult.err(SnatchError.ABORTED)
        except (aiohttp.ClientError, OSError) as exc:
            log.snatch_failed(url, SnatchError.UNKNOWN_ERROR.value, "request failed")
            log.debug(repr(exc))
            return SnatchResult.err(SnatchError.UNKNOWN_ERROR)

        log.snatch_response(url, response.status, (time.time() - request_start) * 1000)
        return classify_response(url, response)

    async def _fetch(self, session: aiohttp.ClientSession, url: str) -> SnatchResponse:
        async with session.get(url, allow_redirects=False) as response:
            body = await response.read()
            return SnatchResponse(
                status=response.status,
                reason=response.reason or "",
                headers={key.lower(): value for key, value in response.headers.items()},
                body=body,
            )

    async def _ensure_session(self) -> aiohttp.ClientSession:
        session = self._session
        if session is not None and not session.closed:
            return session

        async with self._session_lock:
            session = self._session
            if session is None or session.closed:
                # the snatch timeout is enforced by wait_for, not by aiohttp
                self._session = aiohttp.ClientSession(
                    headers={"User-Agent": self.config.user_agent},
                    timeout=aiohttp.ClientTimeout(total=None),
                )
            return self._session

    async def close(self) -> None:
        """Close any open connections."""
        async with self._session_lock:
            session = self._session
            self._session = None
        if session is not None and not session.closed:
            await session.close()

    async def __aenter__(self) -> "TorrentSnatcher":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()


async def snatch_torrent(url: str, config: Optional[SnatchConfig] = None) -> SnatchResult:
    """One-shot snatch with a throwaway session."""
    async with TorrentSnatcher(config) as snatcher:
        return await snatcher.snatch(url)
