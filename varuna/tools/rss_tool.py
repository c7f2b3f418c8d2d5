"""
RSS Tool for fetching cloud-provider status feeds.

Two steps, kept separate so the collector can retry them as one attempt:
  fetch_feed: raw bytes over HTTP with a hard timeout
  parse_feed: RSS/Atom bytes -> FeedItem list
"""

import asyncio
import html
import logging
import re
from datetime import datetime, timezone
from typing import Any, List, Optional

import feedparser
import httpx

from ..config import Settings, get_settings
from ..schemas import FeedItem, utcnow

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")


class FeedFetchError(Exception):
    """Timeout, connection failure, or non-2xx response."""


class FeedParseError(Exception):
    """Response body is not a usable RSS/Atom document."""


class RSSTool:
    """Fetches and parses status feeds."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        # Injected in tests (httpx.MockTransport)
        self._transport = transport

    async def fetch_feed(self, url: str) -> bytes:
        """GET ``url`` and return the body. Raises FeedFetchError."""
        timeout = self.settings.fetch_timeout_seconds
        headers = {"User-Agent": self.settings.user_agent}

        async def _get() -> bytes:
            async with httpx.AsyncClient(
                timeout=timeout, transport=self._transport, follow_redirects=True
            ) as client:
                response = await client.get(url, headers=headers)
                response.raise_for_status()
                return response.content

        try:
            # httpx times each phase separately; wait_for bounds the whole request
            return await asyncio.wait_for(_get(), timeout=timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise FeedFetchError(f"Request timeout after {timeout:g}s") from e
        except httpx.HTTPStatusError as e:
            raise FeedFetchError(
                f"HTTP {e.response.status_code}: {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            raise FeedFetchError(f"{type(e).__name__}: {e}") from e

    def parse_feed(self, raw: bytes) -> List[FeedItem]:
        """Parse an RSS/Atom document. Raises FeedParseError."""
        parsed = feedparser.parse(raw)
        if parsed.bozo and not parsed.entries:
            raise FeedParseError(f"Malformed feed: {parsed.get('bozo_exception')}")
        if not parsed.get("version") and not parsed.entries:
            raise FeedParseError("Not a feed: no RSS/Atom root element")
        return [self._parse_entry(entry) for entry in parsed.entries]

    async def fetch_and_parse(self, url: str) -> List[FeedItem]:
        raw = await self.fetch_feed(url)
        return self.parse_feed(raw)

    def _parse_entry(self, entry: Any) -> FeedItem:
        """Parse a feedparser entry to FeedItem."""
        title = html.unescape(entry.get("title", "") or "")

        description = entry.get("summary", "") or entry.get("description", "") or ""
        description = _TAG_RE.sub("", description)   # Strip HTML tags
        description = html.unescape(description).strip()

        published = utcnow()
        stamp = entry.get("published_parsed") or entry.get("updated_parsed")
        if stamp:
            try:
                published = datetime(*stamp[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                logger.debug(f"Unparseable entry date {stamp!r}, using fetch time")

        categories = [t.get("term", "") for t in entry.get("tags", []) if t.get("term")]

        return FeedItem(
            title=title,
            description=description,
            link=entry.get("link", "") or "",
            published_at=published,
            guid=entry.get("id", "") or entry.get("link", "") or "",
            categories=categories,
        )
