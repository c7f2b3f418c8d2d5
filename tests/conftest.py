"""Shared fixtures: settings factory, feed item factory and a scripted feed tool."""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

import pytest

from varuna.config import Settings
from varuna.schemas import FeedItem
from varuna.tools import FeedFetchError


class ScriptedRSSTool:
    """Stands in for RSSTool.

    ``responses`` maps a URL to items, or to an exception raised on every
    attempt. ``attempts`` maps a URL to a list of per-attempt outcomes
    consumed in order.
    """

    def __init__(
        self,
        responses: Optional[Dict[str, Union[List[FeedItem], Exception]]] = None,
        attempts: Optional[Dict[str, List[Union[List[FeedItem], Exception]]]] = None,
    ):
        self.responses = responses or {}
        self.attempts = attempts or {}
        self.calls: List[str] = []

    async def fetch_and_parse(self, url: str) -> List[FeedItem]:
        self.calls.append(url)
        if self.attempts.get(url):
            outcome = self.attempts[url].pop(0)
        else:
            outcome = self.responses.get(url, FeedFetchError("HTTP 404: Not Found"))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        values = dict(
            rss_sources={"aws": "https://aws.test/rss", "gcp": "https://gcp.test/feed"},
            max_retries=3,
            retry_delay_ms=0,
            fetch_timeout_ms=1000,
            queue_poll_interval_ms=10,
            rss_collection_interval_ms=60_000,
            target_cycles=0,
            log_format="simple",
        )
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


@pytest.fixture
def feed_item():
    def _make(title: str, description: str = "", **kwargs) -> FeedItem:
        kwargs.setdefault("published_at", datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc))
        kwargs.setdefault("guid", title.lower().replace(" ", "-"))
        return FeedItem(title=title, description=description, **kwargs)
    return _make


@pytest.fixture
def scripted_tool():
    return ScriptedRSSTool
