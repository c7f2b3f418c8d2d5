"""
Collector Agent - fetches every configured status feed for one cycle.

Consumes ``collect_feeds`` from rss_tasks, publishes one
``rss_data_collected`` result on orchestrator_results.

Per source (sequential, independent):
  up to max_retries attempts of fetch + parse, a fixed retry_delay between
  attempts, then a CollectionFailure "Failed after N attempts: <cause>".
"""

import asyncio
import logging
from typing import List, Optional, Union

from ..config import Settings, get_settings
from ..observability import log_agent_action, log_agent_error, log_agent_handoff
from ..queue import MessageQueue, QueueTransportError, channels
from ..schemas import (
    AgentResult, BaseMessage, CollectedPayload, CollectionFailure,
    CollectionSuccess, CollectorStatus, CollectTask, SourceDescriptor,
)
from ..tools import FeedFetchError, FeedParseError, RSSTool

logger = logging.getLogger(__name__)

AGENT_NAME = "collector"

Outcome = Union[CollectionSuccess, CollectionFailure]


class CollectorAgent:
    """Turns a source list into per-source collection outcomes."""

    def __init__(
        self,
        queue: MessageQueue,
        rss_tool: Optional[RSSTool] = None,
        settings: Optional[Settings] = None,
    ):
        self.queue = queue
        self.settings = settings or get_settings()
        self.rss_tool = rss_tool or RSSTool(self.settings)
        self._active = 0

    async def initialize(self) -> None:
        await self.queue.subscribe(channels.RSS_TASKS, self.handle_task)
        log_agent_action(AGENT_NAME, "initialized", channel=channels.RSS_TASKS)

    async def handle_task(self, message: BaseMessage) -> None:
        if not isinstance(message, CollectTask):
            logger.warning(
                f"Collector ignoring unexpected message kind "
                f"'{getattr(message, 'kind', '?')}' [{message.correlation_id}]"
            )
            return
        await self.collect(message.source_descriptors(), message.correlation_id)

    async def collect(self, sources: List[SourceDescriptor], correlation_id: str) -> Optional[AgentResult]:
        """Collect all sources and publish the result. Never raises on feed errors.

        Returns the published result, or None when the publish itself failed.
        """
        log_agent_action(AGENT_NAME, "collection_started", correlation_id, sources=len(sources))
        self._active += 1
        try:
            outcomes: List[Outcome] = []
            for source in sources:
                outcomes.append(await self.collect_source(source, correlation_id))
        finally:
            self._active -= 1

        payload = CollectedPayload(data=outcomes)
        succeeded = sum(1 for o in outcomes if isinstance(o, CollectionSuccess))
        log_agent_action(
            AGENT_NAME, "collection_completed", correlation_id,
            succeeded=succeeded, failed=len(outcomes) - succeeded,
            total_items=payload.total_items,
        )

        result = AgentResult(correlation_id=correlation_id, from_agent=AGENT_NAME, result=payload)
        try:
            published = await self.queue.publish(channels.ORCHESTRATOR_RESULTS, result)
        except QueueTransportError as e:
            log_agent_error(AGENT_NAME, e, correlation_id)
            return None

        log_agent_handoff(AGENT_NAME, "orchestrator", correlation_id, total_items=payload.total_items)
        return published

    async def collect_source(self, source: SourceDescriptor, correlation_id: str) -> Outcome:
        """Fetch + parse one source with retries."""
        attempts = self.settings.max_retries
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            try:
                items = await self.rss_tool.fetch_and_parse(source.url)
            except Exception as e:
                if not isinstance(e, (FeedFetchError, FeedParseError)):
                    log_agent_error(AGENT_NAME, e, correlation_id)
                last_error = e
                logger.warning(
                    f"[{correlation_id}] {source.name}: attempt {attempt}/{attempts} failed: {e}"
                )
                if attempt < attempts:
                    await asyncio.sleep(self.settings.retry_delay_seconds)
                continue

            logger.info(f"[{correlation_id}] {source.name}: {len(items)} items")
            return CollectionSuccess(name=source.name, url=source.url, items=items)

        return CollectionFailure(
            name=source.name,
            url=source.url,
            error=f"Failed after {attempts} attempts: {last_error}",
        )

    def get_status(self) -> CollectorStatus:
        sources = list(self.settings.rss_sources)
        return CollectorStatus(
            name=AGENT_NAME,
            status="active" if self._active else "idle",
            supported_sources=sources,
        )
