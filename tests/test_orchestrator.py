"""Tests for orchestrator scheduling and result routing."""

import asyncio
from unittest.mock import AsyncMock, Mock

from varuna.agents import Orchestrator
from varuna.queue import InMemoryMessageQueue, QueueTransportError, channels
from varuna.schemas import (
    AgentResult, AnalysisCompletePayload, AnalyzeTask, CollectedPayload,
    CollectionSuccess, CollectTask, OverallSummary,
)


def _collected(correlation_id, feed_item):
    return AgentResult(
        correlation_id=correlation_id,
        from_agent="collector",
        result=CollectedPayload(data=[
            CollectionSuccess(name="aws", url="u", items=[feed_item("EC2 outage")]),
        ]),
    )


def _completed(correlation_id):
    return AgentResult(
        correlation_id=correlation_id,
        from_agent="analyzer",
        result=AnalysisCompletePayload(data=[], summary=OverallSummary(total_providers=1)),
    )


class TestScheduling:

    def test_start_dispatches_immediately(self, settings):
        async def scenario():
            queue = InMemoryMessageQueue(poll_interval=0.01)
            orchestrator = Orchestrator(queue, settings)
            await orchestrator.start_scheduling()
            status = orchestrator.get_status()
            tasks = await queue.drain(channels.RSS_TASKS)
            await orchestrator.stop_scheduling()
            await queue.close()
            return status, tasks

        status, tasks = asyncio.run(scenario())
        assert status.is_running is True
        assert status.active_tasks == ["rss_collection"]
        assert len(tasks) == 1
        assert isinstance(tasks[0], CollectTask)
        assert tasks[0].sources == settings.rss_sources
        assert tasks[0].scheduled_by == "orchestrator"

    def test_start_is_idempotent_and_subscribes_once(self, settings):
        async def scenario():
            queue = InMemoryMessageQueue(poll_interval=0.01)
            queue.subscribe = AsyncMock(wraps=queue.subscribe)
            orchestrator = Orchestrator(queue, settings)
            await orchestrator.start_scheduling()
            await orchestrator.start_scheduling()
            await orchestrator.stop_scheduling()
            await orchestrator.start_scheduling()
            tasks = await queue.drain(channels.RSS_TASKS)
            await orchestrator.stop_scheduling()
            await queue.close()
            return queue, tasks

        queue, tasks = asyncio.run(scenario())
        assert queue.subscribe.await_count == 1
        # first start + restart, not the repeated start
        assert len(tasks) == 2
        assert tasks[0].correlation_id != tasks[1].correlation_id

    def test_timer_dispatches_periodically(self, make_settings):
        settings = make_settings(rss_collection_interval_ms=20)

        async def scenario():
            queue = InMemoryMessageQueue(poll_interval=0.01)
            orchestrator = Orchestrator(queue, settings)
            await orchestrator.start_scheduling()
            await asyncio.sleep(0.1)
            await orchestrator.stop_scheduling()
            tasks = await queue.drain(channels.RSS_TASKS)
            await asyncio.sleep(0.05)
            late = await queue.drain(channels.RSS_TASKS)
            await queue.close()
            return tasks, late

        tasks, late = asyncio.run(scenario())
        assert len(tasks) >= 3
        assert late == []

    def test_stop_when_idle_is_noop(self, settings):
        orchestrator = Orchestrator(Mock(), settings)
        asyncio.run(orchestrator.stop_scheduling())
        assert orchestrator.get_status().is_running is False
        assert orchestrator.get_status().active_tasks == []

    def test_dispatch_failure_is_logged_not_raised(self, settings):
        queue = Mock()
        queue.publish = AsyncMock(side_effect=QueueTransportError("broker down"))
        orchestrator = Orchestrator(queue, settings)
        assert asyncio.run(orchestrator.schedule_collection()) is None


class TestHandleResult:

    def test_collected_result_forwarded_to_analysis(self, settings, feed_item):
        async def scenario():
            queue = InMemoryMessageQueue(poll_interval=0.01)
            orchestrator = Orchestrator(queue, settings)
            await orchestrator.handle_result(_collected("corr-1", feed_item))
            tasks = await queue.drain(channels.ANALYSIS_TASKS)
            await queue.close()
            return orchestrator, tasks

        orchestrator, tasks = asyncio.run(scenario())
        assert len(tasks) == 1
        task = tasks[0]
        assert isinstance(task, AnalyzeTask)
        assert task.correlation_id == "corr-1"
        assert task.forwarded_by == "orchestrator"
        assert task.original_source == "collector"
        assert task.data[0].item_count == 1
        assert orchestrator.cycle_count == 0

    def test_analysis_complete_counts_cycle(self, settings):
        seen = []
        orchestrator = Orchestrator(Mock(), settings, on_cycle_complete=seen.append)

        asyncio.run(orchestrator.handle_result(_completed("corr-1")))
        asyncio.run(orchestrator.handle_result(_completed("corr-2")))

        assert orchestrator.cycle_count == 2
        assert [m.correlation_id for m in seen] == ["corr-1", "corr-2"]

    def test_async_hook_and_hook_failure(self, settings):
        hook = AsyncMock(side_effect=RuntimeError("hook failed"))
        orchestrator = Orchestrator(Mock(), settings, on_cycle_complete=hook)

        asyncio.run(orchestrator.handle_result(_completed("corr-1")))

        hook.assert_awaited_once()
        assert orchestrator.cycle_count == 1

    def test_non_result_messages_ignored(self, settings):
        queue = Mock()
        queue.publish = AsyncMock()
        orchestrator = Orchestrator(queue, settings)

        asyncio.run(orchestrator.handle_result(CollectTask(correlation_id="corr-1", sources={})))

        queue.publish.assert_not_awaited()
        assert orchestrator.cycle_count == 0

    def test_cycle_count_survives_restart(self, settings):
        async def scenario():
            queue = InMemoryMessageQueue(poll_interval=0.01)
            orchestrator = Orchestrator(queue, settings)
            await orchestrator.start_scheduling()
            await orchestrator.handle_result(_completed("corr-1"))
            await orchestrator.stop_scheduling()
            await orchestrator.start_scheduling()
            status = orchestrator.get_status()
            await orchestrator.stop_scheduling()
            await queue.close()
            return status

        status = asyncio.run(scenario())
        assert status.cycle_count == 1
        assert status.is_running is True
