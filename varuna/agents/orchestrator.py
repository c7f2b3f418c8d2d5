"""
Orchestrator - schedules collection cycles and routes stage results.

Flow (one correlation ID per cycle):
  rss_tasks -> collector -> orchestrator_results -> analysis_tasks
            -> analyzer  -> orchestrator_results -> cycle_count += 1

States: idle <-> scheduling. cycle_count survives stop/start.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Dict, Optional, Union

from ..config import Settings, get_settings
from ..observability import (
    log_agent_action, log_agent_error, log_agent_handoff, new_correlation_id,
)
from ..queue import MessageQueue, QueueTransportError, channels
from ..schemas import (
    AgentResult, AnalysisCompletePayload, AnalyzeTask, BaseMessage,
    CollectedPayload, CollectTask, OrchestratorStatus,
)

logger = logging.getLogger(__name__)

AGENT_NAME = "orchestrator"
RSS_COLLECTION_TASK = "rss_collection"

CycleHook = Callable[[AgentResult], Union[None, Awaitable[None]]]


class Orchestrator:
    """Timer-driven cycle dispatcher and result router."""

    def __init__(
        self,
        queue: MessageQueue,
        settings: Optional[Settings] = None,
        on_cycle_complete: Optional[CycleHook] = None,
    ):
        self.queue = queue
        self.settings = settings or get_settings()
        self.on_cycle_complete = on_cycle_complete

        self.is_running = False
        self.cycle_count = 0
        self._scheduled_tasks: Dict[str, asyncio.Task] = {}
        self._subscribed = False

    # ── Scheduling ───────────────────────────────────────────────────────────

    async def start_scheduling(self) -> None:
        """Begin periodic collection and dispatch one cycle immediately."""
        if self.is_running:
            logger.debug("Scheduling already running")
            return

        if not self._subscribed:
            await self.queue.subscribe(channels.ORCHESTRATOR_RESULTS, self.handle_result)
            self._subscribed = True

        self.is_running = True
        interval = self.settings.collection_interval_seconds
        self._scheduled_tasks[RSS_COLLECTION_TASK] = asyncio.create_task(
            self._run_every(interval), name=f"schedule:{RSS_COLLECTION_TASK}"
        )
        log_agent_action(AGENT_NAME, "scheduling_started", interval_seconds=interval)

        await self.schedule_collection()

    async def stop_scheduling(self) -> None:
        """Cancel scheduled tasks. In-flight cycles run to completion."""
        if not self.is_running:
            return

        self.is_running = False
        tasks = list(self._scheduled_tasks.values())
        self._scheduled_tasks.clear()
        current = asyncio.current_task()
        for task in tasks:
            if task is not current:
                task.cancel()
        await asyncio.gather(*(t for t in tasks if t is not current), return_exceptions=True)

        log_agent_action(AGENT_NAME, "scheduling_stopped", cycle_count=self.cycle_count)

    async def _run_every(self, interval: float) -> None:
        while self.is_running:
            await asyncio.sleep(interval)
            if not self.is_running:
                break
            await self.schedule_collection()

    async def schedule_collection(self) -> Optional[str]:
        """Publish one collect task. Returns its correlation ID, or None if the publish failed."""
        correlation_id = new_correlation_id()
        task = CollectTask(correlation_id=correlation_id, sources=dict(self.settings.rss_sources))
        try:
            await self.queue.publish(channels.RSS_TASKS, task)
        except QueueTransportError as e:
            log_agent_error(AGENT_NAME, e, correlation_id)
            return None

        log_agent_handoff(AGENT_NAME, "collector", correlation_id, sources=len(task.sources))
        return correlation_id

    # ── Result routing ───────────────────────────────────────────────────────

    async def handle_result(self, message: BaseMessage) -> None:
        if not isinstance(message, AgentResult):
            logger.warning(
                f"Orchestrator ignoring non-result message "
                f"'{getattr(message, 'kind', '?')}' [{message.correlation_id}]"
            )
            return

        payload = message.result
        if isinstance(payload, CollectedPayload):
            await self._forward_to_analysis(message, payload)
        elif isinstance(payload, AnalysisCompletePayload):
            await self._complete_cycle(message, payload)
        else:
            logger.warning(
                f"Orchestrator ignoring result type "
                f"'{getattr(payload, 'type', '?')}' from {message.from_agent} "
                f"[{message.correlation_id}]"
            )

    async def _forward_to_analysis(self, message: AgentResult, payload: CollectedPayload) -> None:
        task = AnalyzeTask(
            correlation_id=message.correlation_id,
            data=payload.data,
            forwarded_by=AGENT_NAME,
            original_source=message.from_agent,
        )
        try:
            await self.queue.publish(channels.ANALYSIS_TASKS, task)
        except QueueTransportError as e:
            log_agent_error(AGENT_NAME, e, message.correlation_id)
            return

        log_agent_handoff(
            AGENT_NAME, "analyzer", message.correlation_id,
            providers=len(payload.data), total_items=payload.total_items,
        )

    async def _complete_cycle(self, message: AgentResult, payload: AnalysisCompletePayload) -> None:
        self.cycle_count += 1
        log_agent_action(
            AGENT_NAME, "cycle_completed", message.correlation_id,
            cycle=self.cycle_count,
            providers=payload.summary.total_providers,
            overall_risk=payload.summary.overall_risk_score,
        )

        if self.on_cycle_complete is None:
            return
        try:
            result = self.on_cycle_complete(message)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            log_agent_error(AGENT_NAME, e, message.correlation_id)

    def get_status(self) -> OrchestratorStatus:
        return OrchestratorStatus(
            is_running=self.is_running,
            active_tasks=list(self._scheduled_tasks),
            cycle_count=self.cycle_count,
        )
