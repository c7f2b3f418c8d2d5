"""
MonitorSystem - wires one queue, the orchestrator and both worker agents.

Lifecycle: initialize -> start -> (cycles...) -> stop -> shutdown
Stops itself once target_cycles cycles have completed (0 disables).
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from .agents import AnalyzerAgent, CollectorAgent, Orchestrator
from .config import Settings, get_settings
from .observability import log_agent_action
from .queue import MessageQueue, create_message_queue
from .schemas import (
    AgentResult, AgentStatuses, AnalysisCompletePayload, OverallSummary,
    SystemInfo, SystemStatus, utcnow,
)
from .tools import RSSTool

logger = logging.getLogger(__name__)


class MonitorSystem:
    """Owns every component of the monitor for one process."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        queue: Optional[MessageQueue] = None,
        rss_tool: Optional[RSSTool] = None,
    ):
        self.settings = settings or get_settings()
        self.queue = queue or create_message_queue(self.settings)

        self.orchestrator = Orchestrator(
            self.queue, self.settings, on_cycle_complete=self._on_cycle_complete
        )
        self.collector = CollectorAgent(self.queue, rss_tool=rss_tool, settings=self.settings)
        self.analyzer = AnalyzerAgent(self.queue, settings=self.settings)

        self.is_running = False
        self.start_time: Optional[datetime] = None
        self.last_summary: Optional[OverallSummary] = None
        self._initialized = False
        self._status_task: Optional[asyncio.Task] = None
        self._stopped = asyncio.Event()

    async def initialize(self) -> None:
        if self._initialized:
            return
        logger.info("=" * 50)
        logger.info("INITIALIZING VARUNA MONITOR")
        logger.info("=" * 50)

        await self.queue.initialize()
        await self.collector.initialize()
        await self.analyzer.initialize()
        self._initialized = True

        log_agent_action(
            "system", "initialized",
            environment=self.settings.environment.value if self.settings.environment else "default",
            backend=self.settings.queue_backend.value,
            sources=len(self.settings.rss_sources),
        )

    async def start(self) -> None:
        if self.is_running:
            return
        await self.initialize()

        self.is_running = True
        self.start_time = utcnow()
        self._stopped.clear()

        await self.orchestrator.start_scheduling()
        self._status_task = asyncio.create_task(self._status_loop(), name="system-status")
        log_agent_action("system", "started", target_cycles=self.settings.target_cycles)

    async def stop(self) -> None:
        if not self.is_running:
            return
        self.is_running = False

        await self.orchestrator.stop_scheduling()
        task, self._status_task = self._status_task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        self.log_status()
        log_agent_action("system", "stopped", cycle_count=self.orchestrator.cycle_count)
        self._stopped.set()

    async def shutdown(self) -> None:
        await self.stop()
        await self.queue.close()
        self._stopped.set()

    async def wait_until_stopped(self) -> None:
        await self._stopped.wait()

    async def _on_cycle_complete(self, message: AgentResult) -> None:
        if isinstance(message.result, AnalysisCompletePayload):
            self.last_summary = message.result.summary

        target = self.settings.target_cycles
        if target and self.orchestrator.cycle_count >= target:
            logger.info(f"Target of {target} cycles reached, stopping")
            await self.stop()

    async def _status_loop(self) -> None:
        interval = self.settings.status_interval_ms / 1000
        while self.is_running:
            await asyncio.sleep(interval)
            self.log_status()

    def log_status(self) -> None:
        status = self.get_system_status()
        logger.info(
            f"Status: running={status.system.is_running} "
            f"cycles={status.system.cycle_count}/{status.system.target_cycles or '-'} "
            f"uptime={status.system.uptime_ms // 1000}s"
        )

    def get_system_status(self) -> SystemStatus:
        uptime_ms = 0
        if self.start_time is not None:
            uptime_ms = int((utcnow() - self.start_time).total_seconds() * 1000)

        return SystemStatus(
            system=SystemInfo(
                is_running=self.is_running,
                start_time=self.start_time,
                cycle_count=self.orchestrator.cycle_count,
                uptime_ms=uptime_ms,
                target_cycles=self.settings.target_cycles,
                last_summary=self.last_summary,
            ),
            agents=AgentStatuses(
                orchestrator=self.orchestrator.get_status(),
                collector=self.collector.get_status(),
                analyzer=self.analyzer.get_status(),
            ),
        )
