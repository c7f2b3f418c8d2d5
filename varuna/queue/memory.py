"""
In-process queue backend.

Each channel owns a FIFO backlog. Every subscription runs a polling task that
periodically drains the whole backlog and hands the messages to its handler
in order. Drained messages are gone, so competing subscriptions on one
channel split the traffic (single producer, multiple consumers) rather than
each seeing every message.
"""

import asyncio
import logging
import threading
from collections import defaultdict, deque
from typing import Deque, Dict, List

from varuna.schemas import BaseMessage

from .base import MessageHandler, MessageQueue

logger = logging.getLogger(__name__)


class InMemoryMessageQueue(MessageQueue):
    """Polling pub/sub over per-channel deques."""

    def __init__(self, poll_interval: float = 1.0):
        self.poll_interval = poll_interval
        self._backlog: Dict[str, Deque[BaseMessage]] = defaultdict(deque)
        # Publishers may live on other threads (e.g. a sync HTTP handler)
        self._lock = threading.Lock()
        self._pollers: Dict[str, List[asyncio.Task]] = defaultdict(list)
        self._closed = False

    async def publish(self, channel: str, message: BaseMessage) -> BaseMessage:
        self._ensure_open(channel)
        stamped = self._stamp(message)
        with self._lock:
            self._backlog[channel].append(stamped)
        return stamped

    async def subscribe(self, channel: str, handler: MessageHandler) -> None:
        self._ensure_open(channel)
        task = asyncio.create_task(self._poll(channel, handler), name=f"queue-poll:{channel}")
        self._pollers[channel].append(task)
        logger.debug(f"Subscribed to '{channel}' (poll every {self.poll_interval}s)")

    async def drain(self, channel: str) -> List[BaseMessage]:
        return self._take_all(channel)

    def backlog_size(self, channel: str) -> int:
        with self._lock:
            return len(self._backlog.get(channel, ()))

    def _take_all(self, channel: str) -> List[BaseMessage]:
        with self._lock:
            queued = self._backlog.get(channel)
            if not queued:
                return []
            messages = list(queued)
            queued.clear()
            return messages

    async def _poll(self, channel: str, handler: MessageHandler) -> None:
        while not self._closed:
            for message in self._take_all(channel):
                await self._deliver(channel, handler, message)
            await asyncio.sleep(self.poll_interval)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        current = asyncio.current_task()
        tasks = [t for ts in self._pollers.values() for t in ts if t is not current]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        with self._lock:
            dropped = sum(len(q) for q in self._backlog.values())
            self._backlog.clear()
        self._pollers.clear()
        if dropped:
            logger.warning(f"Queue closed with {dropped} undelivered message(s) dropped")
