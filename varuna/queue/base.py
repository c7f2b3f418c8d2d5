"""
Message queue contract shared by every backend.

publish() never waits on subscribers. subscribe() delivers each message to at
most one of a channel's handlers, in arrival order, at some point after
publish; callers must not assume synchronous delivery.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List, Optional, Union

from varuna.schemas import BaseMessage, utcnow

logger = logging.getLogger(__name__)

MessageHandler = Callable[[BaseMessage], Optional[Awaitable[None]]]


class QueueError(Exception):
    """Base class for message queue failures."""


class QueueTransportError(QueueError):
    """The transport could not carry the operation (broker down, socket error)."""


class QueueClosedError(QueueTransportError):
    """Operation attempted on a closed queue."""


class MessageQueue(ABC):
    """Channel-addressed, at-least-once pub/sub."""

    _closed: bool = False

    async def initialize(self) -> None:
        """Open transport resources. No-op for in-process backends."""

    @abstractmethod
    async def publish(self, channel: str, message: BaseMessage) -> BaseMessage:
        """Stamp ``emitted_at`` and enqueue. Returns the stamped message."""

    @abstractmethod
    async def subscribe(self, channel: str, handler: MessageHandler) -> None:
        """Register ``handler`` for messages on ``channel``."""

    @abstractmethod
    async def drain(self, channel: str) -> List[BaseMessage]:
        """Remove and return everything queued on ``channel`` without delivering it."""

    @abstractmethod
    async def close(self) -> None:
        """Release all resources. Idempotent; undelivered messages are dropped."""

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self, channel: str) -> None:
        if self._closed:
            raise QueueClosedError(f"Queue is closed (channel '{channel}')")

    @staticmethod
    def _stamp(message: BaseMessage) -> BaseMessage:
        return message.model_copy(update={"emitted_at": utcnow()})

    @staticmethod
    async def _deliver(channel: str, handler: MessageHandler, message: BaseMessage) -> None:
        """Invoke one handler; its failure must not leak into the subscription loop."""
        try:
            result: Union[None, Awaitable[None]] = handler(message)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(
                f"Handler on '{channel}' failed for {getattr(message, 'kind', '?')} "
                f"[{message.correlation_id}]: {e}",
                exc_info=True,
            )
