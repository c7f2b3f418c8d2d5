"""
Message queue package.

One queue instance is built per process by ``create_message_queue`` and passed
to every agent that publishes or subscribes.
"""

import logging
from typing import Optional

from varuna.config import QueueBackend, Settings, get_settings
from varuna.queue import channels
from varuna.queue.base import (
    MessageHandler, MessageQueue, QueueError, QueueTransportError, QueueClosedError,
)
from varuna.queue.memory import InMemoryMessageQueue
from varuna.queue.redis_backend import RedisMessageQueue

logger = logging.getLogger(__name__)


def create_message_queue(settings: Optional[Settings] = None) -> MessageQueue:
    """Build the backend selected by ``settings.queue_backend``."""
    settings = settings or get_settings()
    if settings.queue_backend == QueueBackend.REDIS:
        logger.info("Message queue backend: redis")
        return RedisMessageQueue(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password,
            url=settings.redis_url,
        )
    logger.info("Message queue backend: memory")
    return InMemoryMessageQueue(poll_interval=settings.queue_poll_interval_seconds)


__all__ = [
    "channels",
    "MessageHandler", "MessageQueue",
    "QueueError", "QueueTransportError", "QueueClosedError",
    "InMemoryMessageQueue", "RedisMessageQueue",
    "create_message_queue",
]
