"""
Networked queue backend on Redis pub/sub.

Messages travel as camelCase JSON. One listener task per channel pushes
decoded messages to that channel's handlers; with several handlers on a
channel they take turns, so each message still reaches exactly one of them.
A listener that loses its connection drops its subscription and opens a new
one for the same handlers; until that succeeds, publish() on the channel
raises QueueTransportError. Redis keeps no backlog for pub/sub, so drain()
has nothing to return.
"""

import asyncio
import itertools
import logging
from typing import Any, Dict, Iterator, List, Optional

import redis.asyncio as aioredis
from pydantic import ValidationError
from redis.exceptions import RedisError

from varuna.schemas import BaseMessage, parse_message

from .base import MessageHandler, MessageQueue, QueueTransportError

logger = logging.getLogger(__name__)


class RedisMessageQueue(MessageQueue):
    """Push-based pub/sub over a Redis broker."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: Optional[str] = None,
        url: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        self.host = host
        self.port = port
        self.password = password
        self.url = url
        self._client = client
        self._pubsubs: Dict[str, Any] = {}
        self._listeners: Dict[str, asyncio.Task] = {}
        self._handlers: Dict[str, List[MessageHandler]] = {}
        self._turns: Dict[str, Iterator[MessageHandler]] = {}
        self._lost: Dict[str, str] = {}
        self._closed = False

    @property
    def target(self) -> str:
        return self.url or f"{self.host}:{self.port}"

    async def initialize(self) -> None:
        if self._client is None:
            if self.url:
                self._client = aioredis.from_url(self.url, decode_responses=True)
            else:
                self._client = aioredis.Redis(
                    host=self.host,
                    port=self.port,
                    password=self.password,
                    decode_responses=True,
                )
        try:
            await self._client.ping()
        except (RedisError, OSError) as e:
            raise QueueTransportError(f"Redis unreachable at {self.target}: {e}") from e
        logger.info(f"Connected to Redis at {self.target}")

    def _require_client(self) -> Any:
        if self._client is None:
            raise RuntimeError("RedisMessageQueue.initialize() must be awaited before use")
        return self._client

    async def publish(self, channel: str, message: BaseMessage) -> BaseMessage:
        self._ensure_open(channel)
        client = self._require_client()
        if channel in self._lost:
            raise QueueTransportError(f"Subscription to '{channel}' lost: {self._lost[channel]}")
        stamped = self._stamp(message)
        try:
            await client.publish(channel, stamped.model_dump_json(by_alias=True))
        except (RedisError, OSError) as e:
            raise QueueTransportError(f"Publish to '{channel}' failed: {e}") from e
        return stamped

    async def subscribe(self, channel: str, handler: MessageHandler) -> None:
        self._ensure_open(channel)
        self._require_client()

        handlers = self._handlers.setdefault(channel, [])
        handlers.append(handler)
        self._turns[channel] = itertools.cycle(list(handlers))
        if channel in self._pubsubs:
            return

        try:
            await self._open_listener(channel)
        except QueueTransportError:
            handlers.remove(handler)
            self._turns[channel] = itertools.cycle(list(handlers))
            raise

    async def _open_listener(self, channel: str) -> None:
        pubsub = self._require_client().pubsub(ignore_subscribe_messages=True)
        try:
            await pubsub.subscribe(channel)
        except (RedisError, OSError) as e:
            raise QueueTransportError(f"Subscribe to '{channel}' failed: {e}") from e
        self._pubsubs[channel] = pubsub
        self._lost.pop(channel, None)
        self._listeners[channel] = asyncio.create_task(
            self._listen(channel, pubsub), name=f"queue-listen:{channel}"
        )

    async def _listen(self, channel: str, pubsub: Any) -> None:
        try:
            async for raw in pubsub.listen():
                if raw.get("type") != "message":
                    continue
                try:
                    message = parse_message(raw["data"])
                except ValidationError as e:
                    logger.warning(f"Dropping undecodable message on '{channel}': {e}")
                    continue
                await self._deliver(channel, next(self._turns[channel]), message)
        except (RedisError, OSError) as e:
            logger.error(f"Redis subscription to '{channel}' lost: {e}")
            await self._recover(channel, pubsub, e)

    async def _recover(self, channel: str, pubsub: Any, error: Exception) -> None:
        """Drop a dead subscription and open a fresh one for the same handlers.

        If that fails the channel stays marked lost: publish() raises until a
        later subscribe() manages to reconnect it.
        """
        if self._pubsubs.get(channel) is pubsub:
            del self._pubsubs[channel]
            self._listeners.pop(channel, None)
        try:
            await pubsub.aclose()
        except (RedisError, OSError) as e:
            logger.warning(f"Error closing subscription '{channel}': {e}")

        if self._closed or not self._handlers.get(channel):
            return
        self._lost[channel] = str(error)
        try:
            await self._open_listener(channel)
        except QueueTransportError as e:
            logger.error(f"Could not resubscribe to '{channel}': {e}")
            return
        logger.info(f"Resubscribed to '{channel}'")

    async def drain(self, channel: str) -> List[BaseMessage]:
        return []

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        current = asyncio.current_task()
        listeners = [t for t in self._listeners.values() if t is not current]
        for task in listeners:
            task.cancel()
        await asyncio.gather(*listeners, return_exceptions=True)

        for channel, pubsub in self._pubsubs.items():
            try:
                await pubsub.aclose()
            except (RedisError, OSError) as e:
                logger.warning(f"Error closing subscription '{channel}': {e}")
        if self._client is not None:
            try:
                await self._client.aclose()
            except (RedisError, OSError) as e:
                logger.warning(f"Error closing Redis connection: {e}")

        self._listeners.clear()
        self._pubsubs.clear()
        self._handlers.clear()
        self._turns.clear()
        self._lost.clear()
