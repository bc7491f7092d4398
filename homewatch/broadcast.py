"""Fan-out of notifications to every subscribed chat."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .core import MessageSender, SubscriptionRegistry

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DeliveryResult:
    chat_id: int
    delivered: bool
    error: Optional[str] = None


class Broadcaster:
    """Sends one message independently to every subscriber.

    Each send is attempted once. A failure (blocked bot, deleted chat, network
    error) is logged and reported in the per-chat result; it never stops the
    remaining sends and never reaches the caller as an exception.
    """

    def __init__(self, registry: SubscriptionRegistry, sender: MessageSender) -> None:
        self._registry = registry
        self._sender = sender
        self._pending: set[asyncio.Task[list[DeliveryResult]]] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def broadcast(self, text: str) -> list[DeliveryResult]:
        chat_ids = self._registry.subscribers()
        if not chat_ids:
            LOGGER.debug("No subscribers; dropping broadcast")
            return []

        results = await asyncio.gather(
            *(self._send_one(chat_id, text) for chat_id in chat_ids)
        )
        failed = sum(1 for result in results if not result.delivered)
        if failed:
            LOGGER.warning(
                "Broadcast delivered to %d/%d chat(s)",
                len(results) - failed,
                len(results),
            )
        return list(results)

    def dispatch(self, text: str) -> asyncio.Task[list[DeliveryResult]]:
        """Schedule a broadcast without waiting for the sends to finish."""

        task = asyncio.create_task(self.broadcast(text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every dispatched broadcast to finish."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def _send_one(self, chat_id: int, text: str) -> DeliveryResult:
        try:
            await self._sender.send_message(chat_id=chat_id, text=text)
        except Exception as exc:
            LOGGER.warning("Failed to deliver message to chat %s: %s", chat_id, exc)
            return DeliveryResult(chat_id=chat_id, delivered=False, error=str(exc))
        return DeliveryResult(chat_id=chat_id, delivered=True)
