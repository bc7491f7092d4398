"""Subscription registry for broadcast recipients.

The registry is the only mutable state the service owns. It keeps the chat ids
that asked to receive device notifications, in subscription order, and hands
every change to an injected persist callback. Persistence is best-effort: a
failed write is logged and the in-memory change stands.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .protocols import PersistCallback

LOGGER = logging.getLogger(__name__)

STORAGE_KEY = "subscribedChats"


class SubscriptionRegistry:
    """Ordered set of chat ids subscribed to broadcasts.

    Usage:
        store = JsonSubscriptionStore(Path("storage.json"))
        registry = SubscriptionRegistry(store.load(), persist=store.save)

        registry.subscribe(42)     # True, persisted
        registry.subscribe(42)     # False, nothing written
        registry.subscribers()     # (42,)
    """

    def __init__(
        self,
        chat_ids: Iterable[int] = (),
        *,
        persist: Optional[PersistCallback] = None,
    ) -> None:
        self._chat_ids: List[int] = []
        for chat_id in chat_ids:
            if chat_id not in self._chat_ids:
                self._chat_ids.append(chat_id)
        self._persist = persist

    def subscribe(self, chat_id: int) -> bool:
        """Add ``chat_id`` if absent.

        Returns:
            True when the registry changed (and a persist was attempted).
        """
        if chat_id in self._chat_ids:
            return False

        self._chat_ids.append(chat_id)
        LOGGER.info("Subscribed chat %s", chat_id)
        self._save()
        return True

    def unsubscribe(self, chat_id: int) -> bool:
        """Remove ``chat_id`` if present.

        Returns:
            True when the registry changed (and a persist was attempted).
        """
        if chat_id not in self._chat_ids:
            return False

        self._chat_ids.remove(chat_id)
        LOGGER.info("Unsubscribed chat %s", chat_id)
        self._save()
        return True

    def subscribers(self) -> tuple[int, ...]:
        """Return a snapshot of the subscribed chat ids."""
        return tuple(self._chat_ids)

    def __contains__(self, chat_id: object) -> bool:
        return chat_id in self._chat_ids

    def __len__(self) -> int:
        return len(self._chat_ids)

    def _save(self) -> bool:
        if self._persist is None:
            return False
        try:
            self._persist(tuple(self._chat_ids))
        except Exception:
            LOGGER.exception("Failed to save storage")
            return False
        return True


class JsonSubscriptionStore:
    """Durable JSON file holding the subscriber sequence.

    The file layout is ``{"subscribedChats": [<id>, ...]}``. Every save rewrites
    the whole file through a temporary sibling and ``os.replace``.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> list[int]:
        if not self.path.exists():
            LOGGER.info("No storage at %s; starting with no subscribers", self.path)
            return []

        try:
            with self.path.open("r", encoding="utf-8") as stream:
                payload = json.load(stream)
        except (OSError, ValueError) as exc:
            LOGGER.warning("Ignoring unreadable storage %s: %s", self.path, exc)
            return []

        chat_ids = _parse_chat_ids(payload)
        if chat_ids is None:
            LOGGER.warning("Ignoring malformed storage %s", self.path)
            return []

        LOGGER.info("Loaded %d subscriber(s) from %s", len(chat_ids), self.path)
        return chat_ids

    def save(self, chat_ids: Sequence[int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {STORAGE_KEY: list(chat_ids)}

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as stream:
                json.dump(payload, stream)
            os.replace(tmp_name, self.path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise

        LOGGER.info("Storage saved")


def _parse_chat_ids(payload: object) -> Optional[list[int]]:
    if not isinstance(payload, dict):
        return None
    raw_ids = payload.get(STORAGE_KEY)
    if not isinstance(raw_ids, list):
        return None

    chat_ids: list[int] = []
    for value in raw_ids:
        # bool is an int subclass but never a chat id
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        if value not in chat_ids:
            chat_ids.append(value)
    return chat_ids

