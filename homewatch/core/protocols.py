"""Protocol definitions for outbound collaborators."""

from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence


PersistCallback = Callable[[Sequence[int]], None]


class MessageSender(Protocol):
    """Minimal contract for anything that can deliver text to a chat.

    ``aiogram.Bot`` satisfies it directly.
    """

    async def send_message(self, chat_id: int, text: str, **kwargs: Any) -> Any:
        """Deliver ``text`` to ``chat_id``; raise on failure."""
        ...
