"""Relays chat commands to the actuators and replies to the issuing chat."""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .adapters import ActuatorError
from .core import MessageSender, relay_reply
from .core.messages import POWER_OVERRIDE_FAILED_TEXT

LOGGER = logging.getLogger(__name__)


class ActuatorBackend(Protocol):
    async def switch_ac(self, on: bool) -> str:
        ...

    async def set_power_source(self, source: str) -> None:
        ...


class CommandRelay:
    """Turns relay commands into actuator calls.

    Replies only ever go to the chat that issued the command.
    """

    def __init__(self, actuators: ActuatorBackend, sender: MessageSender) -> None:
        self._actuators = actuators
        self._sender = sender

    async def switch_ac(self, chat_id: int, on: bool) -> Optional[str]:
        """Toggle the AC and report the actuator's outcome.

        A failed call produces no reply at all; the actuator's own status
        callbacks already tell subscribers what state the AC is in.

        Returns:
            The reply text sent, or None if nothing was sent.
        """

        try:
            status: Optional[str] = await self._actuators.switch_ac(on)
        except ActuatorError as exc:
            LOGGER.warning("AC %s relay failed: %s", "on" if on else "off", exc)
            status = None

        reply = relay_reply(status)
        if reply is not None:
            await self._reply(chat_id, reply)
        return reply

    async def set_power_source(self, chat_id: int, source: str) -> Optional[str]:
        """Override the recorded power source; only failures are reported."""

        try:
            await self._actuators.set_power_source(source)
        except (ActuatorError, ValueError) as exc:
            LOGGER.warning("Power override to %s failed: %s", source, exc)
            await self._reply(chat_id, POWER_OVERRIDE_FAILED_TEXT)
            return POWER_OVERRIDE_FAILED_TEXT

        LOGGER.info("Power source override set to %s", source)
        return None

    async def _reply(self, chat_id: int, text: str) -> None:
        try:
            await self._sender.send_message(chat_id=chat_id, text=text)
        except Exception as exc:
            LOGGER.warning("Failed to reply to chat %s: %s", chat_id, exc)
