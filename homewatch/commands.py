"""Telegram command handling."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Collection, Dict, Optional

from aiogram import BaseMiddleware, Router
from aiogram.filters import Command
from aiogram.types import Message, TelegramObject

from .core import SubscriptionRegistry
from .relay import CommandRelay

LOGGER = logging.getLogger(__name__)

# Telegram's command menu only allows [a-z0-9_], so each command also has an
# underscore spelling next to the hyphenated one.
SUBSCRIBE_COMMANDS = ("start", "subscribe")
UNSUBSCRIBE_COMMANDS = ("stop", "unsubscribe")
AC_ON_COMMANDS = ("ac-on", "ac_on", "acon")
AC_OFF_COMMANDS = ("ac-off", "ac_off", "acoff")
POWER_MAIN_COMMANDS = ("pow-main", "pow_main")
POWER_BACKUP_COMMANDS = ("pow-backup", "pow_backup")


def is_whitelisted(username: Optional[str], whitelist: Collection[str]) -> bool:
    """Return True when ``username`` may issue commands."""

    if not username:
        return False
    return username in whitelist


class WhitelistMiddleware(BaseMiddleware):
    """Drops messages from senders outside the username whitelist.

    Dropped messages get no reply and their content is not logged.
    """

    def __init__(self, whitelist: Collection[str]) -> None:
        self._whitelist = frozenset(whitelist)

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        user = getattr(event, "from_user", None)
        username = getattr(user, "username", None)
        if not is_whitelisted(username, self._whitelist):
            LOGGER.debug("Dropped message from non-whitelisted sender")
            return None
        return await handler(event, data)


class CommandHandlers:
    """Implements the bot commands against the registry and the relay."""

    def __init__(self, registry: SubscriptionRegistry, relay: CommandRelay) -> None:
        self._registry = registry
        self._relay = relay

    async def subscribe(self, chat_id: int) -> bool:
        return self._registry.subscribe(chat_id)

    async def unsubscribe(self, chat_id: int) -> bool:
        return self._registry.unsubscribe(chat_id)

    async def ac_on(self, chat_id: int) -> Optional[str]:
        return await self._relay.switch_ac(chat_id, on=True)

    async def ac_off(self, chat_id: int) -> Optional[str]:
        return await self._relay.switch_ac(chat_id, on=False)

    async def power_main(self, chat_id: int) -> Optional[str]:
        return await self._relay.set_power_source(chat_id, "main")

    async def power_backup(self, chat_id: int) -> Optional[str]:
        return await self._relay.set_power_source(chat_id, "backup")

    def build_router(self) -> Router:
        router = Router(name="homewatch-commands")
        for names, action in (
            (SUBSCRIBE_COMMANDS, self.subscribe),
            (UNSUBSCRIBE_COMMANDS, self.unsubscribe),
            (AC_ON_COMMANDS, self.ac_on),
            (AC_OFF_COMMANDS, self.ac_off),
            (POWER_MAIN_COMMANDS, self.power_main),
            (POWER_BACKUP_COMMANDS, self.power_backup),
        ):
            router.message.register(_bind(action), Command(*names))
        return router


def _bind(action: Callable[[int], Awaitable[Any]]):
    async def handler(message: Message) -> None:
        await action(message.chat.id)

    handler.__name__ = f"on_{action.__name__}"
    return handler
