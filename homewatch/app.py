"""Main application entry-point for homewatch."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from aiogram import Bot, Dispatcher

from .adapters import ActuatorClient
from .broadcast import Broadcaster
from .commands import CommandHandlers, WhitelistMiddleware
from .config import HomewatchConfig, load_config
from .core import JsonSubscriptionStore, MessageSender, SubscriptionRegistry
from .events import EventServer
from .logging import configure_logging
from .relay import ActuatorBackend, CommandRelay
from .webhook import WebhookServer

LOGGER = logging.getLogger(__name__)


class HomewatchApp:
    """Coordinates application startup and shutdown.

    Wires the subscription registry, the broadcaster, the command relay and
    the two HTTP servers:
    - the local listener receiving device status callbacks
    - the TLS webhook receiving Telegram commands

    The bot, message sender and actuator backend can be injected for testing.
    """

    def __init__(
        self,
        config: Optional[HomewatchConfig] = None,
        *,
        bot: Optional[Bot] = None,
        sender: Optional[MessageSender] = None,
        actuators: Optional[ActuatorBackend] = None,
    ) -> None:
        self._config = config or load_config()
        self._bot = bot
        self._sender = sender
        self._actuators = actuators
        self._owns_actuators = actuators is None

        store = JsonSubscriptionStore(self._config.storage.path)
        self.registry = SubscriptionRegistry(store.load(), persist=store.save)

        self.dispatcher = Dispatcher()
        self.broadcaster: Optional[Broadcaster] = None
        self._event_server: Optional[EventServer] = None
        self._webhook_server: Optional[WebhookServer] = None
        self._shutdown_event: Optional[asyncio.Event] = None

    def wire(self) -> tuple[Bot, Broadcaster]:
        """Build the bot routing once and return the bot and the broadcaster."""

        if self._bot is not None and self.broadcaster is not None:
            return self._bot, self.broadcaster

        if self._bot is None:
            self._config.require_webhook()
            self._bot = Bot(token=self._config.telegram.bot_token)
        sender: MessageSender = self._sender or self._bot

        if self._actuators is None:
            self._actuators = ActuatorClient(self._config.actuators)

        self.broadcaster = Broadcaster(self.registry, sender)
        relay = CommandRelay(self._actuators, sender)
        handlers = CommandHandlers(self.registry, relay)

        self.dispatcher.message.outer_middleware(
            WhitelistMiddleware(self._config.telegram.username_whitelist)
        )
        self.dispatcher.include_router(handlers.build_router())
        return self._bot, self.broadcaster

    async def run(self) -> None:
        self._shutdown_event = asyncio.Event()

        LOGGER.info("homewatch starting with config: %s", self._config.path)
        try:
            await self._start_services()
            await self._shutdown_event.wait()
        except asyncio.CancelledError:
            LOGGER.info("homewatch received shutdown signal")
            raise
        finally:
            await self._stop_services()

    @classmethod
    def start(cls, config: Optional[HomewatchConfig] = None) -> None:
        config = config or load_config()
        configure_logging(
            config.logging.level,
            log_path=config.logging.path,
            log_network=config.logging.log_network,
        )
        config.require_webhook()
        instance = cls(config=config)
        try:
            asyncio.run(instance.run())
        except KeyboardInterrupt:
            LOGGER.info("homewatch received shutdown signal")

    async def _start_services(self) -> None:
        bot, broadcaster = self.wire()

        self._event_server = EventServer(
            broadcaster, self._config.local.host, self._config.local.port
        )
        await self._event_server.start()

        self._webhook_server = WebhookServer(
            bot, self.dispatcher, self._config.telegram
        )
        await self._webhook_server.start()

    async def _stop_services(self) -> None:
        if self._event_server is not None:
            await self._event_server.stop()
            self._event_server = None

        if self.broadcaster is not None:
            await self.broadcaster.drain()

        if self._webhook_server is not None:
            await self._webhook_server.stop()
            self._webhook_server = None

        if self._owns_actuators and isinstance(self._actuators, ActuatorClient):
            await self._actuators.aclose()

        if self._bot is not None:
            await self._bot.session.close()

        LOGGER.info("homewatch stopped")
