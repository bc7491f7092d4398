"""TLS webhook server for the Telegram bot."""

from __future__ import annotations

import contextlib
import hashlib
import logging
import ssl
from typing import Optional

from aiogram import Bot, Dispatcher
from aiogram.types import FSInputFile
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application
from aiohttp import web

from . import constants
from .config import TelegramConfig

LOGGER = logging.getLogger(__name__)


def webhook_path(bot_token: str) -> str:
    """Secret URL path the webhook is served on, derived from the bot token."""

    digest = hashlib.sha3_256(bot_token.encode("utf-8")).hexdigest()
    return constants.WEBHOOK_PATH_PREFIX + digest


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


def build_webhook_app(bot: Bot, dispatcher: Dispatcher, path: str) -> web.Application:
    app = web.Application()
    app.router.add_get(constants.HEALTH_PATH, handle_health)
    SimpleRequestHandler(dispatcher=dispatcher, bot=bot).register(app, path=path)
    setup_application(app, dispatcher, bot=bot)
    return app


class WebhookServer:
    """Serves the bot webhook and ``/health`` over HTTPS."""

    def __init__(self, bot: Bot, dispatcher: Dispatcher, config: TelegramConfig) -> None:
        if not config.bot_token or not config.ssl_cert or not config.ssl_key:
            raise ValueError("Webhook server needs a bot token and TLS material")
        self._bot = bot
        self._dispatcher = dispatcher
        self._config = config
        self._path = webhook_path(config.bot_token)
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

    @property
    def url(self) -> str:
        return f"https://{self._config.webhook_host}:{self._config.webhook_port}{self._path}"

    async def start(self) -> None:
        app = build_webhook_app(self._bot, self._dispatcher, self._path)

        ssl_context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
        ssl_context.load_cert_chain(str(self._config.ssl_cert), str(self._config.ssl_key))

        self._runner = web.AppRunner(app)
        await self._runner.setup()
        self._site = web.TCPSite(
            self._runner,
            self._config.listen_host,
            self._config.webhook_port,
            ssl_context=ssl_context,
        )
        await self._site.start()
        LOGGER.info("Bot server ready on port %s", self._config.webhook_port)

        # Telegram needs the self-signed certificate to trust the endpoint.
        await self._bot.set_webhook(
            self.url, certificate=FSInputFile(str(self._config.ssl_cert))
        )
        LOGGER.info(
            "Bot set webhook https://%s:%s%s***",
            self._config.webhook_host,
            self._config.webhook_port,
            constants.WEBHOOK_PATH_PREFIX,
        )

    async def stop(self) -> None:
        with contextlib.suppress(Exception):
            if self._site is not None:
                await self._site.stop()
        if self._runner is not None:
            await self._runner.cleanup()
        self._site = None
        self._runner = None
