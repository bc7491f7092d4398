"""Local HTTP listener for device status callbacks."""

from __future__ import annotations

import contextlib
import json
import logging
from typing import Iterable, Optional

from aiohttp import web

from .broadcast import Broadcaster
from .core.messages import DOMAIN_LABELS, STATUS_MESSAGES, translate

LOGGER = logging.getLogger(__name__)

ACCEPTED_STATUS = 201


def make_status_handler(domain: str, broadcaster: Broadcaster):
    """Build the handler for one device domain.

    The handler always answers 201. Unknown or malformed status codes are
    ignored rather than rejected.
    """

    label = DOMAIN_LABELS.get(domain, domain)

    async def handle(request: web.Request) -> web.Response:
        # Parse the raw bytes; a declared charset is not trusted.
        raw = await request.read()
        try:
            body = json.loads(raw) if raw else None
        except ValueError:
            body = None

        LOGGER.info("%s update %s", label, body)

        status = body.get("status") if isinstance(body, dict) else None
        message = translate(domain, status)
        if message is not None:
            broadcaster.dispatch(message)

        return web.Response(status=ACCEPTED_STATUS)

    return handle


def build_event_app(
    broadcaster: Broadcaster,
    domains: Iterable[str] = tuple(STATUS_MESSAGES),
) -> web.Application:
    app = web.Application()
    for domain in domains:
        app.router.add_post(f"/{domain}", make_status_handler(domain, broadcaster))
    return app


class EventServer:
    """Serves ``POST /ac`` and ``POST /power`` on the local network."""

    def __init__(self, broadcaster: Broadcaster, host: str, port: int) -> None:
        self._broadcaster = broadcaster
        self._host = host
        self._port = port
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

    async def start(self) -> None:
        app = build_event_app(self._broadcaster)

        self._runner = web.AppRunner(app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._host, self._port)
        await self._site.start()
        LOGGER.info("Local server ready on http://%s:%s", self._host, self._port)

    async def stop(self) -> None:
        with contextlib.suppress(Exception):
            if self._site is not None:
                await self._site.stop()
        if self._runner is not None:
            await self._runner.cleanup()
        self._site = None
        self._runner = None
