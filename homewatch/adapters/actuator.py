"""HTTP client for the air-conditioner and power-source actuators."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

import aiohttp

from ..config import ActuatorConfig

LOGGER = logging.getLogger(__name__)

POWER_SOURCES = ("main", "backup")


class ActuatorError(RuntimeError):
    """Raised when an actuator call does not produce a usable response."""


class ActuatorClient:
    """Non-blocking client for the actuator endpoints."""

    def __init__(
        self,
        config: ActuatorConfig,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def switch_ac(self, on: bool) -> str:
        """Ask the AC actuator to switch on or off.

        Returns:
            The ``status`` code from the actuator response.

        Raises:
            ActuatorError: If the call fails or the response has no status.
        """

        url = self.config.ac_on_url if on else self.config.ac_off_url
        if not url:
            raise ActuatorError(f"AC {'on' if on else 'off'} URL is not configured")

        payload = await self._post(url, None)
        status = payload.get("status")
        if not isinstance(status, str):
            raise ActuatorError(f"Actuator response has no status: {payload!r}")
        return status

    async def set_power_source(self, source: str) -> None:
        """Record the desired power source with the override endpoint.

        Raises:
            ValueError: If ``source`` is not a known power source.
            ActuatorError: If the call fails.
        """

        if source not in POWER_SOURCES:
            raise ValueError(f"Unknown power source: {source}")

        url = self.config.power_override_url
        if not url:
            raise ActuatorError("Power override URL is not configured")

        await self._post(url, {"power": source}, expect_body=False)

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def _post(
        self,
        url: str,
        payload: Optional[Mapping[str, Any]],
        *,
        expect_body: bool = True,
    ) -> dict[str, Any]:
        session = await self._ensure_session()
        timeout = self.config.timeout_seconds

        try:
            async with asyncio.timeout(timeout):
                async with session.post(url, json=payload) as response:
                    response.raise_for_status()
                    if not expect_body:
                        return {}
                    body = await response.json(content_type=None)
        except asyncio.TimeoutError as exc:
            LOGGER.warning("Actuator call timed out after %.1fs (url=%s)", timeout, url)
            raise ActuatorError(f"Timed out after {timeout:.1f}s") from exc
        except aiohttp.ClientError as exc:
            LOGGER.warning("Actuator call failed (url=%s): %s", url, exc)
            raise ActuatorError(str(exc)) from exc
        except ValueError as exc:
            LOGGER.warning("Actuator returned malformed JSON (url=%s): %s", url, exc)
            raise ActuatorError("Malformed response body") from exc

        if not isinstance(body, dict):
            raise ActuatorError(f"Unexpected response body: {body!r}")
        return body
