"""Configuration loader for homewatch."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from . import constants


class ConfigurationError(RuntimeError):
    """Raised when the configuration cannot support the requested operation."""


@dataclass(slots=True)
class TelegramConfig:
    bot_token: Optional[str] = None
    webhook_host: Optional[str] = None
    webhook_port: int = constants.DEFAULT_WEBHOOK_PORT
    listen_host: str = constants.DEFAULT_WEBHOOK_LISTEN_HOST
    ssl_cert: Optional[Path] = None
    ssl_key: Optional[Path] = None
    username_whitelist: List[str] = field(default_factory=list)


@dataclass(slots=True)
class LocalServerConfig:
    host: str = constants.DEFAULT_LOCAL_HOST
    port: int = constants.DEFAULT_LOCAL_PORT


@dataclass(slots=True)
class ActuatorConfig:
    ac_on_url: Optional[str] = None
    ac_off_url: Optional[str] = None
    power_override_url: Optional[str] = None
    timeout_seconds: float = constants.DEFAULT_ACTUATOR_TIMEOUT_SECONDS


@dataclass(slots=True)
class StorageConfig:
    path: Path = constants.DEFAULT_STORAGE_PATH


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = constants.DEFAULT_LOG_PATH
    log_network: bool = False


@dataclass(slots=True)
class HomewatchConfig:
    telegram: TelegramConfig
    local: LocalServerConfig
    actuators: ActuatorConfig
    storage: StorageConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path

    def require_webhook(self) -> None:
        """Ensure everything needed to serve the Telegram webhook is present."""

        telegram = self.telegram
        missing = [
            name
            for name, value in (
                ("bot_token", telegram.bot_token),
                ("webhook_host", telegram.webhook_host),
                ("ssl_cert", telegram.ssl_cert),
                ("ssl_key", telegram.ssl_key),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"[telegram] is missing required option(s): {', '.join(missing)}"
            )


def _parse_list(value: str, *, default: Iterable[str]) -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _optional_path(value: Optional[str]) -> Optional[Path]:
    value = _optional(value)
    if value is None:
        return None
    return Path(value).expanduser()


def load_config(path: Optional[Path] = None) -> HomewatchConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "telegram": {
                "webhook_port": str(constants.DEFAULT_WEBHOOK_PORT),
                "listen_host": constants.DEFAULT_WEBHOOK_LISTEN_HOST,
                "username_whitelist": "",
            },
            "local": {
                "host": constants.DEFAULT_LOCAL_HOST,
                "port": str(constants.DEFAULT_LOCAL_PORT),
            },
            "actuators": {
                "timeout_seconds": str(constants.DEFAULT_ACTUATOR_TIMEOUT_SECONDS),
            },
            "storage": {
                "path": str(constants.DEFAULT_STORAGE_PATH),
            },
            "logging": {
                "level": "INFO",
                "path": str(constants.DEFAULT_LOG_PATH),
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path, encoding="utf-8")

    # Usernames are matched without the leading "@" Telegram shows in clients.
    whitelist = [
        name.lstrip("@")
        for name in _parse_list(
            parser.get("telegram", "username_whitelist", fallback=""), default=[]
        )
    ]

    telegram = TelegramConfig(
        bot_token=_optional(parser.get("telegram", "bot_token", fallback=None)),
        webhook_host=_optional(parser.get("telegram", "webhook_host", fallback=None)),
        webhook_port=parser.getint(
            "telegram", "webhook_port", fallback=constants.DEFAULT_WEBHOOK_PORT
        ),
        listen_host=parser.get(
            "telegram", "listen_host", fallback=constants.DEFAULT_WEBHOOK_LISTEN_HOST
        ),
        ssl_cert=_optional_path(parser.get("telegram", "ssl_cert", fallback=None)),
        ssl_key=_optional_path(parser.get("telegram", "ssl_key", fallback=None)),
        username_whitelist=whitelist,
    )

    local = LocalServerConfig(
        host=parser.get("local", "host", fallback=constants.DEFAULT_LOCAL_HOST),
        port=parser.getint("local", "port", fallback=constants.DEFAULT_LOCAL_PORT),
    )

    default_timeout = constants.DEFAULT_ACTUATOR_TIMEOUT_SECONDS
    try:
        timeout_value = parser.getfloat(
            "actuators", "timeout_seconds", fallback=default_timeout
        )
    except ValueError:
        timeout_value = default_timeout

    actuators = ActuatorConfig(
        ac_on_url=_optional(parser.get("actuators", "ac_on_url", fallback=None)),
        ac_off_url=_optional(parser.get("actuators", "ac_off_url", fallback=None)),
        power_override_url=_optional(
            parser.get("actuators", "power_override_url", fallback=None)
        ),
        timeout_seconds=max(0.1, timeout_value),
    )

    storage = StorageConfig(
        path=Path(
            parser.get("storage", "path", fallback=str(constants.DEFAULT_STORAGE_PATH))
        ).expanduser(),
    )

    logging_path = _optional(parser.get("logging", "path", fallback=None))
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(logging_path).expanduser() if logging_path else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    return HomewatchConfig(
        telegram=telegram,
        local=local,
        actuators=actuators,
        storage=storage,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )
