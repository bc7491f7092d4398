"""Constants used across the homewatch package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "homewatch"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_DATA_DIR = Path.home() / f".{APP_NAME}"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / DEFAULT_CONFIG_FILENAME
DEFAULT_STORAGE_PATH = DEFAULT_DATA_DIR / "storage.json"
DEFAULT_LOG_PATH = DEFAULT_DATA_DIR / "logs" / f"{APP_NAME}.log"

DEFAULT_LOCAL_HOST = "127.0.0.1"
DEFAULT_LOCAL_PORT = 8080

DEFAULT_WEBHOOK_LISTEN_HOST = "0.0.0.0"
DEFAULT_WEBHOOK_PORT = 8443
WEBHOOK_PATH_PREFIX = "/telegraf/"
HEALTH_PATH = "/health"

DEFAULT_ACTUATOR_TIMEOUT_SECONDS = 10.0
