"""User-facing message tables.

Device status codes and actuator outcomes are looked up in plain read-only
mappings. A code that is not in its table means "nothing to say".
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

AC_DOMAIN = "ac"
POWER_DOMAIN = "power"

AC_ON_TEXT = "❄️ Кондиціонер увімкнено"
AC_OFF_TEXT = "💤 Кондиціонер вимкнено"
AC_REQUESTED_TEXT = "⏳ Запуск кондиціонера заплановано"

AC_STATUS_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        "off": AC_OFF_TEXT,
        "on": AC_ON_TEXT,
        "requested": AC_REQUESTED_TEXT,
    }
)

POWER_STATUS_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        "off": "🔴 Живлення відсутнє",
        "backup": "🟡 Живлення резервне",
        "on": "🟢 Живлення державне",
    }
)

STATUS_MESSAGES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        AC_DOMAIN: AC_STATUS_MESSAGES,
        POWER_DOMAIN: POWER_STATUS_MESSAGES,
    }
)

# Device names used in log lines.
DOMAIN_LABELS: Mapping[str, str] = MappingProxyType(
    {
        AC_DOMAIN: "AC",
        POWER_DOMAIN: "Power",
    }
)

# Replies to the chat that issued an AC toggle command.
AC_RELAY_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        "already": "ℹ️ Кондиціонер вже є у вибраному стані",
        "fail": "❌ Не вдалось змінити стан кондиціонера",
        "on": AC_ON_TEXT,
        "off": AC_OFF_TEXT,
        "requested": AC_REQUESTED_TEXT,
    }
)
AC_RELAY_UNKNOWN_TEXT = "❌ Невідома відповідь кондиціонера"

POWER_OVERRIDE_FAILED_TEXT = "❌ Не вдалось записати новий статус мережі живлення"


def translate(domain: str, status: object) -> Optional[str]:
    """Return the broadcast text for a device status, or None to stay quiet."""

    mapping = STATUS_MESSAGES.get(domain)
    if mapping is None or not isinstance(status, str):
        return None
    return mapping.get(status)


def relay_reply(status: Optional[str]) -> Optional[str]:
    """Map an AC actuator outcome to the reply for the issuing chat.

    ``None`` means the actuator call itself failed; that stays silent. A code
    outside the table gets the generic failure text.
    """

    if status is None:
        return None
    return AC_RELAY_MESSAGES.get(status, AC_RELAY_UNKNOWN_TEXT)
