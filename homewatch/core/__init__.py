"""Core primitives for homewatch."""

from .messages import (
    AC_DOMAIN,
    POWER_DOMAIN,
    STATUS_MESSAGES,
    relay_reply,
    translate,
)
from .protocols import MessageSender, PersistCallback
from .subscriptions import JsonSubscriptionStore, SubscriptionRegistry

__all__ = [
    "AC_DOMAIN",
    "JsonSubscriptionStore",
    "MessageSender",
    "POWER_DOMAIN",
    "PersistCallback",
    "STATUS_MESSAGES",
    "SubscriptionRegistry",
    "relay_reply",
    "translate",
]
