"""Adapter modules for external integrations."""

from .actuator import POWER_SOURCES, ActuatorClient, ActuatorError

__all__ = [
    "ActuatorClient",
    "ActuatorError",
    "POWER_SOURCES",
]
