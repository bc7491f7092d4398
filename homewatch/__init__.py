"""Telegram relay for air-conditioner and mains power status."""

__version__ = "0.1.0"
