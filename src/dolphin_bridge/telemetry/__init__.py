"""Operational logging for the bridge."""

from .logging import configure_logging

__all__ = ["configure_logging"]
