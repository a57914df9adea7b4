"""Helpers for mac-tidy."""

from . import disk
from . import log

__all__ = ["disk", "log"]
