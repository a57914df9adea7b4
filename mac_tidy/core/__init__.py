"""Core constants, task registry, errors and config for mac-tidy."""

from .constants import HOME, ZOPFLI_MAX_BYTES, ARCHIVE_EXCLUDES, HEARTBEAT_INTERVAL
from .errors import MacTidyError, ExecError, PrivilegeError
from .tasks import CleanupTask, build_registry, select_tasks
from . import config

__all__ = [
    "HOME",
    "ZOPFLI_MAX_BYTES",
    "ARCHIVE_EXCLUDES",
    "HEARTBEAT_INTERVAL",
    "MacTidyError",
    "ExecError",
    "PrivilegeError",
    "CleanupTask",
    "build_registry",
    "select_tasks",
    "config",
]
