"""Privilege session: ask for sudo once, keep the grant fresh in the background."""
import enum
import logging
import os
import threading
from typing import Callable, Optional

from ..core.constants import HEARTBEAT_INTERVAL
from ..core.errors import ExecError, PrivilegeError
from .shell import Shell

log = logging.getLogger(__name__)


class SessionState(enum.Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    EXPIRED = "expired"


def _main_thread_alive() -> bool:
    return threading.main_thread().is_alive()


class PrivilegeSession:
    """Process-wide sudo grant. Use PrivilegeSession.instance() outside of tests."""

    _instance = None
    _instance_lock = threading.Lock()

    def __init__(self, shell: Optional[Shell] = None, is_root: Optional[Callable[[], bool]] = None):
        self.shell = shell or Shell()
        self._is_root = is_root or (lambda: os.geteuid() == 0)
        self.state = SessionState.INACTIVE
        self._heartbeat = None
        self._lock = threading.Lock()
        self._owner_gone = threading.Event()

    @classmethod
    def instance(cls) -> "PrivilegeSession":
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    @property
    def active(self) -> bool:
        return self.state is SessionState.ACTIVE

    def acquire(self) -> None:
        """Prompt for credentials once. Raises PrivilegeError if refused."""
        if self.active:
            return
        if self.state is SessionState.EXPIRED:
            raise PrivilegeError("privilege session has expired")
        if not self._is_root():
            try:
                self.shell.run(["sudo", "-v"])
            except ExecError as e:
                raise PrivilegeError(f"could not obtain administrator privileges ({e})") from e
        self.state = SessionState.ACTIVE
        log.debug("privilege session active")

    def keep_alive(self, interval: float = HEARTBEAT_INTERVAL, owner_alive: Optional[Callable[[], bool]] = None) -> threading.Thread:
        """Start the heartbeat thread; it stops on its own once the owner is gone."""
        if not self.active:
            raise PrivilegeError("keep_alive() requires an active session")
        owner_alive = owner_alive or _main_thread_alive
        with self._lock:
            if self._heartbeat is not None and self._heartbeat.is_alive():
                return self._heartbeat
            self._heartbeat = threading.Thread(
                target=self._beat,
                args=(interval, owner_alive),
                name="mac-tidy-sudo-heartbeat",
                daemon=True,
            )
            self._heartbeat.start()
            return self._heartbeat

    def owner_exited(self) -> None:
        """Signal that the owner is gone; wakes the heartbeat immediately."""
        self._owner_gone.set()

    def _beat(self, interval, owner_alive):
        while not self._owner_gone.wait(interval):
            if not owner_alive():
                break
            if self._is_root():
                continue
            try:
                self.shell.run(["sudo", "-n", "true"])
            except ExecError as e:
                log.debug("sudo refresh failed: %s", e)
        self.state = SessionState.EXPIRED
        log.debug("owner gone, heartbeat stopping")
