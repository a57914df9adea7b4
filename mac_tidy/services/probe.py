"""Tool availability checks used by task guards and backend selection."""
import os
import shutil
from typing import Mapping, Optional


class ToolProbe:
    """Answers "can X be invoked here?". Never raises, never caches."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None, path: Optional[str] = None):
        self.environ = os.environ if environ is None else environ
        self.path = path

    def available(self, tool: str) -> bool:
        try:
            return shutil.which(tool, path=self.path) is not None
        except (OSError, ValueError):
            return False

    def env_set(self, name: str) -> bool:
        """True if the variable is present and non-empty."""
        return bool(self.environ.get(name, "").strip())

    def env(self, name: str) -> str:
        return self.environ.get(name, "")
