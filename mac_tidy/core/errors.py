"""Exceptions raised by mac-tidy."""
from typing import Optional, Sequence


class MacTidyError(Exception):
    """Base class for mac-tidy errors."""


class ExecError(MacTidyError):
    """An external program could not be run or exited non-zero."""

    def __init__(self, args: Sequence[str], returncode: Optional[int] = None, output: str = "", reason: str = ""):
        self.cmd = list(args)
        self.returncode = returncode
        self.output = output
        self.reason = reason
        super().__init__(self._describe())

    def _describe(self) -> str:
        cmd = " ".join(self.cmd)
        if self.reason:
            return f"{cmd}: {self.reason}"
        if self.returncode is not None:
            return f"{cmd}: exit code {self.returncode}"
        return f"{cmd}: failed"


class PrivilegeError(MacTidyError):
    """Elevated privileges could not be obtained."""
