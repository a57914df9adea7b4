#!/usr/bin/env python3
"""Run external programs: the only place mac-tidy touches subprocess."""
import glob
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from ..core.errors import ExecError

console = Console()
log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    args: List[str]
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _is_root() -> bool:
    return os.geteuid() == 0


class Shell:
    """Runs commands with list args (no shell), optionally through sudo."""

    def __init__(self, dry_run: bool = False):
        self.dry_run = dry_run

    def run(
        self,
        args: Sequence[str],
        need_sudo: bool = False,
        check: bool = True,
        timeout: Optional[float] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> CommandResult:
        """Run `args`. Raises ExecError if it cannot start, times out, or (with check) exits non-zero."""
        argv = [str(a) for a in args]
        if need_sudo and not _is_root():
            argv = ["sudo"] + argv
        if self.dry_run:
            console.print(f"  [dim]dry-run: {escape(shlex.join(argv))}[/]")
            return CommandResult(argv, 0)
        log.debug("exec: %s", shlex.join(argv))
        run_env = None
        if env:
            run_env = dict(os.environ)
            run_env.update(env)
        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout,
                env=run_env,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecError(argv, reason=f"timed out after {e.timeout}s") from e
        except (FileNotFoundError, OSError) as e:
            raise ExecError(argv, reason=str(e)) from e
        result = CommandResult(argv, proc.returncode, proc.stdout or "")
        if check and not result.ok:
            raise ExecError(argv, proc.returncode, result.output)
        return result

    def run_steps(self, steps: Iterable[Sequence[str]], need_sudo: bool = False) -> List[CommandResult]:
        """Run every step even if earlier ones fail; raise one ExecError naming the failures."""
        results = []
        failed = []
        for step in steps:
            try:
                results.append(self.run(step, need_sudo=need_sudo))
            except ExecError as e:
                log.debug("step failed: %s", e)
                failed.append(e)
        if failed:
            raise ExecError(
                failed[0].cmd,
                failed[0].returncode,
                "\n".join(e.output for e in failed if e.output),
                reason="; ".join(str(e) for e in failed),
            )
        return results

    def remove(self, patterns: Iterable[str], need_sudo: bool = False) -> Optional[CommandResult]:
        """Expand glob patterns and hand whatever matched to `rm -rf`. No match is a no-op."""
        matches = []
        for pattern in patterns:
            expanded = os.path.expanduser(pattern)
            matches.extend(sorted(glob.glob(expanded, include_hidden=True)))
        if not matches:
            return None
        return self.run(["rm", "-rf", "--"] + matches, need_sudo=need_sudo)
