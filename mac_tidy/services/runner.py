#!/usr/bin/env python3
"""Run the cleanup registry in order, isolating each task's failure."""
import enum
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.rule import Rule

from ..core.tasks import CleanupTask

console = Console()
log = logging.getLogger(__name__)


class Outcome(enum.Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class TaskResult:
    name: str
    outcome: Outcome
    error: Optional[BaseException] = None


@dataclass
class RunReport:
    results: List[TaskResult] = field(default_factory=list)

    def _names(self, *outcomes):
        return [r.name for r in self.results if r.outcome in outcomes]

    @property
    def attempted(self) -> List[str]:
        return self._names(Outcome.SUCCEEDED, Outcome.FAILED)

    @property
    def skipped(self) -> List[str]:
        return self._names(Outcome.SKIPPED)

    @property
    def failed(self) -> List[str]:
        return self._names(Outcome.FAILED)


class CleanupRunner:
    """Evaluates every task descriptor exactly once, in registration order."""

    def __init__(self, tasks: Sequence[CleanupTask]):
        self.tasks = tuple(tasks)

    def run_task(self, task: CleanupTask) -> TaskResult:
        if not task.guard():
            console.print(f"  [dim]– {escape(task.description)}: skipped ({escape(task.guard_desc)} not met)[/]")
            return TaskResult(task.name, Outcome.SKIPPED)
        console.print(f"  [cyan]→[/] {escape(task.description)}...")
        try:
            task.action()
        except Exception as e:
            if task.suppress_errors:
                log.debug("task %s failed (suppressed): %s", task.name, e)
            else:
                console.print(f"  [red]Error in {escape(task.name)}: {escape(str(e))}[/]")
            return TaskResult(task.name, Outcome.FAILED, e)
        return TaskResult(task.name, Outcome.SUCCEEDED)

    def run(self) -> RunReport:
        report = RunReport()
        console.print(Rule("[bold cyan]Cleaning[/]", style="cyan"))
        for task in self.tasks:
            report.results.append(self.run_task(task))
        log.debug(
            "run finished: %d attempted, %d skipped, %d failed",
            len(report.attempted), len(report.skipped), len(report.failed),
        )
        return report
