"""Cleanup task descriptors and the canonical, ordered registry."""
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from .constants import (
    HOME,
    ADOBE_CACHE_PATTERNS,
    IOS_APP_PATTERNS,
    IOS_BACKUP_PATTERNS,
    PYENV_CACHE_ENV,
    SYSTEM_LOG_PATTERNS,
    TRASH_PATTERNS,
    USER_CACHE_PATTERNS,
    USER_LOG_PATTERNS,
    VOLUME_TRASH_PATTERNS,
    XCODE_PATTERNS,
)


def always() -> bool:
    return True


@dataclass(frozen=True)
class CleanupTask:
    """One guarded cleanup step. `action` raises ExecError on failure."""

    name: str
    description: str
    action: Callable[[], object]
    guard: Callable[[], bool] = always
    guard_desc: str = "always"
    suppress_errors: bool = True


def _rebase(patterns, home):
    if home == HOME:
        return list(patterns)
    return [p.replace(HOME, home, 1) if p.startswith(HOME) else p for p in patterns]


def build_registry(shell, probe, home: Optional[str] = None) -> Tuple[CleanupTask, ...]:
    """Return the cleanup tasks in the order they must run.

    Order matters: Homebrew's cache purge assumes its update/upgrade already ran,
    and the memory purge comes last so it sees the final state.
    """
    home = home or HOME

    def paths(patterns):
        return _rebase(patterns, home)

    def empty_trash():
        shell.remove(VOLUME_TRASH_PATTERNS, need_sudo=True)
        shell.remove(paths(TRASH_PATTERNS))

    def clear_logs():
        shell.remove(SYSTEM_LOG_PATTERNS, need_sudo=True)
        shell.remove(paths(USER_LOG_PATTERNS))

    def clear_pyenv_cache():
        shell.run(["rm", "-rf", "--", probe.env(PYENV_CACHE_ENV)])

    return (
        CleanupTask(
            "trash",
            "Emptying the Trash on all mounted volumes and the main disk",
            empty_trash,
        ),
        CleanupTask(
            "logs",
            "Clearing system and application diagnostic logs",
            clear_logs,
        ),
        CleanupTask(
            "adobe_cache",
            "Deleting Adobe media cache files",
            lambda: shell.remove(paths(ADOBE_CACHE_PATTERNS)),
        ),
        CleanupTask(
            "ios_apps",
            "Cleaning up cached iOS applications and photo caches",
            lambda: shell.remove(paths(IOS_APP_PATTERNS)),
        ),
        CleanupTask(
            "ios_backups",
            "Removing iOS device backups",
            lambda: shell.remove(paths(IOS_BACKUP_PATTERNS)),
        ),
        CleanupTask(
            "xcode",
            "Cleaning up Xcode DerivedData and Archives",
            lambda: shell.remove(paths(XCODE_PATTERNS)),
        ),
        CleanupTask(
            "user_caches",
            "Clearing user caches (~/Library/Caches)",
            lambda: shell.remove(paths(USER_CACHE_PATTERNS)),
        ),
        CleanupTask(
            "homebrew",
            "Updating Homebrew and cleaning its cache",
            lambda: shell.run_steps([
                ["brew", "update"],
                ["brew", "upgrade"],
                ["brew", "cleanup", "-s"],
                ["brew", "tap", "--repair"],
            ]),
            guard=lambda: probe.available("brew"),
            guard_desc="brew on PATH",
        ),
        CleanupTask(
            "gem",
            "Cleaning up old Ruby gems",
            lambda: shell.run(["gem", "cleanup"]),
            guard=lambda: probe.available("gem"),
            guard_desc="gem on PATH",
        ),
        CleanupTask(
            "docker",
            "Pruning unused Docker containers, images, volumes and networks",
            lambda: shell.run_steps([
                ["docker", "container", "prune", "-f"],
                ["docker", "image", "prune", "-f"],
                ["docker", "volume", "prune", "-f"],
                ["docker", "network", "prune", "-f"],
            ]),
            guard=lambda: probe.available("docker"),
            guard_desc="docker on PATH",
        ),
        CleanupTask(
            "pyenv_virtualenv_cache",
            "Removing the pyenv-virtualenv cache",
            clear_pyenv_cache,
            guard=lambda: probe.env_set(PYENV_CACHE_ENV),
            guard_desc=f"${PYENV_CACHE_ENV} set",
        ),
        CleanupTask(
            "npm",
            "Cleaning the npm cache",
            lambda: shell.run(["npm", "cache", "clean", "--force"]),
            guard=lambda: probe.available("npm"),
            guard_desc="npm on PATH",
        ),
        CleanupTask(
            "yarn",
            "Cleaning the Yarn cache",
            lambda: shell.run(["yarn", "cache", "clean", "--force"]),
            guard=lambda: probe.available("yarn"),
            guard_desc="yarn on PATH",
        ),
        CleanupTask(
            "purge_memory",
            "Purging inactive memory",
            lambda: shell.run(["purge"], need_sudo=True),
        ),
    )


def select_tasks(tasks: Iterable[CleanupTask], include=None, exclude=None) -> Tuple[CleanupTask, ...]:
    """Narrow the registry by name. Relative order is always preserved."""
    include = set(include) if include is not None else None
    exclude = set(exclude or ())
    return tuple(
        t for t in tasks
        if (include is None or t.name in include) and t.name not in exclude
    )


def task_names(tasks: Iterable[CleanupTask]):
    return [t.name for t in tasks]
