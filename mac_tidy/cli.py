#!/usr/bin/env python3
"""Command-line interface for mac-tidy."""
import json
import sys
import argparse

import questionary
from questionary import Choice
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.rule import Rule

from .core import config as config_module
from .core.errors import ExecError, PrivilegeError
from .core.tasks import build_registry, select_tasks
from .services.archive_service import ArchiveBuilder
from .services.compression import BackendSelector, default_backends
from .services.privilege import PrivilegeSession
from .services.probe import ToolProbe
from .services.runner import CleanupRunner
from .services.shell import Shell
from .utils import disk
from .utils.log import setup_logging

console = Console()


def prompt_tasks(tasks):
    """Checkbox of tasks, all ticked. Returns the kept tasks in registry order."""
    choices = [Choice(f"{t.description} ({t.name})", value=t.name, checked=True) for t in tasks]
    result = questionary.checkbox("Untick the tasks to skip (SPACE to toggle, ENTER to confirm):", choices=choices).ask()
    if result is None:
        return ()  # Ctrl+C
    return select_tasks(tasks, include=result)


def confirm(prompt):
    """Confirm the user's choice."""
    # Escape [y/N] so Rich doesn't treat it as markup (style tag)
    ans = console.input(f"[cyan]{prompt} {escape('[y/N]')}: [/]").strip().lower()
    return ans == "y"


def _run_cleanup(args) -> int:
    cfg = config_module.load()
    shell = Shell(dry_run=args.dry_run)
    probe = ToolProbe()
    tasks = select_tasks(build_registry(shell, probe), exclude=cfg["exclude_tasks"])

    console.print(Rule("[bold cyan]🧹 mac-tidy[/]", style="cyan"))
    console.print()
    if args.interactive:
        tasks = prompt_tasks(tasks)
        if not tasks:
            console.print("[yellow]No selection. Exiting.[/]")
            return 0
    if sys.stdin.isatty() and not (args.yes or args.dry_run):
        if not confirm("Proceed with cleanup?"):
            console.print("[yellow]Cancelled.[/]")
            return 0

    if not args.dry_run:
        session = PrivilegeSession.instance()
        try:
            session.acquire()
        except PrivilegeError as e:
            console.print(f"[red]Privilege acquisition failed: {escape(str(e))}[/]")
            return 1
        session.keep_alive(interval=cfg["heartbeat_interval"])

    try:
        before = disk.sample()
        CleanupRunner(tasks).run()
        after = disk.sample()
    finally:
        if not args.dry_run:
            session.owner_exited()

    console.print()
    console.print(Rule("[bold green]✓ Done.[/]", style="green"))
    console.print()
    console.print(f"  [bold green]{escape(disk.cleanup_summary(before, after))}[/]")
    console.print()
    return 0


def _run_archive(args) -> int:
    cfg = config_module.load()
    probe = ToolProbe()
    selector = BackendSelector(default_backends(probe, zopfli_max_bytes=cfg["zopfli_max_bytes"]))
    builder = ArchiveBuilder(Shell(), selector)
    try:
        builder.build(args.paths, output=args.output)
    except ExecError as e:
        step = "compression" if e.cmd and e.cmd[0] != "tar" else "bundling"
        console.print(f"[red]Archive {step} failed: {escape(str(e))}[/]")
        return 1
    return 0


def _list_tasks() -> None:
    """List the cleanup tasks in run order."""
    probe = ToolProbe()
    console.print(Rule("[bold cyan]🧹 mac-tidy — Cleanup tasks[/]", style="cyan"))
    console.print()
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 2))
    table.add_column("#", justify="right", style="dim")
    table.add_column("Key", style="cyan")
    table.add_column("Description", style="")
    table.add_column("Runs when", style="dim yellow")
    for i, t in enumerate(build_registry(Shell(dry_run=True), probe), 1):
        state = "[green]yes[/]" if t.guard() else "[dim]no[/]"
        table.add_row(str(i), t.name, t.description, f"{escape(t.guard_desc)} ({state})")
    console.print(table)
    console.print()


def _run_config(argv: list) -> None:
    """Run the configuration tasks."""
    p = argparse.ArgumentParser(prog="mac-tidy config", description="Manage configuration.")
    p.add_argument("--init", action="store_true", help="Create default config file")
    p.add_argument("--show", action="store_true", help="Show current config")
    args = p.parse_args(argv)
    if args.init:
        path = config_module.init_config()
        console.print(Rule("[bold cyan]Config[/]", style="cyan"))
        console.print()
        console.print(f"  [green]✓[/] Created config at [cyan]{escape(path)}[/]")
        console.print()
        return
    if args.show:
        if not config_module.config_exists():
            console.print("[yellow]No config found. Run: mac-tidy config --init[/]")
            return
        cfg = config_module.load()
        console.print(Rule("[bold cyan]Config[/]", style="cyan"))
        console.print()
        console.print(escape(json.dumps(cfg, indent=2)))
        console.print()
        return
    p.print_help()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mac-tidy", description="Reclaim disk space and archive directories.")
    sub = parser.add_subparsers(dest="command")

    c = sub.add_parser("cleanup", help="Run every cleanup task, in order.")
    c.add_argument("--dry-run", action="store_true", help="Show the commands without running them.")
    c.add_argument("--interactive", action="store_true", help="Choose which tasks to run.")
    c.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation.")
    c.add_argument("-v", "--verbose", action="store_true", help="Show diagnostics from failed tasks.")

    a = sub.add_parser("archive", help="Create a .tar.gz of the given paths.")
    a.add_argument("paths", nargs="+", help="Files or directories to archive.")
    a.add_argument("-o", "--output", help="Archive name (default: <path>.tar.gz or archive.tar.gz).")
    a.add_argument("-v", "--verbose", action="store_true", help="Show diagnostics.")

    sub.add_parser("tasks", help="List cleanup tasks and whether they would run.")
    return parser


def main(argv=None):
    """Main function."""
    argv = argv if argv is not None else sys.argv[1:]
    if argv and argv[0] == "config":
        _run_config(argv[1:])
        return 0

    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(getattr(args, "verbose", False))

    if args.command == "cleanup":
        code = _run_cleanup(args)
    elif args.command == "archive":
        code = _run_archive(args)
    elif args.command == "tasks":
        _list_tasks()
        code = 0
    else:
        parser.print_help()
        console.print("\n[dim]Subcommands: cleanup, archive, tasks, config[/]")
        code = 0
    if code:
        sys.exit(code)
    return code


if __name__ == "__main__":
    main()
