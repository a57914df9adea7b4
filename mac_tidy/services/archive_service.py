#!/usr/bin/env python3
"""Bundle paths into a .tar and compress it with the best available backend."""
import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Sequence

from rich.console import Console
from rich.markup import escape

from ..core.constants import ARCHIVE_EXCLUDES
from ..core.errors import ExecError
from ..utils.disk import human_size
from .compression import BackendSelector, CompressionBackend
from .shell import Shell

console = Console()
log = logging.getLogger(__name__)


@dataclass
class ArchiveJob:
    source_paths: List[str]
    tar_path: str
    backend: CompressionBackend
    original_size_bytes: int
    compressed_size_bytes: int

    @property
    def archive_path(self) -> str:
        return self.tar_path + ".gz"

    @property
    def ratio(self) -> float:
        if not self.original_size_bytes:
            return 0.0
        return self.compressed_size_bytes / self.original_size_bytes


def tar_path_for(source_paths: Sequence[str], output: Optional[str] = None) -> str:
    """`foo/` -> `foo.tar`; several sources -> `archive.tar` unless `output` is given.

    `.` and other dot paths are named after the directory they resolve to and the
    tar goes next to it, never inside the tree being archived.
    """
    if output:
        if output.endswith(".gz"):
            output = output[:-len(".gz")]
        return output if output.endswith(".tar") else output + ".tar"
    if len(source_paths) != 1:
        return "archive.tar"
    src = os.path.normpath(source_paths[0])
    resolved = os.path.abspath(src)
    name = os.path.basename(resolved)
    if not name:
        return "archive.tar"
    if os.path.basename(src) in (os.curdir, os.pardir):
        return os.path.join(os.path.dirname(resolved), name + ".tar")
    return src + ".tar"


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass


class ArchiveBuilder:
    def __init__(self, shell: Optional[Shell] = None, selector: Optional[BackendSelector] = None):
        self.shell = shell or Shell()
        self.selector = selector or BackendSelector()

    def bundle(self, source_paths: Sequence[str], tar_path: str) -> None:
        args = ["tar", "-cf", tar_path]
        for pattern in ARCHIVE_EXCLUDES:
            args.append(f"--exclude={pattern}")
        args.append("--")
        args.extend(source_paths)
        try:
            # keeps macOS tar from adding ._ AppleDouble entries
            self.shell.run(args, env={"COPYFILE_DISABLE": "1"})
        except ExecError:
            _discard(tar_path)
            raise

    def compress(self, backend: CompressionBackend, tar_path: str) -> str:
        gz_path = tar_path + ".gz"
        if os.path.exists(gz_path):
            raise ExecError(backend.command(tar_path), reason=f"{gz_path} already exists")
        try:
            self.shell.run(backend.command(tar_path))
        except ExecError:
            _discard(gz_path)
            raise
        if not os.path.isfile(gz_path):
            raise ExecError(backend.command(tar_path), reason=f"{backend.name} did not produce {gz_path}")
        return gz_path

    def build(self, source_paths: Sequence[str], output: Optional[str] = None) -> ArchiveJob:
        """Create `<tar>.gz` from `source_paths`. Raises ExecError if bundling or compression fails."""
        sources = [str(p) for p in source_paths]
        if not sources:
            raise ExecError(["tar"], reason="nothing to archive")
        missing = [p for p in sources if not os.path.exists(p)]
        if missing:
            raise ExecError(["tar"], reason=f"no such file or directory: {', '.join(missing)}")

        tar_path = tar_path_for(sources, output)
        if os.path.exists(tar_path + ".gz"):
            raise ExecError(["tar", "-cf", tar_path], reason=f"{tar_path}.gz already exists")
        self.bundle(sources, tar_path)
        original = os.path.getsize(tar_path)

        backend = self.selector.select(original)
        console.print(f"Compressing .tar ({human_size(original)}) using `{escape(backend.name)}`…")
        log.debug("selected %s for %d bytes", backend.name, original)
        gz_path = self.compress(backend, tar_path)

        _discard(tar_path)
        compressed = os.path.getsize(gz_path)
        job = ArchiveJob(sources, tar_path, backend, original, compressed)
        console.print(f"{escape(gz_path)} ({human_size(compressed)}, {job.ratio:.0%} of original) created successfully.")
        return job
