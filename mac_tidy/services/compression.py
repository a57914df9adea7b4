"""Compression backends and the size/availability based selection policy."""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ..core.constants import ZOPFLI_MAX_BYTES
from .probe import ToolProbe


def _always() -> bool:
    return True


@dataclass(frozen=True)
class CompressionBackend:
    """An external compressor turning `<tar>` into `<tar>.gz` while keeping `<tar>`."""

    name: str
    command: Callable[[str], List[str]] = field(compare=False)
    available: Callable[[], bool] = field(default=_always, compare=False)
    priority: int = 0
    size_ceiling_bytes: Optional[int] = None

    def accepts(self, size: int) -> bool:
        if self.size_ceiling_bytes is not None and size >= self.size_ceiling_bytes:
            return False
        return self.available()


def default_backends(probe: Optional[ToolProbe] = None, zopfli_max_bytes: int = ZOPFLI_MAX_BYTES) -> List[CompressionBackend]:
    """zopfli for small payloads, then pigz, then gzip which is always present."""
    probe = probe or ToolProbe()
    return [
        CompressionBackend(
            name="zopfli",
            command=lambda tar: ["zopfli", tar],
            available=lambda: probe.available("zopfli"),
            priority=0,
            size_ceiling_bytes=zopfli_max_bytes,
        ),
        CompressionBackend(
            name="pigz",
            command=lambda tar: ["pigz", "-k", tar],
            available=lambda: probe.available("pigz"),
            priority=1,
        ),
        CompressionBackend(
            name="gzip",
            command=lambda tar: ["gzip", "-k", tar],
            priority=2,
        ),
    ]


class BackendSelector:
    """Picks the first acceptable backend by priority; the last one is the baseline."""

    def __init__(self, backends: Optional[Sequence[CompressionBackend]] = None, probe: Optional[ToolProbe] = None):
        backends = list(backends) if backends is not None else default_backends(probe)
        if not backends:
            raise ValueError("at least one compression backend is required")
        self.backends = sorted(backends, key=lambda b: b.priority)

    @property
    def baseline(self) -> CompressionBackend:
        return self.backends[-1]

    def select(self, payload_size: int) -> CompressionBackend:
        for backend in self.backends[:-1]:
            if backend.accepts(payload_size):
                return backend
        return self.baseline
