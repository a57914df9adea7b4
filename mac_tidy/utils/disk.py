"""Disk space sampling and size formatting for mac-tidy."""
import shutil
from dataclasses import dataclass

from ..core.constants import SPACE_UNITS


@dataclass(frozen=True)
class SpaceSample:
    free_bytes: int


def sample(path="/"):
    """Available space on the filesystem holding `path`."""
    return SpaceSample(shutil.disk_usage(path).free)


def delta(before, after):
    """Signed change in free space; positive means space was reclaimed."""
    return after.free_bytes - before.free_bytes


def humanize(value):
    """Format a byte count with the integer-remainder stepping used for the cleanup summary.

    Each step keeps two decimal digits of the remainder, so 1536 gives "1.50 KiB"
    rather than a rounded float.
    """
    if value < 0:
        raise ValueError("humanize() expects a non-negative byte count")
    value = int(value)
    unit = 0
    fraction = ""
    while value >= 1024 and unit < len(SPACE_UNITS) - 1:
        fraction = ".%02d" % ((value % 1024) * 100 // 1024)
        value //= 1024
        unit += 1
    return f"{value}{fraction} {SPACE_UNITS[unit]} of space was cleaned up"


def cleanup_summary(before, after):
    """Summary line for a run; a run that used space reports 0 and says by how much usage grew."""
    change = delta(before, after)
    if change >= 0:
        return humanize(change)
    grown = humanize(-change).replace(" of space was cleaned up", "")
    return f"{humanize(0)} (disk usage grew by {grown} during the run)"


#size formatter
def human_size(num):
    for unit in ["B", "KB", "MB", "GB", "TB"]:
        if abs(num) < 1024.0:
            return f"{num:3.1f} {unit}"
        num /= 1024.0
    return f"{num:.1f} PB"
