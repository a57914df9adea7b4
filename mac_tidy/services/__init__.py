"""Services (business logic) for mac-tidy."""

from . import shell
from . import probe
from . import compression
from . import archive_service
from . import runner
from . import privilege

__all__ = ["shell", "probe", "compression", "archive_service", "runner", "privilege"]
