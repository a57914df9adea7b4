"""mac-tidy: reclaim disk space on a Mac and archive directories."""

__version__ = "0.1.0"

__all__ = ["cli", "core", "services", "utils"]
