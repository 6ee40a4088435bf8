"""Read-only diagnostics dashboard for a content-management host database."""

__version__ = "0.1.0"
