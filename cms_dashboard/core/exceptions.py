# cms_dashboard/core/exceptions.py
"""Error types surfaced by the reporting layer."""


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class InvalidPageRequestError(DashboardError, ValueError):
    """Raised when a page number or page size is out of range."""


class UnsafeOrderByError(DashboardError, ValueError):
    """Raised when a sort column is not on a report's allow-list."""

    def __init__(self, value, allowed):
        self.value = value
        self.allowed = list(allowed)
        super().__init__(f"Cannot order by {value!r}. Allowed values: {', '.join(self.allowed)}")


class BackendUnavailableError(DashboardError):
    """Raised when the host database cannot be reached or times out."""
