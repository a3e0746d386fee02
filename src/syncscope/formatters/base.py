"""Base formatter interface for SyncScope output rendering."""

from abc import ABC, abstractmethod

from ..profiler import ProfileReport


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: ProfileReport) -> None:
        """Render a report to stdout."""

    @abstractmethod
    def format(self, report: ProfileReport) -> str:
        """Return formatted string representation of a report."""
