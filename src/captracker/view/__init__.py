"""Comparison view layer -- source polling, derivation and view state."""

from captracker.view.comparison import derive_comparison
from captracker.view.poller import SourcePoller
from captracker.view.view import ComparisonView

__all__ = ["ComparisonView", "SourcePoller", "derive_comparison"]
