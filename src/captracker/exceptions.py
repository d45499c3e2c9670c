"""Exceptions raised while fetching and combining market data.

Source clients raise these; the Quote Proxy route and the view's pollers
catch them at their boundary and collapse them into a generic failure.
"""


class TrackerError(Exception):
    """Base exception for all tracker errors."""


class UpstreamThrottled(TrackerError):
    """Raised when the quote API reports a rate limit or rejects the API key."""


class UpstreamShapeMismatch(TrackerError):
    """Raised when an upstream payload lacks the object we expect."""


class ParseFailure(TrackerError):
    """Raised when an expected numeric field is missing or not a number."""


class NetworkFailure(TrackerError):
    """Raised when an HTTP request fails or returns a non-JSON body."""


class DerivationError(TrackerError):
    """Raised when the comparison cannot be computed from the latest snapshots."""
