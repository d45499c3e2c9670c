"""Blocking JSON-over-HTTP helper shared by the source clients.

Uses urllib.request (stdlib); callers run it through asyncio.to_thread so
the event loop never blocks on the network.
"""

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from captracker.exceptions import NetworkFailure

USER_AGENT = "MarketCapTracker/1.0"


def build_url(base_url: str, params: dict[str, str] | None = None) -> str:
    """Append URL-encoded query parameters to base_url."""
    if not params:
        return base_url
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urllib.parse.urlencode(params)}"


def fetch_json(url: str, timeout: float = 10.0) -> Any:
    """GET url and decode the body as JSON.

    Raises:
        NetworkFailure: on connection errors, non-2xx statuses, timeouts,
            or a body that is not valid JSON.
    """
    headers = {"Accept": "application/json", "User-Agent": USER_AGENT}
    req = urllib.request.Request(url, headers=headers)

    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise NetworkFailure(f"HTTP {e.code} from {_host(url)}") from e
    except (urllib.error.URLError, TimeoutError, OSError) as e:
        raise NetworkFailure(f"request to {_host(url)} failed: {e}") from e

    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise NetworkFailure(f"non-JSON response from {_host(url)}") from e


def _host(url: str) -> str:
    # Never echo the query string: it carries the API key.
    return urllib.parse.urlsplit(url).netloc or url
