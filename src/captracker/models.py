"""Shared data models for the market cap tracker.

Snapshots are frozen: each successful fetch produces a new instance and
nothing mutates it afterwards. Figures are floats because they come from
and go back to JSON numbers.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class QuoteSnapshot:
    """One Quote Proxy result for the tracked ticker."""

    price: float
    change: float
    change_percent: float
    market_cap: str  # trillions USD, fixed 2 decimals
    previous_close: float | None = None
    timestamp: str = field(default_factory=_utc_now_iso)

    @property
    def market_cap_trillions(self) -> float:
        return float(self.market_cap)

    @property
    def direction(self) -> str:
        """'up' for a non-negative change percent, 'down' otherwise."""
        return "up" if self.change_percent >= 0 else "down"

    def to_dict(self) -> dict:
        """Serialize to the camelCase JSON envelope served at /api/nvidia."""
        payload: dict = {
            "price": self.price,
            "change": self.change,
            "changePercent": self.change_percent,
            "marketCap": self.market_cap,
            "timestamp": self.timestamp,
        }
        if self.previous_close is not None:
            payload["previousClose"] = self.previous_close
        return payload


@dataclass(frozen=True)
class CryptoAggregate:
    """Global crypto market figures as reported by CoinGecko."""

    total_market_cap_usd: float
    btc_dominance_percent: float
    active_cryptocurrencies: int

    def to_dict(self) -> dict:
        return {
            "total_market_cap_usd": self.total_market_cap_usd,
            "btc_dominance_percent": self.btc_dominance_percent,
            "active_cryptocurrencies": self.active_cryptocurrencies,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """NVIDIA vs crypto figures derived at render time. Never cached."""

    nvidia_cap_trillions: float
    crypto_cap_trillions: float
    difference_trillions: float
    difference_percent: float

    def to_dict(self) -> dict:
        return {
            "nvidia_cap_trillions": self.nvidia_cap_trillions,
            "crypto_cap_trillions": self.crypto_cap_trillions,
            "difference_trillions": self.difference_trillions,
            "difference_percent": self.difference_percent,
        }


class ViewState(str, Enum):
    """Observable states of the comparison view."""

    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


@dataclass(frozen=True)
class ViewModel:
    """Everything the page template needs for one render."""

    state: ViewState
    errors: tuple[str, ...] = ()
    nvidia: QuoteSnapshot | None = None
    crypto: CryptoAggregate | None = None
    comparison: ComparisonResult | None = None

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "errors": list(self.errors),
            "nvidia": self.nvidia.to_dict() if self.nvidia else None,
            "crypto": self.crypto.to_dict() if self.crypto else None,
            "comparison": self.comparison.to_dict() if self.comparison else None,
        }
