"""NVIDIA vs crypto comparison arithmetic."""

import math

from captracker.exceptions import DerivationError
from captracker.models import ComparisonResult, CryptoAggregate, QuoteSnapshot


def derive_comparison(nvidia: QuoteSnapshot, crypto: CryptoAggregate) -> ComparisonResult:
    """Compare the NVIDIA market cap against the total crypto market cap.

    Both figures are in trillions USD. The percentage is relative to the
    crypto total.

    Raises:
        DerivationError: when either figure is non-finite or the crypto total
            is not strictly positive.
    """
    try:
        nvidia_cap = float(nvidia.market_cap)
    except ValueError as e:
        raise DerivationError(f"NVIDIA market cap is not a number: {nvidia.market_cap!r}") from e

    crypto_cap = crypto.total_market_cap_usd / 1e12

    if not math.isfinite(nvidia_cap) or not math.isfinite(crypto_cap):
        raise DerivationError("market cap figure is not finite")
    if crypto_cap <= 0:
        raise DerivationError(f"crypto total market cap must be positive, got {crypto_cap}")

    difference = nvidia_cap - crypto_cap
    return ComparisonResult(
        nvidia_cap_trillions=nvidia_cap,
        crypto_cap_trillions=crypto_cap,
        difference_trillions=difference,
        difference_percent=difference / crypto_cap * 100,
    )
