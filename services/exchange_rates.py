"""Exchange-rate source with caching and an explicit fallback rate."""

import time
from decimal import Decimal
from typing import Callable, Dict, Optional, Tuple

from errors import UpstreamUnavailable
from logger import get_logger
from money import parse_rate

logger = get_logger()


class ExchangeRateService:
    """Looks up exchange rates through the LLM provider.

    A positive live rate is cached per currency pair for ``cache_seconds``.
    When the provider is disabled, unreachable, or returns a non-positive
    rate, ``fallback_rate`` is returned instead (and cached like a live
    rate). The fallback applies to every pair other than identical
    currencies.

    Args:
        provider: LLMProvider, or None when LLM features are disabled.
        fallback_rate: Rate used whenever no live rate is available.
        cache_seconds: How long a rate is reused before asking again.
        clock: Monotonic clock in seconds (injectable for tests).
    """

    def __init__(
        self,
        provider=None,
        fallback_rate: Decimal = Decimal("5.42"),
        cache_seconds: int = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.fallback_rate = parse_rate(fallback_rate, "fallback_rate")
        self.cache_seconds = cache_seconds
        self.clock = clock
        self._cache: Dict[Tuple[str, str], Tuple[Decimal, float]] = {}

    def get_rate(self, base: str, quote: str) -> Decimal:
        """Get the rate converting ``base`` into ``quote``.

        Args:
            base: Source currency code (e.g. "USD").
            quote: Target currency code (e.g. "BRL").

        Returns:
            Positive Decimal rate; 1 for identical currencies.
        """
        base, quote = base.upper(), quote.upper()
        if base == quote:
            return Decimal("1")

        now = self.clock()
        cached = self._cache.get((base, quote))
        if cached and now - cached[1] < self.cache_seconds:
            logger.debug(f"Using cached exchange rate {base}->{quote}: {cached[0]}")
            return cached[0]

        rate = self._fetch(base, quote)
        if rate is None:
            rate = self.fallback_rate
            logger.warning(
                f"Live exchange rate {base}->{quote} unavailable, "
                f"using fallback rate {rate}"
            )

        self._cache[(base, quote)] = (rate, now)
        return rate

    def resolve(self, base: str, quote: str, rate=None) -> Decimal:
        """Use an explicitly supplied rate, or look one up when None."""
        if rate is not None:
            return parse_rate(rate)
        return self.get_rate(base, quote)

    def clear_cache(self) -> None:
        self._cache.clear()

    def _fetch(self, base: str, quote: str) -> Optional[Decimal]:
        if self.provider is None:
            return None
        try:
            rate = self.provider.fetch_exchange_rate(base, quote)
        except UpstreamUnavailable as e:
            logger.warning(f"Exchange rate source unavailable: {e}")
            return None

        if rate is None or not rate.is_finite() or rate <= 0:
            logger.warning(f"Exchange rate source returned an invalid rate: {rate!r}")
            return None
        return rate
