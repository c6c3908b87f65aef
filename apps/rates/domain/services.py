"""
Domain services - Core business logic.
Resolves a rate between any two currencies from a star-topology feed, where
every published rate is quoted against one fixed base currency.
"""

import logging
from datetime import date, datetime
from typing import Optional

from apps.rates.domain.day_keys import DayKeyPolicy
from apps.rates.domain.exceptions import CurrencyConversionError, RateResolutionError
from apps.rates.domain.interfaces import FeedConfig
from apps.rates.domain.models import (
    ConversionRequest,
    RateContext,
    RateEntry,
    RateType,
    ResolvedRate,
)
from apps.rates.domain.rate_math import ONE, invert, multiply
from apps.rates.domain.rate_table import DayBucket, RateTable, RecentDayPointer


logger = logging.getLogger(__name__)

# A derived rate hops through the feed base exactly once on each side.
MAX_CHAIN_DEPTH = 1


class RateResolver:
    """
    Answers conversion requests from the in-memory rate table. Never performs I/O.

    Resolution strategy for a pair (X, Y) on one day, with B the feed base:
    1. B -> B: identity, factor 1
    2. X -> B: reversed published entry B -> X
    3. B -> Y: published entry B -> Y as is
    4. X -> Y: (X -> B) * (B -> Y), keeping both legs as the rate chain

    Missing data in branches 2 and 3 gives None; a missing leg in branch 4
    raises CurrencyConversionError.
    """

    def __init__(
        self,
        table: RateTable,
        recent_day: RecentDayPointer,
        feed: FeedConfig,
        day_keys: DayKeyPolicy,
    ):
        self._table = table
        self._recent_day = recent_day
        self._feed = feed
        self._day_keys = day_keys

    @property
    def base_currency(self) -> str:
        return self._feed.base_currency

    def resolve(self, request: ConversionRequest) -> Optional[ResolvedRate]:
        """
        Resolve a conversion request.

        Args:
            request: Base/target currency codes and an optional day; without a
                day the most recent loaded day is used.

        Returns:
            ResolvedRate, or None if no data is known for the request

        Raises:
            ValueError: if request is None
            CurrencyConversionError: if a derived rate is missing one of its legs
        """
        if request is None:
            raise ValueError("A conversion request is required.")
        if self._table.is_empty():
            return None

        day_key = self._day_key_for(request)
        if day_key is None:
            return None

        bucket = self._table.get(day_key)
        if bucket is None:
            return None

        return self._resolve_in_bucket(
            request.base_currency,
            request.target_currency,
            day_key,
            bucket,
            depth=0,
        )

    def get_exchange_rate(
        self,
        base_currency: str,
        target_currency: str,
        day: date | datetime | None = None,
    ) -> Optional[ResolvedRate]:
        return self.resolve(ConversionRequest(base_currency, target_currency, day))

    def _day_key_for(self, request: ConversionRequest) -> Optional[int]:
        if request.day is not None:
            return self._day_keys.key_for(request.day)
        return self._recent_day.get()

    def _resolve_in_bucket(
        self,
        base: str,
        target: str,
        day_key: int,
        bucket: DayBucket,
        depth: int,
    ) -> Optional[ResolvedRate]:
        # Legs reuse the caller's bucket so one result never spans two loads.
        feed_base = self._feed.base_currency
        context = self._context_for(day_key)

        if base == feed_base and target == feed_base:
            return ResolvedRate(base, target, ONE, context)

        if target == feed_base:
            source_entry = bucket.get(base)
            if source_entry is None:
                return None
            return self._from_entry(invert(source_entry), context)

        if base == feed_base:
            target_entry = bucket.get(target)
            if target_entry is None:
                return None
            return self._from_entry(target_entry, context)

        if depth >= MAX_CHAIN_DEPTH:
            raise RateResolutionError(
                f"Derived rate {base}/{target} would need more than {MAX_CHAIN_DEPTH} hop(s)"
            )

        to_base = self._resolve_in_bucket(base, feed_base, day_key, bucket, depth + 1)
        from_base = self._resolve_in_bucket(feed_base, target, day_key, bucket, depth + 1)
        if to_base is None or from_base is None:
            logger.debug("No derived rate %s/%s for day key %s", base, target, day_key)
            raise CurrencyConversionError(base, target, day_key)

        return ResolvedRate(
            base_currency=base,
            target_currency=target,
            factor=multiply(to_base.factor, from_base.factor),
            context=context,
            chain=(to_base, from_base),
        )

    def _context_for(self, day_key: int) -> RateContext:
        return RateContext(
            provider=self._feed.provider,
            rate_type=RateType.HISTORIC,
            day_key=day_key,
            timestamp=self._day_keys.timestamp_for(day_key),
        )

    @staticmethod
    def _from_entry(entry: RateEntry, context: RateContext) -> ResolvedRate:
        return ResolvedRate(entry.base_currency, entry.currency, entry.factor, context)

