"""
Historic rate provider - wires the rate table, the loader bridge and the resolver
for one feed.

Construction is side-effect free; call start() once the provider is fully built
to subscribe it to a FeedLoader and trigger the first load.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from apps.rates.application.dto import ConversionResultDTO, LoadResultDTO, ProviderStatusDTO
from apps.rates.application.loader import RateLoader
from apps.rates.domain.day_keys import DayKeyPolicy
from apps.rates.domain.interfaces import BaseFeedParser, FeedConfig
from apps.rates.domain.models import ConversionRequest, ResolvedRate
from apps.rates.domain.rate_table import RateTable, RecentDayPointer
from apps.rates.domain.services import RateResolver
from apps.rates.infrastructure.feeds.loader_service import FeedLoader


logger = logging.getLogger(__name__)


class HistoricRateProvider:

    def __init__(
        self,
        feed: FeedConfig,
        parser: BaseFeedParser,
        day_keys: Optional[DayKeyPolicy] = None,
    ):
        self.feed = feed
        self.day_keys = day_keys or DayKeyPolicy()
        self.table = RateTable()
        self.recent_day = RecentDayPointer(self.table)
        self.resolver = RateResolver(self.table, self.recent_day, feed, self.day_keys)
        self.loader = RateLoader(self.table, self.recent_day, feed, self.day_keys, parser)
        self._feed_loader: Optional[FeedLoader] = None

    @property
    def started(self) -> bool:
        return self._feed_loader is not None

    def start(self, feed_loader: FeedLoader, refresh_interval: float = 0) -> None:
        """
        Subscribe to the feed loader and request the first load asynchronously.

        Args:
            feed_loader: Loader that downloads this provider's feed
            refresh_interval: Seconds between reloads; 0 loads only once
        """
        if self.started:
            raise RuntimeError(f"Provider for {self.feed.name} is already started")

        feed_loader.add_listener(self.feed.name, self.loader.new_data_loaded)
        self._feed_loader = feed_loader
        feed_loader.load_data_async(self.feed.name)
        if refresh_interval > 0:
            feed_loader.schedule(self.feed.name, refresh_interval)
        logger.info("Started %s rate provider for feed %s", self.feed.provider, self.feed.name)

    def stop(self) -> None:
        if self._feed_loader is None:
            return
        self._feed_loader.remove_listener(self.feed.name, self.loader.new_data_loaded)
        self._feed_loader = None

    def load_from_file(self, path) -> LoadResultDTO:
        with open(path, "rb") as stream:
            return self.loader.new_data_loaded(self.feed.name, stream)

    def resolve(self, request: ConversionRequest) -> Optional[ResolvedRate]:
        return self.resolver.resolve(request)

    def get_exchange_rate(
        self,
        base_currency: str,
        target_currency: str,
        day: date | datetime | None = None,
    ) -> Optional[ResolvedRate]:
        return self.resolver.get_exchange_rate(base_currency, target_currency, day)

    def convert_amount(
        self,
        base_currency: str,
        target_currency: str,
        amount: Decimal,
        day: date | datetime | None = None,
    ) -> Optional[ConversionResultDTO]:
        """
        Convert an amount from one currency to another.

        Returns:
            ConversionResultDTO, or None if the rate is unknown

        Raises:
            CurrencyConversionError: if a derived rate is missing one of its legs
        """
        rate = self.get_exchange_rate(base_currency, target_currency, day)
        if rate is None:
            return None

        return ConversionResultDTO(
            base_currency=rate.base_currency,
            target_currency=rate.target_currency,
            amount=amount,
            rate=rate.factor,
            converted_amount=rate.convert(amount),
            valuation_date=rate.context.day,
            derived=rate.is_derived,
        )

    def status(self) -> ProviderStatusDTO:
        recent_key = self.recent_day.get()
        return ProviderStatusDTO(
            feed=self.feed.name,
            provider=self.feed.provider,
            base_currency=self.feed.base_currency,
            days_loaded=len(self.table),
            recent_day=self.day_keys.day_for(recent_key) if recent_key is not None else None,
            last_days_added=self.loader.last_days_added,
            started=self.started,
        )
