"""
Loader bridge: turns freshly parsed feed records into day buckets and installs
them into the rate table.
"""

import logging
from collections import defaultdict
from typing import BinaryIO, Dict, Iterable

from apps.rates.application.dto import LoadResultDTO
from apps.rates.domain.day_keys import DayKeyPolicy
from apps.rates.domain.interfaces import BaseFeedParser, FeedConfig, FeedRecord
from apps.rates.domain.models import RateEntry
from apps.rates.domain.rate_table import RateTable, RecentDayPointer


logger = logging.getLogger(__name__)


class RateLoader:
    """
    Writer side of the rate table. Never serves queries.

    A feed is either installed completely or not at all: records are grouped
    into buckets first, and only a fully built batch reaches the table.
    """

    def __init__(
        self,
        table: RateTable,
        recent_day: RecentDayPointer,
        feed: FeedConfig,
        day_keys: DayKeyPolicy,
        parser: BaseFeedParser,
    ):
        self._table = table
        self._recent_day = recent_day
        self._feed = feed
        self._day_keys = day_keys
        self._parser = parser
        self.last_days_added = 0

    def merge(self, records: Iterable[FeedRecord]) -> int:
        """
        Group records per day and install each day as one immutable bucket.

        Args:
            records: (day, currency, rate) triples quoted against the feed base

        Returns:
            Number of days that were not loaded before

        Raises:
            ValueError: if a record holds an invalid currency code or rate
        """
        self.last_days_added = 0
        buckets: Dict[int, Dict[str, RateEntry]] = defaultdict(dict)
        for day, currency, rate in records:
            entry = RateEntry(self._feed.base_currency, currency, rate)
            buckets[self._day_keys.key_for(day)][entry.currency] = entry

        if not buckets:
            return 0

        added = self._table.install(buckets)
        self._recent_day.invalidate()
        self.last_days_added = added
        return added

    def new_data_loaded(self, data_id: str, stream: BinaryIO) -> LoadResultDTO:
        """
        Listener callback for the feed loader.

        Parse failures are logged and leave the table as it was; the next
        scheduled load retries.
        """
        days_before = len(self._table)
        self.last_days_added = 0
        result = LoadResultDTO(feed=data_id, success=True)
        try:
            records = list(self._parser.parse(stream))
            result.days_added = self.merge(records)
        except Exception as e:
            logger.warning("Error during data load of %s.", data_id, exc_info=True)
            result.success = False
            result.error = str(e)

        result.days_loaded = len(self._table)
        logger.info(
            "Loaded %s exchange rates for days: %s",
            data_id,
            result.days_loaded - days_before,
        )
        return result
