from datetime import date
from decimal import Decimal, InvalidOperation
from typing import BinaryIO, Iterator
from xml.etree import ElementTree

from apps.rates.domain.exceptions import FeedParseError
from apps.rates.domain.interfaces import BaseFeedParser, FeedRecord


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class ECBFeedParser(BaseFeedParser):
    """
    European Central Bank eurofxref parser.

    Reads the daily, 90-day and full-history documents, which share one layout:
    an outer Cube, one Cube per day (``time`` attribute) and one Cube per
    currency (``currency`` and ``rate`` attributes), all quoted against EUR.
    Namespaces are ignored.
    """

    def parse(self, stream: BinaryIO) -> Iterator[FeedRecord]:
        day = None
        try:
            for event, element in ElementTree.iterparse(stream, events=("start", "end")):
                if _local_name(element.tag) != "Cube":
                    continue

                time_value = element.get("time")
                if event == "end":
                    # drop the finished day's currency Cubes
                    if time_value is not None:
                        element.clear()
                        day = None
                    continue

                if time_value is not None:
                    day = self._parse_day(time_value)
                    continue

                currency = element.get("currency")
                if currency is None:
                    continue
                if day is None:
                    raise FeedParseError(f"Rate for {currency} is not inside a dated Cube")
                yield FeedRecord(day, currency, self._parse_rate(currency, element.get("rate")))
        except ElementTree.ParseError as e:
            raise FeedParseError(f"Malformed feed document: {e}") from e

    @staticmethod
    def _parse_day(value: str) -> date:
        try:
            return date.fromisoformat(value)
        except ValueError as e:
            raise FeedParseError(f"Invalid day '{value}'") from e

    @staticmethod
    def _parse_rate(currency: str, value: str | None) -> Decimal:
        try:
            rate = Decimal(value)
        except (InvalidOperation, TypeError) as e:
            raise FeedParseError(f"Invalid rate '{value}' for {currency}") from e
        if not rate.is_finite() or rate <= 0:
            raise FeedParseError(f"Rate for {currency} must be positive, got {value}")
        return rate
