from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import BinaryIO, Iterator, NamedTuple


class FeedRecord(NamedTuple):
    """One published rate: 1 feed base unit = rate units of currency, on day."""

    day: date
    currency: str
    rate: Decimal


@dataclass(frozen=True)
class FeedConfig:
    """Identity of a rate feed, chosen at the integration boundary."""

    name: str
    url: str
    provider: str
    base_currency: str


class BaseFeedParser(ABC):
    @abstractmethod
    def parse(self, stream: BinaryIO) -> Iterator[FeedRecord]:
        pass
