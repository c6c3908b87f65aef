import pytest
from datetime import date
from decimal import Decimal

from apps.rates.application.provider import HistoricRateProvider
from apps.rates.domain.day_keys import DayKeyPolicy
from apps.rates.domain.interfaces import FeedConfig, FeedRecord
from apps.rates.infrastructure.feeds.ecb import ECBFeedParser


DAY = date(2024, 5, 21)
PREVIOUS_DAY = date(2024, 5, 20)


ECB_DOCUMENT = b"""<?xml version="1.0" encoding="UTF-8"?>
<gesmes:Envelope xmlns:gesmes="http://www.gesmes.org/xml/2002-08-01" xmlns="http://www.ecb.int/vocabulary/2002-08-01/eurofxref">
    <gesmes:subject>Reference rates</gesmes:subject>
    <gesmes:Sender>
        <gesmes:name>European Central Bank</gesmes:name>
    </gesmes:Sender>
    <Cube>
        <Cube time="2024-05-21">
            <Cube currency="USD" rate="1.10"/>
            <Cube currency="JPY" rate="130.0"/>
            <Cube currency="GBP" rate="0.8540"/>
        </Cube>
        <Cube time="2024-05-20">
            <Cube currency="USD" rate="1.0866"/>
            <Cube currency="JPY" rate="169.62"/>
        </Cube>
    </Cube>
</gesmes:Envelope>
"""


@pytest.fixture
def feed():
    return FeedConfig(
        name="ecb_hist90",
        url="https://example.test/eurofxref-hist-90d.xml",
        provider="ECB",
        base_currency="EUR",
    )


@pytest.fixture
def day_keys():
    return DayKeyPolicy("UTC")


@pytest.fixture
def records():
    """The worked example day plus an older day."""
    return [
        FeedRecord(DAY, "USD", Decimal("1.10")),
        FeedRecord(DAY, "JPY", Decimal("130.0")),
        FeedRecord(DAY, "GBP", Decimal("0.8540")),
        FeedRecord(PREVIOUS_DAY, "USD", Decimal("1.0866")),
        FeedRecord(PREVIOUS_DAY, "JPY", Decimal("169.62")),
    ]


@pytest.fixture
def provider(feed, day_keys):
    return HistoricRateProvider(feed, ECBFeedParser(), day_keys)


@pytest.fixture
def loaded_provider(provider, records):
    provider.loader.merge(records)
    return provider


@pytest.fixture
def ecb_document():
    return ECB_DOCUMENT
