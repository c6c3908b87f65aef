"""
Feed Registry - Maps FeedName choices to feed configurations and parsers.
This is the glue between settings and the actual feed implementation.
"""

import logging

from django.db import models

from apps.rates.domain.interfaces import BaseFeedParser, FeedConfig
from apps.rates.infrastructure.feeds.ecb import ECBFeedParser


logger = logging.getLogger(__name__)

ECB_BASE_URL = "https://www.ecb.europa.eu/stats/eurofxref"
ECB_PROVIDER = "ECB"


class FeedName(models.TextChoices):
    """
    Available feed variants.
    To add a new feed:
    1. Add an entry here
    2. Implement the BaseFeedParser interface if the format is new
    3. Register it in FEED_REGISTRY and FEED_PARSERS
    """

    ECB_CURRENT = "ecb_current", "ECB latest business day"
    ECB_HIST90 = "ecb_hist90", "ECB last 90 days"
    ECB_HIST = "ecb_hist", "ECB full history"


FEED_REGISTRY: dict[str, FeedConfig] = {
    FeedName.ECB_CURRENT: FeedConfig(
        name=FeedName.ECB_CURRENT.value,
        url=f"{ECB_BASE_URL}/eurofxref-daily.xml",
        provider=ECB_PROVIDER,
        base_currency="EUR",
    ),
    FeedName.ECB_HIST90: FeedConfig(
        name=FeedName.ECB_HIST90.value,
        url=f"{ECB_BASE_URL}/eurofxref-hist-90d.xml",
        provider=ECB_PROVIDER,
        base_currency="EUR",
    ),
    FeedName.ECB_HIST: FeedConfig(
        name=FeedName.ECB_HIST.value,
        url=f"{ECB_BASE_URL}/eurofxref-hist.xml",
        provider=ECB_PROVIDER,
        base_currency="EUR",
    ),
}

FEED_PARSERS: dict[str, type[BaseFeedParser]] = {
    FeedName.ECB_CURRENT: ECBFeedParser,
    FeedName.ECB_HIST90: ECBFeedParser,
    FeedName.ECB_HIST: ECBFeedParser,
}


def get_feed_config(feed_name: str) -> FeedConfig | None:
    """
    Get the configuration of a feed by its name.

    Args:
        feed_name: The feed name from FeedName choices

    Returns:
        FeedConfig, or None if not registered
    """
    config = FEED_REGISTRY.get(feed_name)

    if config is None:
        logger.warning("Feed '%s' not found in registry", feed_name)

    return config


def get_parser_instance(feed_name: str) -> BaseFeedParser | None:
    parser_class = FEED_PARSERS.get(feed_name)

    if parser_class is None:
        logger.warning("No parser registered for feed '%s'", feed_name)
        return None

    return parser_class()
