from apps.rates.infrastructure.feeds.ecb import ECBFeedParser
from apps.rates.infrastructure.feeds.registry import (
    FEED_PARSERS,
    FEED_REGISTRY,
    FeedName,
    get_feed_config,
    get_parser_instance,
)


class TestFeedRegistry:
    """Tests for feed registry functions."""

    def test_registry_contains_every_feed(self):
        """
        Test that every FeedName has a configuration and a parser.
        """
        for name in FeedName:
            assert name in FEED_REGISTRY
            assert name in FEED_PARSERS

    def test_ecb_feeds_are_quoted_against_eur(self):
        for config in FEED_REGISTRY.values():
            assert config.base_currency == "EUR"
            assert config.provider == "ECB"
            assert config.url.startswith("https://www.ecb.europa.eu/stats/eurofxref/")

    def test_feed_urls(self):
        assert get_feed_config("ecb_current").url.endswith("/eurofxref-daily.xml")
        assert get_feed_config("ecb_hist90").url.endswith("/eurofxref-hist-90d.xml")
        assert get_feed_config("ecb_hist").url.endswith("/eurofxref-hist.xml")

    def test_get_feed_config_by_plain_string(self):
        config = get_feed_config("ecb_hist90")

        assert config is not None
        assert config.name == "ecb_hist90"

    def test_get_feed_config_invalid(self):
        assert get_feed_config("invalid_feed") is None

    def test_get_parser_instance(self):
        assert isinstance(get_parser_instance(FeedName.ECB_CURRENT), ECBFeedParser)

    def test_get_parser_instance_invalid(self):
        assert get_parser_instance("invalid_feed") is None
