from django.apps import AppConfig
from django.core.exceptions import ImproperlyConfigured


class RatesConfig(AppConfig):
    name = "apps.rates"
    label = "rates"
    verbose_name = "Historic exchange rates"

    provider = None
    feed_loader = None

    def ready(self):
        from core.settings import RATES_DAY_TIMEZONE, RATES_FEED
        from apps.rates.application.provider import HistoricRateProvider
        from apps.rates.domain.day_keys import DayKeyPolicy
        from apps.rates.infrastructure.feeds.registry import (
            get_feed_config,
            get_parser_instance,
        )

        feed = get_feed_config(RATES_FEED)
        parser = get_parser_instance(RATES_FEED)
        if feed is None or parser is None:
            raise ImproperlyConfigured(f"RATES_FEED '{RATES_FEED}' is not a registered feed")

        self.provider = HistoricRateProvider(feed, parser, DayKeyPolicy(RATES_DAY_TIMEZONE))

    def start_loading(self):
        """
        Start background feed loading for a serving process.

        Called from the WSGI entry point, so management commands never run a
        loader of their own next to this one.

        Returns:
            True if loading was started
        """
        from core.settings import (
            RATES_FEED_TIMEOUT,
            RATES_LOAD_ON_STARTUP,
            RATES_REFRESH_INTERVAL,
        )
        from apps.rates.infrastructure.feeds.loader_service import FeedLoader
        from apps.rates.infrastructure.feeds.registry import FEED_REGISTRY

        if not RATES_LOAD_ON_STARTUP or self.provider.started:
            return False

        self.feed_loader = FeedLoader(FEED_REGISTRY, timeout=RATES_FEED_TIMEOUT)
        self.provider.start(self.feed_loader, refresh_interval=RATES_REFRESH_INTERVAL)
        return True
