from datetime import date

from django.core.management.base import BaseCommand, CommandError

from core.settings import RATES_DAY_TIMEZONE, RATES_FEED, RATES_FEED_TIMEOUT
from apps.rates.application.provider import HistoricRateProvider
from apps.rates.domain.day_keys import DayKeyPolicy
from apps.rates.domain.exceptions import CurrencyConversionError
from apps.rates.infrastructure.feeds.loader_service import FeedLoader
from apps.rates.infrastructure.feeds.registry import (
    FEED_REGISTRY,
    get_feed_config,
    get_parser_instance,
)


class Command(BaseCommand):
    help = 'Load an exchange rate feed and optionally resolve one currency pair'

    def add_arguments(self, parser):
        parser.add_argument(
            '--feed',
            dest='feed',
            type=str,
            default=RATES_FEED,
            help='Feed name (e.g. ecb_current, ecb_hist90, ecb_hist)'
        )
        parser.add_argument(
            '--file',
            dest='path',
            type=str,
            help='Read the feed document from a local file instead of downloading it'
        )
        parser.add_argument(
            '--from',
            dest='base_currency',
            type=str,
            help='Base currency code of the pair to resolve'
        )
        parser.add_argument(
            '--to',
            dest='target_currency',
            type=str,
            help='Target currency code of the pair to resolve'
        )
        parser.add_argument(
            '--date',
            dest='day',
            type=str,
            help='Day of the rate in YYYY-MM-DD format (defaults to the most recent day)'
        )

    def handle(self, **options):
        feed_name = options['feed']
        base_currency = options.get('base_currency')
        target_currency = options.get('target_currency')

        feed = get_feed_config(feed_name)
        parser = get_parser_instance(feed_name)
        if feed is None or parser is None:
            raise CommandError(f'Unknown feed: {feed_name}')

        if bool(base_currency) != bool(target_currency):
            raise CommandError('--from and --to must be given together')

        day = None
        if options.get('day'):
            try:
                day = date.fromisoformat(options['day'])
            except ValueError:
                raise CommandError('Invalid date format. Use YYYY-MM-DD')

        provider = HistoricRateProvider(feed, parser, DayKeyPolicy(RATES_DAY_TIMEZONE))

        if options.get('path'):
            self.stdout.write(f"Reading {feed_name} from {options['path']}...")
            try:
                result = provider.load_from_file(options['path'])
            except OSError as e:
                raise CommandError(f'Cannot read feed file: {e}')
        else:
            self.stdout.write(f'Downloading {feed_name} from {feed.url}...')
            feed_loader = FeedLoader(FEED_REGISTRY, timeout=RATES_FEED_TIMEOUT)
            received = []
            feed_loader.add_listener(
                feed_name,
                lambda data_id, stream: received.append(provider.loader.new_data_loaded(data_id, stream)),
            )
            try:
                feed_loader.load_data(feed_name)
            finally:
                feed_loader.shutdown()
            if not received:
                raise CommandError(f'Failed to download feed {feed_name}')
            result = received[0]

        if not result.success:
            raise CommandError(f'Failed to load {feed_name}: {result.error}')

        self.stdout.write(
            self.style.SUCCESS(f'Loaded {result.days_loaded} days ({result.days_added} new)')
        )

        if not base_currency:
            return

        try:
            rate = provider.get_exchange_rate(base_currency, target_currency, day)
        except (ValueError, CurrencyConversionError) as e:
            raise CommandError(str(e))

        if rate is None:
            self.stdout.write(
                self.style.WARNING(f'No rate known for {base_currency.upper()}/{target_currency.upper()}')
            )
            return

        self.stdout.write(
            self.style.SUCCESS(
                f'{rate.base_currency}/{rate.target_currency} on {rate.context.day}: {rate.factor}'
            )
        )
        for leg in rate.chain:
            self.stdout.write(f'  via {leg.base_currency}/{leg.target_currency}: {leg.factor}')
