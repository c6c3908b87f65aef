import pytest
import requests
from unittest.mock import Mock

from apps.rates.domain.interfaces import FeedConfig
from apps.rates.infrastructure.feeds.loader_service import FeedLoader


FEED = FeedConfig(
    name="ecb_current",
    url="https://example.test/eurofxref-daily.xml",
    provider="ECB",
    base_currency="EUR",
)


@pytest.fixture
def feed_loader():
    loader = FeedLoader({FEED.name: FEED}, timeout=5)
    yield loader
    loader.shutdown(wait=True)


@pytest.fixture
def mock_requests_get(mocker):
    return mocker.patch("requests.get")


def ok_response(content: bytes) -> Mock:
    response = Mock()
    response.content = content
    response.raise_for_status.return_value = None
    return response


def test_load_data_notifies_listeners(feed_loader, mock_requests_get):
    """
    Test that a downloaded document is handed to every listener as a stream.
    """
    mock_requests_get.return_value = ok_response(b"<Envelope/>")
    received = []
    feed_loader.add_listener("ecb_current", lambda data_id, stream: received.append((data_id, stream.read())))
    feed_loader.add_listener("ecb_current", lambda data_id, stream: received.append((data_id, stream.read())))

    assert feed_loader.load_data("ecb_current") is True

    assert received == [("ecb_current", b"<Envelope/>"), ("ecb_current", b"<Envelope/>")]
    mock_requests_get.assert_called_once_with(FEED.url, timeout=5)


def test_load_data_timeout(feed_loader, mock_requests_get):
    """
    Test that a timeout is reported as a failed load and listeners are not called.
    """
    mock_requests_get.side_effect = requests.exceptions.Timeout()
    listener = Mock()
    feed_loader.add_listener("ecb_current", listener)

    assert feed_loader.load_data("ecb_current") is False
    listener.assert_not_called()


def test_load_data_http_error(feed_loader, mock_requests_get):
    response = Mock()
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("503 Server Error")
    mock_requests_get.return_value = response

    assert feed_loader.load_data("ecb_current") is False


def test_load_data_connection_error(feed_loader, mock_requests_get):
    mock_requests_get.side_effect = requests.exceptions.ConnectionError("refused")

    assert feed_loader.fetch("ecb_current") is None


def test_load_data_async(feed_loader, mock_requests_get):
    """
    Test that an async load runs on the pool and resolves to the load result.
    """
    mock_requests_get.return_value = ok_response(b"<Envelope/>")
    listener = Mock()
    feed_loader.add_listener("ecb_current", listener)

    future = feed_loader.load_data_async("ecb_current")

    assert future.result(timeout=5) is True
    listener.assert_called_once()


def test_remove_listener(feed_loader, mock_requests_get):
    mock_requests_get.return_value = ok_response(b"<Envelope/>")
    listener = Mock()
    feed_loader.add_listener("ecb_current", listener)
    feed_loader.remove_listener("ecb_current", listener)

    feed_loader.load_data("ecb_current")

    listener.assert_not_called()


def test_unknown_feed_rejected(feed_loader):
    with pytest.raises(ValueError):
        feed_loader.add_listener("ecb_hist", Mock())
    with pytest.raises(ValueError):
        feed_loader.load_data_async("ecb_hist")


def test_schedule_reloads(feed_loader, mocker):
    """
    Test that a scheduled feed is reloaded when its timer fires.
    """
    executor = mocker.patch.object(feed_loader, "_executor")
    timers = []
    timer_class = mocker.patch("apps.rates.infrastructure.feeds.loader_service.threading.Timer")
    timer_class.side_effect = lambda interval, run: timers.append((interval, run)) or Mock()

    feed_loader.schedule("ecb_current", 60)
    interval, run = timers[0]
    run()

    assert interval == 60
    executor.submit.assert_called_once_with(feed_loader.load_data, "ecb_current")
    assert len(timers) == 2


def test_schedule_rejects_bad_interval(feed_loader):
    with pytest.raises(ValueError):
        feed_loader.schedule("ecb_current", 0)


def test_shutdown_cancels_timers(mocker):
    loader = FeedLoader({FEED.name: FEED})
    timer = Mock()
    mocker.patch("apps.rates.infrastructure.feeds.loader_service.threading.Timer", return_value=timer)

    loader.schedule("ecb_current", 60)
    loader.shutdown()

    timer.start.assert_called_once()
    timer.cancel.assert_called_once()


def test_timer_firing_after_shutdown_is_ignored(mocker):
    """
    Test that a refresh timer racing shutdown() neither submits work nor re-arms.
    """
    loader = FeedLoader({FEED.name: FEED})
    timers = []
    timer_class = mocker.patch("apps.rates.infrastructure.feeds.loader_service.threading.Timer")
    timer_class.side_effect = lambda interval, run: timers.append(run) or Mock()
    load_data = mocker.patch.object(loader, "load_data")

    loader.schedule("ecb_current", 60)
    loader.shutdown(wait=True)
    timers[0]()

    load_data.assert_not_called()
    assert len(timers) == 1
