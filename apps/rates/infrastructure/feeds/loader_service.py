"""
Feed loader - downloads feed documents and hands them to registered listeners.

Loads run off the query path: synchronously for commands, on a thread pool for
the running service, and optionally re-armed on a fixed interval.
"""

import io
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import BinaryIO, Callable, Dict, List, Mapping

import requests

from apps.rates.domain.interfaces import FeedConfig


logger = logging.getLogger(__name__)

FeedListener = Callable[[str, BinaryIO], object]


class FeedLoader:

    def __init__(self, feeds: Mapping[str, FeedConfig], timeout: float = 10, max_workers: int = 2):
        self._feeds = dict(feeds)
        self._timeout = timeout
        self._listeners: Dict[str, List[FeedListener]] = {}
        self._listeners_lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="feed-loader")
        self._timers: Dict[str, threading.Timer] = {}
        self._closed = False

    def add_listener(self, data_id: str, listener: FeedListener) -> None:
        if data_id not in self._feeds:
            raise ValueError(f"Unknown feed '{data_id}'")
        with self._listeners_lock:
            self._listeners.setdefault(data_id, []).append(listener)

    def remove_listener(self, data_id: str, listener: FeedListener) -> None:
        with self._listeners_lock:
            listeners = self._listeners.get(data_id, [])
            if listener in listeners:
                listeners.remove(listener)

    def fetch(self, data_id: str) -> bytes | None:
        """
        Download the raw feed document.

        Returns:
            Response body, or None if the download failed
        """
        feed = self._feeds[data_id]
        try:
            response = requests.get(feed.url, timeout=self._timeout)
            response.raise_for_status()
            return response.content

        except requests.exceptions.Timeout:
            logger.warning("Timeout downloading feed %s from %s", data_id, feed.url)
            return None
        except requests.exceptions.HTTPError as e:
            logger.warning("HTTP error downloading feed %s: %s", data_id, e)
            return None
        except requests.exceptions.RequestException as e:
            logger.warning("Failed to download feed %s: %s", data_id, e)
            return None

    def load_data(self, data_id: str) -> bool:
        """
        Download a feed and notify its listeners.

        Returns:
            True if the document was downloaded and delivered
        """
        content = self.fetch(data_id)
        if content is None:
            return False
        self.notify(data_id, content)
        return True

    def notify(self, data_id: str, content: bytes) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners.get(data_id, []))
        for listener in listeners:
            listener(data_id, io.BytesIO(content))

    def load_data_async(self, data_id: str) -> Future:
        if data_id not in self._feeds:
            raise ValueError(f"Unknown feed '{data_id}'")
        return self._executor.submit(self.load_data, data_id)

    def schedule(self, data_id: str, interval: float) -> None:
        """Reload a feed every interval seconds until shutdown()."""
        if interval <= 0:
            raise ValueError("interval must be positive")
        if data_id not in self._feeds:
            raise ValueError(f"Unknown feed '{data_id}'")

        def run():
            # shutdown() flips _closed under the same lock before closing the executor
            with self._listeners_lock:
                if self._closed:
                    return
                self._executor.submit(self.load_data, data_id)
            self.schedule(data_id, interval)

        timer = threading.Timer(interval, run)
        timer.daemon = True
        timer.name = f"feed-refresh-{data_id}"
        with self._listeners_lock:
            if self._closed:
                return
            previous = self._timers.get(data_id)
            if previous is not None:
                previous.cancel()
            self._timers[data_id] = timer
        timer.start()

    def shutdown(self, wait: bool = False) -> None:
        with self._listeners_lock:
            self._closed = True
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        self._executor.shutdown(wait=wait)
