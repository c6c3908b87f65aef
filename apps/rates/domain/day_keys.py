"""
Day key normalisation.

A day key is the epoch timestamp (milliseconds) of midnight of a calendar day in
one fixed reference time zone. The loader and the resolver must share the same
policy instance, otherwise lookups silently miss.
"""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo


class DayKeyPolicy:

    def __init__(self, time_zone: str = "UTC"):
        self.time_zone = time_zone
        self._zone = ZoneInfo(time_zone)

    def key_for(self, value: date | datetime) -> int:
        """
        Normalise a date or timestamp to its day key.

        Aware datetimes are first moved into the reference zone; naive ones are
        taken as already expressed in it.
        """
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(self._zone)
            value = value.date()
        elif not isinstance(value, date):
            raise ValueError(f"Cannot build a day key from {value!r}")
        midnight = datetime.combine(value, time.min, tzinfo=self._zone)
        return int(midnight.timestamp()) * 1000

    def timestamp_for(self, key: int) -> datetime:
        return datetime.fromtimestamp(key / 1000, self._zone)

    def day_for(self, key: int) -> date:
        return self.timestamp_for(key).date()

    def __repr__(self):
        return f"DayKeyPolicy(time_zone={self.time_zone!r})"
