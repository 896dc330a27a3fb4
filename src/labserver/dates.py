"""
=============================================================================
DATE PROVIDER
=============================================================================

Formats the current server time for the getDate page and for the
timestamps printed on confirmation and error pages.

Two formats are used:

    current_date()   "Sun Oct 18 2026 14:03:22"     local time, for humans
    timestamp()      "2026-10-18T14:03:22.123Z"     UTC, ISO-8601

The clock is a plain callable so tests can pin the time:

    dates = DateProvider(clock=lambda: datetime(2026, 1, 15, 12, 30))
    dates.current_date()   # "Thu Jan 15 2026 12:30:00"

=============================================================================
"""

from datetime import datetime, timezone
from typing import Callable, Optional


# strptime-compatible, so the rendered date can be parsed back
DATE_FORMAT = "%a %b %d %Y %H:%M:%S"

Clock = Callable[[], datetime]


def _local_now() -> datetime:
    return datetime.now().astimezone()


class DateProvider:
    """
    Produces formatted representations of the current time.

    Stateless apart from the injected clock. Reading the clock is the only
    side effect.
    """

    def __init__(self, clock: Optional[Clock] = None, date_format: str = DATE_FORMAT):
        """
        Args:
            clock: Callable returning "now". Defaults to local wall time.
            date_format: strftime pattern for current_date().
        """
        self._clock = clock or _local_now
        self.date_format = date_format

    def now(self) -> datetime:
        """Current time as returned by the clock."""
        return self._clock()

    def current_date(self) -> str:
        """Current server date in the human-readable page format."""
        return self.now().strftime(self.date_format)

    def timestamp(self) -> str:
        """
        Current time as an ISO-8601 UTC string with milliseconds.

        Naive datetimes from the clock are taken to be UTC.
        """
        now = self.now()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        now = now.astimezone(timezone.utc)
        return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def current_date() -> str:
    """Current server date using the default clock."""
    return DateProvider().current_date()
