"""Anti-abuse message limits."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

_logger = logging.getLogger(__name__)

RATE_WINDOW = timedelta(hours=1)


@dataclass
class RateLimiter:
    """Track a process-wide daily counter and per-sender hourly windows.

    Exceeding a limit is reported as ``False``; the limiter never raises.
    """

    max_messages_per_day: int = 200
    max_messages_per_number: int = 10
    clock: Callable[[], datetime] = datetime.now
    _daily_count: int = field(default=0, init=False)
    _last_reset: date = field(init=False)
    _senders: dict[str, list[datetime]] = field(default_factory=dict, init=False)

    def __post_init__(self) -> None:
        self._last_reset = self.clock().date()

    def check_daily_limit(self) -> bool:
        """Reset counters on a new calendar day and report if under the cap."""
        today = self.clock().date()
        if today != self._last_reset:
            _logger.info(
                "Resetting daily counters: previous_day=%s count=%s",
                self._last_reset,
                self._daily_count,
            )
            self._daily_count = 0
            self._last_reset = today
            self._senders.clear()
        return self._daily_count < self.max_messages_per_day

    def check_rate_limit(self, sender: str) -> bool:
        """Admit and record a message unless the sender hit the hourly cap."""
        now = self.clock()
        timestamps = [
            stamp for stamp in self._senders.get(sender, []) if now - stamp < RATE_WINDOW
        ]
        if len(timestamps) >= self.max_messages_per_number:
            self._senders[sender] = timestamps
            _logger.warning("Sender exceeded hourly limit", extra={"sender": sender})
            return False
        timestamps.append(now)
        self._senders[sender] = timestamps
        return True

    def increment_daily_count(self) -> None:
        """Count one fully processed inbound message."""
        self._daily_count += 1

    @property
    def daily_count(self) -> int:
        return self._daily_count

    @property
    def active_senders(self) -> int:
        return len(self._senders)
