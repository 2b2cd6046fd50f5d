"""Optional activity log for monitoring bot traffic."""

import logging
from dataclasses import dataclass
from typing import Protocol

_logger = logging.getLogger(__name__)


class ActivityRepository(Protocol):
    """Persistence interface for activity events."""

    def create_event(
        self, sender: str, event_type: str, details: dict[str, object]
    ) -> None:
        """Create an activity event row."""


@dataclass
class ActivityService:
    """Record activity events without ever failing the caller."""

    repository: ActivityRepository | None = None

    def record(
        self, event_type: str, sender: str, details: dict[str, object] | None = None
    ) -> None:
        """Persist an activity event when a repository is configured."""
        if self.repository is None:
            return
        try:
            self.repository.create_event(
                sender=sender, event_type=event_type, details=details or {}
            )
        except Exception:
            _logger.exception(
                "Failed to record activity event", extra={"event_type": event_type}
            )
