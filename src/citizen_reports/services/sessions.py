"""Per-sender conversation session storage."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from typing import Protocol

from citizen_reports.domain.sessions import UserSession


class SessionStore(Protocol):
    """Storage interface for conversation sessions keyed by sender."""

    def get(self, sender: str) -> UserSession:
        """Return the stored session or a fresh default one."""

    def update(self, sender: str, **changes: object) -> UserSession:
        """Merge fields into the sender's session and return the result."""

    def delete(self, sender: str) -> None:
        """Remove the sender's session."""

    def list_sessions(self) -> dict[str, UserSession]:
        """Return a snapshot of all stored sessions."""


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local session store.

    ``get`` does not store the default session; it is only created on the
    first ``update``.
    """

    _sessions: dict[str, UserSession] = field(default_factory=dict)

    def get(self, sender: str) -> UserSession:
        return self._sessions.get(sender) or UserSession()

    def update(self, sender: str, **changes: object) -> UserSession:
        updated = replace(self.get(sender), **changes, persisted=True)
        self._sessions[sender] = updated
        return updated

    def delete(self, sender: str) -> None:
        self._sessions.pop(sender, None)

    def list_sessions(self) -> dict[str, UserSession]:
        return dict(self._sessions)


@dataclass
class SenderLocks:
    """One asyncio lock per sender, dropped once nobody holds or awaits it."""

    _locks: dict[str, asyncio.Lock] = field(default_factory=dict)
    _waiters: dict[str, int] = field(default_factory=dict)

    @asynccontextmanager
    async def hold(self, sender: str) -> AsyncIterator[None]:
        """Serialize processing for a single sender."""
        lock = self._locks.setdefault(sender, asyncio.Lock())
        self._waiters[sender] = self._waiters.get(sender, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[sender] -= 1
            if not self._waiters[sender]:
                del self._waiters[sender]
                del self._locks[sender]

    @property
    def busy_senders(self) -> int:
        """Number of senders with a message in flight."""
        return len(self._locks)
