"""Shared fixtures: an in-memory append-only log standing in for the HTTP log."""

import asyncio
from datetime import timedelta
from typing import Any, Optional

import pytest

from log_social.errors import TransportError
from log_social.models.log import EPOCH, LogRecord


class InMemoryLog:
    """Append-only log shared by every channel opened on it.

    Each append is stamped one second after the previous one, starting at
    EPOCH + 1s, so timestamps are deterministic.
    """

    def __init__(self) -> None:
        self.entries: list[tuple[str, LogRecord]] = []
        self.fail_reads = False
        self.fail_appends = False
        self.reads = 0
        self.reads_completed = 0
        self.reads_in_flight = 0
        self.max_reads_in_flight = 0
        # When set to an unset Event, reads block until it is set.
        self.read_gate: Optional[asyncio.Event] = None
        # Yield to the event loop before each append, as a network append would.
        self.yield_on_append = False
        self.opened: list["InMemoryChannel"] = []

    def add(self, agent: str, sender: str, msg: str, seconds: Optional[float] = None) -> LogRecord:
        if seconds is None:
            seconds = len(self.entries) + 1
        record = LogRecord(sender=sender, msg=msg, time=EPOCH + timedelta(seconds=seconds))
        self.entries.append((agent, record))
        return record

    def channel(self, url: str) -> "InMemoryChannel":
        channel = InMemoryChannel(self, url)
        self.opened.append(channel)
        return channel


class InMemoryChannel:
    def __init__(self, log: InMemoryLog, url: str):
        self._log = log
        self.url = url
        self.closed = False

    async def read_all(self, agent: str) -> list[LogRecord]:
        self._log.reads += 1
        if self._log.fail_reads:
            raise TransportError("log unreachable")
        self._log.reads_in_flight += 1
        self._log.max_reads_in_flight = max(self._log.max_reads_in_flight, self._log.reads_in_flight)
        try:
            if self._log.read_gate is not None:
                await self._log.read_gate.wait()
        finally:
            self._log.reads_in_flight -= 1
        self._log.reads_completed += 1
        return [record for a, record in self._log.entries if a == agent]

    async def append(self, agent: str, sender: str, msg: str) -> dict[str, Any]:
        if self._log.yield_on_append:
            await asyncio.sleep(0)
        if self._log.fail_appends:
            raise TransportError("log unreachable")
        self._log.add(agent, sender, msg)
        return {"success": True}

    async def close(self) -> None:
        self.closed = True


class EventRecorder:
    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def __call__(self, event: str, payload: Any) -> None:
        self.events.append((event, payload))

    def of(self, event: str) -> list[Any]:
        return [payload for name, payload in self.events if name == event]


@pytest.fixture
def shared_log() -> InMemoryLog:
    return InMemoryLog()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()
