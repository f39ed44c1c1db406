"""
LogChannel: the interface the client needs from an append-only log.
"""

from typing import Any, Protocol

from log_social.models.log import LogRecord


class LogChannel(Protocol):
    async def read_all(self, agent: str) -> list[LogRecord]: ...

    async def append(self, agent: str, sender: str, msg: str) -> Any: ...

    async def close(self) -> None: ...
