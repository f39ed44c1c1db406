"""
AsyncLogSocial: social client over a shared append-only log.

Login announces the local identity on the log and starts polling it;
presence and messages are then reconstructed from what the log holds.
"""

import logging
import random
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from log_social.dispatch import EventDispatcher, EventHandler
from log_social.errors import (
    AlreadyOnlineError,
    FailedConnectionError,
    InvalidDestinationError,
    OfflineError,
)
from log_social.models.log import DirectMessage
from log_social.models.roster import ClientState, ClientStatus, UserProfile
from log_social.models.session import LoginConfig
from log_social.poll import DEFAULT_POLL_INTERVAL_S, PollLoop
from log_social.roster import RosterStore
from log_social.router import MessageRouter
from log_social.transport.channel import LogChannel
from log_social.transport.http import HttpLogChannel

logger = logging.getLogger(__name__)

ANNOUNCE_PAYLOAD = "ONLINE"


def _generate_user_id() -> str:
    return f"U.{random.random()}"


class AsyncLogSocial:
    """Async social client. One client per user; user_id doubles as client_id."""

    def __init__(
        self,
        user_id: Optional[str] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL_S,
        channel_factory: Optional[Callable[[str], LogChannel]] = None,
    ):
        self._user_id = user_id or _generate_user_id()
        self._channel_factory = channel_factory or HttpLogChannel
        self._url: Optional[str] = None
        self._agent: Optional[str] = None
        self._channel: Optional[LogChannel] = None

        self._dispatcher = EventDispatcher()
        self._roster = RosterStore(self._dispatcher)
        self._poller = PollLoop(
            self._roster, MessageRouter(), self._dispatcher,
            local_identity=self._user_id, interval=poll_interval,
        )

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def online(self) -> bool:
        return self._url is not None

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def agent(self) -> Optional[str]:
        return self._agent

    @property
    def poller(self) -> PollLoop:
        return self._poller

    def add_event_handler(self, handler: EventHandler) -> Callable[[], None]:
        """Subscribe to onClientState / onUserProfile / onMessage. Returns a cleanup function."""
        return self._dispatcher.add_event_handler(handler)

    def on_event(self, handler: Optional[EventHandler]) -> None:
        self._dispatcher.on_event(handler)

    async def login(self, url: str, agent: str) -> ClientState:
        """Connect to the log at `url`, filtered by `agent`.

        Polling starts before the announce append; if the append fails the
        client is left offline and the caller has to log in again.
        """
        if self._url is not None:
            raise AlreadyOnlineError()
        try:
            channel = self._channel_factory(url)
        except Exception as e:
            raise FailedConnectionError(f"Failed to open log: {e}", {"url": url}) from e
        self._channel = channel
        self._url = url
        self._agent = agent
        self._poller.attach(channel, agent)
        self._poller.start()

        try:
            await channel.append(agent, self._user_id, ANNOUNCE_PAYLOAD)
        except Exception as e:
            logger.warning("Announce to %s failed: %s", url, e)
            # Waits out the first poll's fetch if it is still in flight, so the
            # error can take up to the channel's read timeout to surface.
            await self._go_offline()
            raise FailedConnectionError(f"Failed to connect to log: {e}", {"url": url}) from e

        logger.info("Logged in to %s as %s", url, self._user_id)
        now = datetime.now(timezone.utc)
        return ClientState.for_identity(
            self._user_id, status=ClientStatus.ONLINE, last_updated=now, last_seen=now,
        )

    async def login_with(self, config: LoginConfig) -> ClientState:
        return await self.login(config.url, config.agent)

    async def logout(self) -> None:
        if self._url is None:
            self._roster.apply_presence(self._user_id, False)
            raise OfflineError()
        url = self._url
        await self._go_offline()
        logger.info("Logged out of %s", url)
        self._roster.apply_presence(self._user_id, False)

    async def send_message(self, to: str, msg: Any) -> None:
        """Append a message for `to` on the log.

        Returns once the log acknowledges the append; there is no delivery
        receipt, the recipient may never poll it.
        """
        self._ensure_online()
        if not self._roster.knows(to):
            raise InvalidDestinationError(to)
        payload = DirectMessage(to=to, msg=msg).model_dump_json()
        await self._channel.append(self._agent, self._user_id, payload)  # type: ignore[union-attr,arg-type]

    async def get_users(self) -> dict[str, UserProfile]:
        """Best-effort snapshot of user profiles seen so far, keyed by user_id."""
        self._ensure_online()
        return self._roster.snapshot_users()

    async def get_clients(self) -> dict[str, ClientState]:
        """Best-effort snapshot of online clients, keyed by client_id."""
        self._ensure_online()
        return self._roster.snapshot_clients()

    async def __aenter__(self) -> "AsyncLogSocial":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self.online:
            await self.logout()

    async def _go_offline(self) -> None:
        await self._poller.stop()
        self._url = None
        channel, self._channel = self._channel, None
        if channel is not None:
            await channel.close()

    def _ensure_online(self) -> None:
        if self._url is None or self._channel is None:
            raise OfflineError()
