"""
Poll loop: periodically refetches the whole log and reconciles it.

The log exposes no cursor, so every cycle sees every record again. Two
mechanisms keep repeated refetches free of duplicate side effects:
- the roster only notifies on presence changes (repeat beacons are silent)
- the `last_scan` watermark only lets records newer than the previous
  cycle's newest record be delivered
"""

import asyncio
import logging
from typing import Optional

from log_social.dispatch import EventDispatcher
from log_social.models.events import SocialEvent
from log_social.models.log import EPOCH
from log_social.roster import RosterStore
from log_social.router import MessageRouter
from log_social.transport.channel import LogChannel

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_S = 10.0


class PollLoop:
    def __init__(
        self,
        roster: RosterStore,
        router: MessageRouter,
        dispatcher: EventDispatcher,
        local_identity: str,
        interval: float = DEFAULT_POLL_INTERVAL_S,
    ):
        self._roster = roster
        self._router = router
        self._dispatcher = dispatcher
        self._local_identity = local_identity
        self._interval = interval
        self._channel: Optional[LogChannel] = None
        self._agent: Optional[str] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._stopping: Optional[asyncio.Event] = None
        self._lock: Optional[asyncio.Lock] = None
        self.last_scan = EPOCH

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval(self) -> float:
        return self._interval

    def attach(self, channel: LogChannel, agent: str) -> None:
        """Point the loop at a log. The watermark carries over between logs."""
        self._channel = channel
        self._agent = agent

    async def tick(self) -> int:
        """Run one poll cycle. Returns the number of messages delivered.

        Cycles are serialized: a tick requested while another is in flight
        waits for it to complete.
        """
        if self._channel is None or self._agent is None:
            raise RuntimeError("Poll loop has no log attached")
        if self._lock is None:
            self._lock = asyncio.Lock()
        async with self._lock:
            return await self._tick(self._channel, self._agent)

    async def _tick(self, channel: LogChannel, agent: str) -> int:
        try:
            records = await channel.read_all(agent)
        except Exception as e:
            logger.warning("Skipping poll cycle, log fetch failed: %s", e)
            return 0

        watermark = self.last_scan
        newest = watermark
        delivered = 0
        try:
            for record in records:
                if record.time > newest:
                    newest = record.time
                self._roster.apply_presence(record.sender, True)
                message = self._router.route(record, self._local_identity, watermark)
                if message is not None:
                    logger.debug("Delivering message from %s", record.sender)
                    self._dispatcher.emit(SocialEvent.MESSAGE, message)
                    delivered += 1
        finally:
            # Records already seen stay behind the watermark even if the batch aborts.
            self.last_scan = newest
        return delivered

    def start(self) -> None:
        """Start the repeating task: tick now, then `interval` after each tick completes."""
        if self.running:
            return
        self._stopping = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._run(self._stopping))

    async def stop(self) -> None:
        """Stop scheduling ticks. An in-flight tick is allowed to finish."""
        if self._stopping is not None:
            self._stopping.set()
        task, self._task = self._task, None
        if task is not None:
            await task

    async def _run(self, stopping: asyncio.Event) -> None:
        while not stopping.is_set():
            try:
                await self.tick()
            except Exception:
                logger.exception("Poll cycle failed")
            try:
                await asyncio.wait_for(stopping.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                continue
