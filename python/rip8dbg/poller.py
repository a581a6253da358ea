"""Periodic state poller for rip8dbg."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Set

from .channels import CHANNEL_NAMES, SnapshotDecodeError, get_channel
from .events import CHANNEL_UPDATE, ChannelUpdateEvent, EventBus
from .state import ClientState
from .transport import TransportError

LOGGER = logging.getLogger("rip8dbg.poller")

DEFAULT_POLL_INTERVAL = 1.0


class Getter(Protocol):
    async def get(self, path: str) -> str: ...


@dataclass
class PollerConfig:
    interval: float = DEFAULT_POLL_INTERVAL
    channels: Sequence[str] = field(default_factory=lambda: CHANNEL_NAMES)


class StatePoller:
    """Keeps ``ClientState`` snapshots in step with the debug server.

    Each tick issues one GET per channel. Requests are independent: a failure
    or a slow response on one channel never touches another, and a request
    still in flight does not hold back the next tick. A channel whose previous
    request has not come back is skipped on that tick rather than stacking a
    second request behind it.
    """

    def __init__(
        self,
        transport: Getter,
        state: ClientState,
        *,
        bus: Optional[EventBus] = None,
        config: Optional[PollerConfig] = None,
    ) -> None:
        self.transport = transport
        self.state = state
        self.bus = bus
        self.config = config or PollerConfig()
        self.ticks = 0
        self._task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        self._outstanding: Dict[str, int] = {}

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def busy_channels(self) -> List[str]:
        """Channels with a request still awaiting its response."""
        return [name for name, count in self._outstanding.items() if count > 0]

    async def poll_channel(self, name: str) -> bool:
        channel = get_channel(name)
        seq = self.state.next_request_seq(name)
        self._outstanding[name] = self._outstanding.get(name, 0) + 1
        try:
            body = await self.transport.get(channel.path)
            value = channel.decode(body)
        except (TransportError, SnapshotDecodeError) as exc:
            LOGGER.debug("poll %s failed: %s", name, exc)
            self.state.record_failure(name, exc)
            return False
        finally:
            self._outstanding[name] -= 1
        snapshot = self.state.apply_snapshot(name, value, seq)
        if snapshot is None:
            LOGGER.debug("poll %s: dropped out-of-order response seq=%d", name, seq)
            return False
        if self.bus is not None:
            self.bus.publish(ChannelUpdateEvent(type=CHANNEL_UPDATE, channel=name, value=value, seq=seq))
        return True

    async def poll_once(self, channels: Optional[Sequence[str]] = None) -> Dict[str, bool]:
        """Poll *channels* (default: every configured channel) concurrently."""
        names = list(self.config.channels if channels is None else channels)
        self.ticks += 1
        results = await asyncio.gather(
            *(self.poll_channel(name) for name in names),
            return_exceptions=True,
        )
        outcome: Dict[str, bool] = {}
        for name, result in zip(names, results):
            if isinstance(result, asyncio.CancelledError):
                outcome[name] = False
            elif isinstance(result, BaseException):
                LOGGER.warning("poll %s raised unexpectedly: %r", name, result)
                self.state.record_failure(name, result)
                outcome[name] = False
            else:
                outcome[name] = bool(result)
        return outcome

    async def run(self) -> None:
        """Tick forever until cancelled."""
        interval = max(0.0, float(self.config.interval))
        while True:
            busy = set(self.busy_channels())
            names = []
            for name in self.config.channels:
                if name in busy:
                    LOGGER.debug("poll %s: previous request still pending, skipped", name)
                    self.state.record_skip(name)
                else:
                    names.append(name)
            if names:
                task = asyncio.create_task(self.poll_once(names))
                self._inflight.add(task)
                task.add_done_callback(self._inflight.discard)
            await asyncio.sleep(interval)

    def start(self) -> asyncio.Task:
        if self.running:
            assert self._task is not None
            return self._task
        self._task = asyncio.create_task(self.run())
        LOGGER.info("polling every %.3fs", self.config.interval)
        return self._task

    async def stop(self) -> None:
        task = self._task
        self._task = None
        pending = list(self._inflight)
        if task is not None:
            pending.append(task)
        for item in pending:
            item.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._inflight.clear()
