"""Client-side state owned by a single debugger front end."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .channels import CHANNEL_NAMES, MEMORY, REGISTERS

DEFAULT_PEEK_WINDOW = 64


def _now() -> float:
    return time.time()


@dataclass(frozen=True)
class ChannelSnapshot:
    """Most recent value received for one channel."""

    channel: str
    value: Any
    seq: int
    received_at: float = field(default_factory=_now)


@dataclass
class ChannelStats:
    successes: int = 0
    failures: int = 0
    stale: int = 0
    skipped: int = 0
    last_error: Optional[str] = None
    last_update: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "successes": self.successes,
            "failures": self.failures,
            "stale": self.stale,
            "skipped": self.skipped,
            "last_error": self.last_error,
            "last_update": self.last_update,
        }


class BreakpointSet:
    """Insertion-ordered mirror of the server's PC breakpoints.

    Entries start out pending (inserted before the server answered) and become
    confirmed once the add request succeeds. Only confirmed entries are shown.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, bool] = {}

    def __contains__(self, address: object) -> bool:
        return address in self._entries

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def add_pending(self, address: int) -> bool:
        if address in self._entries:
            return False
        self._entries[address] = False
        return True

    def confirm(self, address: int) -> None:
        if address in self._entries:
            self._entries[address] = True

    def discard(self, address: int) -> None:
        self._entries.pop(address, None)

    def is_confirmed(self, address: int) -> bool:
        return self._entries.get(address, False)

    def confirmed(self) -> List[int]:
        return [address for address, ok in self._entries.items() if ok]

    def pending(self) -> List[int]:
        return [address for address, ok in self._entries.items() if not ok]


@dataclass
class ViewConfig:
    """Operator controlled view parameters. Never sent to the server."""

    peek_window_size: int = DEFAULT_PEEK_WINDOW
    peek_address: Optional[int] = None

    def set_window_size(self, size: Any) -> bool:
        if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
            return False
        self.peek_window_size = size
        return True

    def set_peek_address(self, address: Optional[int]) -> bool:
        if address is None or isinstance(address, bool) or not isinstance(address, int) or address < 0:
            return False
        self.peek_address = address
        return True


@dataclass
class ClientState:
    """Aggregates everything the client knows about the target."""

    snapshots: Dict[str, ChannelSnapshot] = field(default_factory=dict)
    stats: Dict[str, ChannelStats] = field(default_factory=lambda: {name: ChannelStats() for name in CHANNEL_NAMES})
    breakpoints: BreakpointSet = field(default_factory=BreakpointSet)
    view: ViewConfig = field(default_factory=ViewConfig)
    _issued_seq: Dict[str, int] = field(default_factory=dict, repr=False)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def next_request_seq(self, channel: str) -> int:
        seq = self._issued_seq.get(channel, 0) + 1
        self._issued_seq[channel] = seq
        return seq

    def apply_snapshot(self, channel: str, value: Any, seq: int) -> Optional[ChannelSnapshot]:
        """Store *value* unless a newer response for *channel* already landed."""
        stats = self._stats_for(channel)
        current = self.snapshots.get(channel)
        if current is not None and seq <= current.seq:
            stats.stale += 1
            return None
        snapshot = ChannelSnapshot(channel=channel, value=value, seq=seq)
        self.snapshots[channel] = snapshot
        stats.successes += 1
        stats.last_error = None
        stats.last_update = snapshot.received_at
        return snapshot

    def record_skip(self, channel: str) -> None:
        self._stats_for(channel).skipped += 1

    def record_failure(self, channel: str, error: BaseException) -> None:
        stats = self._stats_for(channel)
        stats.failures += 1
        stats.last_error = str(error) or type(error).__name__

    def get_snapshot(self, channel: str) -> Optional[ChannelSnapshot]:
        return self.snapshots.get(channel)

    def value(self, channel: str, default: Any = None) -> Any:
        snapshot = self.snapshots.get(channel)
        if snapshot is None:
            return default
        return snapshot.value

    @property
    def registers(self) -> Optional[Mapping[str, int]]:
        return self.value(REGISTERS)

    @property
    def memory(self) -> Optional[bytes]:
        return self.value(MEMORY)

    def _stats_for(self, channel: str) -> ChannelStats:
        stats = self.stats.get(channel)
        if stats is None:
            stats = self.stats[channel] = ChannelStats()
        return stats
