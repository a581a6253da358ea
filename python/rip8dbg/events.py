"""Event bus utilities and typed event helpers for rip8dbg."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

LOGGER = logging.getLogger("rip8dbg.events")

EventHandler = Callable[["BaseEvent"], None]

CHANNEL_UPDATE = "channel_update"
BREAKPOINT_ADDED = "breakpoint_added"
BREAKPOINT_REMOVED = "breakpoint_removed"
BREAKPOINT_FAILED = "breakpoint_failed"
COMMAND_SENT = "command_sent"
COMMAND_FAILED = "command_failed"


def _now() -> float:
    return time.time()


@dataclass
class BaseEvent:
    type: str
    ts: float = field(default_factory=_now)


@dataclass
class ChannelUpdateEvent(BaseEvent):
    channel: str = ""
    value: Any = None
    seq: int = 0


@dataclass
class BreakpointEvent(BaseEvent):
    address: int = 0
    op: str = ""
    error: Optional[str] = None


@dataclass
class CommandEvent(BaseEvent):
    command: str = ""
    error: Optional[str] = None


@dataclass
class EventSubscription:
    categories: Optional[List[str]] = None
    handler: EventHandler = lambda event: None

    def matches(self, event: BaseEvent) -> bool:
        return not self.categories or event.type in self.categories


class EventBus:
    """Fan-out events to subscribers on the caller's thread.

    Everything in rip8dbg runs on one asyncio loop, so dispatch is immediate;
    a failing handler is logged and never reaches the publisher.
    """

    def __init__(self) -> None:
        self._subs: Dict[int, EventSubscription] = {}
        self._next_token = 1

    def subscribe(self, sub: EventSubscription) -> int:
        token = self._next_token
        self._next_token += 1
        self._subs[token] = sub
        return token

    def on(self, categories: List[str], handler: EventHandler) -> int:
        return self.subscribe(EventSubscription(categories=list(categories), handler=handler))

    def unsubscribe(self, token: int) -> None:
        self._subs.pop(token, None)

    def publish(self, event: BaseEvent) -> None:
        for sub in list(self._subs.values()):
            if not sub.matches(event):
                continue
            try:
                sub.handler(event)
            except Exception:
                LOGGER.exception("event handler failed for %s", event.type)
