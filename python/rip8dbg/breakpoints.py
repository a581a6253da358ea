"""Program-counter breakpoint reconciliation."""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Protocol, Set

from .events import BREAKPOINT_ADDED, BREAKPOINT_FAILED, BREAKPOINT_REMOVED, BreakpointEvent, EventBus
from .state import ClientState
from .transport import TransportError

LOGGER = logging.getLogger("rip8dbg.breakpoints")

MAX_ADDRESS = 0xFFFF


class Poster(Protocol):
    async def post(self, path: str) -> str: ...


def parse_address(value: Any) -> Optional[int]:
    """Parse a hex address (``"2a0"``, ``"0x2A0"``) or a plain int.

    Returns ``None`` for anything that is not an address in ``0..0xFFFF``.
    ``0`` is a valid address, so callers must test the result with ``is None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        address = value
    elif isinstance(value, str):
        text = value.strip()
        if not text or text.startswith(("-", "+")):
            return None
        try:
            address = int(text, 16)
        except ValueError:
            return None
    else:
        return None
    if address < 0 or address > MAX_ADDRESS:
        return None
    return address


class BreakpointManager:
    """Owns the local breakpoint mirror and reconciles it with the server.

    Adds are optimistic: the address goes into the mirror before the request
    is sent, so a second add of the same address is refused straight away.
    The entry only becomes visible once the server confirms it, and is rolled
    back if the request fails or is cancelled. Removes wait for the server,
    and a second remove of an address already being removed is refused.
    """

    def __init__(self, transport: Poster, state: ClientState, *, bus: Optional[EventBus] = None) -> None:
        self.transport = transport
        self.state = state
        self.bus = bus
        self._removing: Set[int] = set()

    @property
    def breakpoints(self):
        return self.state.breakpoints

    def list(self) -> List[int]:
        return self.breakpoints.confirmed()

    def pending(self) -> List[int]:
        return self.breakpoints.pending()

    async def add(self, value: Any) -> bool:
        address = parse_address(value)
        if address is None:
            LOGGER.debug("add breakpoint: rejected %r", value)
            return False
        if not self.breakpoints.add_pending(address):
            LOGGER.debug("add breakpoint: 0x%x already present", address)
            return False
        try:
            await self.transport.post(f"/add-pc-breakpoint/{address}")
        except TransportError as exc:
            self.breakpoints.discard(address)
            LOGGER.info("add breakpoint 0x%x failed, rolled back: %s", address, exc)
            self._publish(BREAKPOINT_FAILED, address, op="add", error=str(exc))
            return False
        except BaseException:
            # cancelled while in flight: the server may or may not have it
            self.breakpoints.discard(address)
            raise
        self.breakpoints.confirm(address)
        self._publish(BREAKPOINT_ADDED, address, op="add")
        return True

    async def remove(self, value: Any) -> bool:
        address = parse_address(value)
        if address is None or not self.breakpoints.is_confirmed(address):
            LOGGER.debug("remove breakpoint: rejected %r", value)
            return False
        if address in self._removing:
            LOGGER.debug("remove breakpoint: 0x%x already being removed", address)
            return False
        self._removing.add(address)
        try:
            await self.transport.post(f"/delete-pc-breakpoint/{address}")
        except TransportError as exc:
            LOGGER.info("remove breakpoint 0x%x failed: %s", address, exc)
            self._publish(BREAKPOINT_FAILED, address, op="remove", error=str(exc))
            return False
        finally:
            self._removing.discard(address)
        self.breakpoints.discard(address)
        self._publish(BREAKPOINT_REMOVED, address, op="remove")
        return True

    def _publish(self, event_type: str, address: int, *, op: str, error: Optional[str] = None) -> None:
        if self.bus is None:
            return
        self.bus.publish(BreakpointEvent(type=event_type, address=address, op=op, error=error))
