"""Named view sinks and the presenter that keeps them current."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from .breakpoints import parse_address
from .channels import INSTRUCTION_CHANNELS, MEMORY, REGISTERS, SPRITE_CHANNELS
from .events import (
    BREAKPOINT_ADDED,
    BREAKPOINT_REMOVED,
    CHANNEL_UPDATE,
    BaseEvent,
    ChannelUpdateEvent,
    EventBus,
)
from .formatting import (
    format_instruction,
    format_snapshot,
    format_sprite,
    format_window,
    format_window_caption,
)
from .state import ClientState

LOGGER = logging.getLogger("rip8dbg.view")

MEMORY_RANGE = "memory_range"
BREAKPOINTS = "breakpoints"

SINK_NAMES = (
    REGISTERS,
    MEMORY,
    MEMORY_RANGE,
    *INSTRUCTION_CHANNELS,
    BREAKPOINTS,
    *SPRITE_CHANNELS,
)

SinkListener = Callable[[str, str], None]


class ViewSinks:
    """Latest rendered text per named output target."""

    def __init__(self, names=SINK_NAMES) -> None:
        self._text: Dict[str, str] = {name: "" for name in names}
        self._listeners: List[SinkListener] = []

    def names(self) -> List[str]:
        return list(self._text)

    def write(self, name: str, text: str) -> None:
        if name not in self._text:
            raise KeyError(f"unknown sink '{name}'")
        changed = self._text[name] != text
        self._text[name] = text
        if not changed:
            return
        for listener in list(self._listeners):
            try:
                listener(name, text)
            except Exception:
                LOGGER.exception("sink listener failed for %s", name)

    def read(self, name: str) -> str:
        return self._text[name]

    def add_listener(self, listener: SinkListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SinkListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass


class StateView:
    """Renders ``ClientState`` into ``ViewSinks`` as events arrive.

    Memory is re-rendered with whatever peek address and window size are
    current when a snapshot lands, not when it was requested.
    """

    def __init__(self, state: ClientState, sinks: ViewSinks, *, bus: Optional[EventBus] = None) -> None:
        self.state = state
        self.sinks = sinks
        self.bus = bus
        self._tokens: List[int] = []
        if bus is not None:
            self._tokens.append(bus.on([CHANNEL_UPDATE], self._on_channel_update))
            self._tokens.append(bus.on([BREAKPOINT_ADDED, BREAKPOINT_REMOVED], self._on_breakpoint_change))

    def detach(self) -> None:
        if self.bus is None:
            return
        for token in self._tokens:
            self.bus.unsubscribe(token)
        self._tokens.clear()

    # ------------------------------------------------------------------
    # Operator inputs
    # ------------------------------------------------------------------
    def set_peek_address(self, value: Any) -> bool:
        address = parse_address(value)
        if address is None or not self.state.view.set_peek_address(address):
            return False
        self.render_memory()
        return True

    def set_window_size(self, value: Any) -> bool:
        if isinstance(value, str):
            try:
                value = int(value.strip())
            except ValueError:
                return False
        if not self.state.view.set_window_size(value):
            return False
        self.render_memory()
        return True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_all(self) -> None:
        self.render_registers()
        self.render_memory()
        for channel in INSTRUCTION_CHANNELS:
            self.render_instruction(channel)
        for channel in SPRITE_CHANNELS:
            self.render_sprite(channel)
        self.render_breakpoints()

    def render_registers(self) -> None:
        registers = self.state.value(REGISTERS)
        self.sinks.write(REGISTERS, "" if registers is None else format_snapshot(dict(registers)))

    def render_memory(self) -> None:
        memory = self.state.value(MEMORY)
        center = self.state.view.peek_address
        if memory is None or center is None:
            self.sinks.write(MEMORY, "")
            self.sinks.write(MEMORY_RANGE, "")
            return
        size = self.state.view.peek_window_size
        self.sinks.write(MEMORY_RANGE, format_window_caption(len(memory), center, size))
        self.sinks.write(MEMORY, "".join(format_window(memory, center, size)))

    def render_instruction(self, channel: str) -> None:
        snapshot = self.state.get_snapshot(channel)
        self.sinks.write(channel, "" if snapshot is None else format_instruction(snapshot.value))

    def render_sprite(self, channel: str) -> None:
        self.sinks.write(channel, format_sprite(self.state.value(channel)))

    def render_breakpoints(self) -> None:
        entries = [f"{hex(address)}\n" for address in self.state.breakpoints.confirmed()]
        self.sinks.write(BREAKPOINTS, "".join(entries))

    def _on_channel_update(self, event: BaseEvent) -> None:
        if not isinstance(event, ChannelUpdateEvent):
            return
        channel = event.channel
        if channel == REGISTERS:
            self.render_registers()
        elif channel == MEMORY:
            self.render_memory()
        elif channel in INSTRUCTION_CHANNELS:
            self.render_instruction(channel)
        elif channel in SPRITE_CHANNELS:
            self.render_sprite(channel)

    def _on_breakpoint_change(self, event: BaseEvent) -> None:
        self.render_breakpoints()
