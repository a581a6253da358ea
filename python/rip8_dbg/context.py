"""Debugger context shared by the CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from rip8dbg.breakpoints import BreakpointManager
from rip8dbg.commands import CommandClient
from rip8dbg.events import EventBus
from rip8dbg.poller import DEFAULT_POLL_INTERVAL, PollerConfig, StatePoller
from rip8dbg.state import ClientState
from rip8dbg.transport import DEFAULT_BASE_URL, HTTPTransport, TransportConfig
from rip8dbg.view import StateView, ViewSinks

LOGGER = logging.getLogger("rip8_dbg.context")


@dataclass
class DebuggerContext:
    """Holds shared CLI debugger state and lazily built components."""

    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: Optional[float] = None
    json_output: bool = False
    aliases: Dict[str, str] = field(default_factory=dict)
    state: ClientState = field(default_factory=ClientState)
    bus: EventBus = field(default_factory=EventBus)
    sinks: ViewSinks = field(default_factory=ViewSinks)
    _transport: Optional[HTTPTransport] = field(default=None, init=False, repr=False)
    _poller: Optional[StatePoller] = field(default=None, init=False, repr=False)
    _breakpoints: Optional[BreakpointManager] = field(default=None, init=False, repr=False)
    _commands: Optional[CommandClient] = field(default=None, init=False, repr=False)
    _view: Optional[StateView] = field(default=None, init=False, repr=False)

    def ensure_transport(self):
        """Create the HTTP transport if needed."""
        if self._transport is None:
            self._transport = HTTPTransport(TransportConfig(base_url=self.base_url, timeout=self.timeout))
        return self._transport

    @property
    def view(self) -> StateView:
        if self._view is None:
            self._view = StateView(self.state, self.sinks, bus=self.bus)
        return self._view

    @property
    def poller(self) -> StatePoller:
        if self._poller is None:
            self.view  # subscribe the presenter before the first update
            self._poller = StatePoller(
                self.ensure_transport(),
                self.state,
                bus=self.bus,
                config=PollerConfig(interval=self.poll_interval),
            )
        return self._poller

    @property
    def breakpoints(self) -> BreakpointManager:
        if self._breakpoints is None:
            self.view
            self._breakpoints = BreakpointManager(self.ensure_transport(), self.state, bus=self.bus)
        return self._breakpoints

    @property
    def commands(self) -> CommandClient:
        if self._commands is None:
            self._commands = CommandClient(self.ensure_transport(), bus=self.bus)
        return self._commands

    def start_polling(self) -> None:
        self.poller.start()

    async def shutdown(self) -> None:
        if self._poller is not None:
            await self._poller.stop()
        if self._commands is not None:
            await self._commands.drain()
        transport = self._transport
        if transport is not None and hasattr(transport, "close"):
            try:
                transport.close()
            except Exception as exc:
                LOGGER.debug("transport close failed: %s", exc)
        self._transport = None

    def resolve_alias(self, name: str) -> str:
        return self.aliases.get(name, name)

    def set_alias(self, alias: str, command: str) -> None:
        if alias == command:
            self.aliases.pop(alias, None)
            return
        self.aliases[alias] = command

    def list_aliases(self) -> Dict[str, str]:
        return dict(self.aliases)
