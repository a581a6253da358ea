"""
rip8dbg - client toolkit for the rip8 CHIP-8 debug server.

The server exposes its state only through polled HTTP endpoints, so this
package keeps an eventually-consistent local copy and renders it as text:

    transport.py   → HTTP requests (requests, run off the event loop)
    channels.py    → polled endpoints and response decoders
    state.py       → ClientState: snapshots, breakpoint mirror, view config
    events.py      → event bus shared by the components below
    poller.py      → periodic polling of every channel
    breakpoints.py → optimistic breakpoint add/remove with rollback
    commands.py    → pause/resume/step control requests
    formatting.py  → hex display, memory windows, sprites, instructions
    view.py        → named output sinks kept current from state events
"""

from .transport import DEFAULT_BASE_URL, HTTPTransport, TransportConfig, TransportError  # noqa: F401
from .channels import CHANNEL_NAMES, CHANNELS, SnapshotDecodeError  # noqa: F401
from .state import BreakpointSet, ChannelSnapshot, ClientState, ViewConfig  # noqa: F401
from .events import (  # noqa: F401
    BaseEvent,
    BreakpointEvent,
    ChannelUpdateEvent,
    CommandEvent,
    EventBus,
    EventSubscription,
)
from .poller import PollerConfig, StatePoller  # noqa: F401
from .breakpoints import BreakpointManager, parse_address  # noqa: F401
from .commands import CONTROL_ENDPOINTS, CommandClient  # noqa: F401
from .formatting import (  # noqa: F401
    format_instruction,
    format_snapshot,
    format_sprite,
    format_window,
    format_window_caption,
    hexify,
    window_bounds,
)
from .view import SINK_NAMES, StateView, ViewSinks  # noqa: F401

__all__ = [
    "DEFAULT_BASE_URL",
    "HTTPTransport",
    "TransportConfig",
    "TransportError",
    "CHANNEL_NAMES",
    "CHANNELS",
    "SnapshotDecodeError",
    "BreakpointSet",
    "ChannelSnapshot",
    "ClientState",
    "ViewConfig",
    "BaseEvent",
    "BreakpointEvent",
    "ChannelUpdateEvent",
    "CommandEvent",
    "EventBus",
    "EventSubscription",
    "PollerConfig",
    "StatePoller",
    "BreakpointManager",
    "parse_address",
    "CONTROL_ENDPOINTS",
    "CommandClient",
    "format_instruction",
    "format_snapshot",
    "format_sprite",
    "format_window",
    "format_window_caption",
    "hexify",
    "window_bounds",
    "SINK_NAMES",
    "StateView",
    "ViewSinks",
]

__version__ = "0.1.0"
