"""Execution control commands (pause/resume/step/step-and-draw)."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Protocol, Set

from .events import COMMAND_FAILED, COMMAND_SENT, CommandEvent, EventBus
from .transport import TransportError

LOGGER = logging.getLogger("rip8dbg.commands")

CONTROL_ENDPOINTS: Dict[str, str] = {
    "pause": "/pause",
    "resume": "/resume",
    "step": "/step-next",
    "step_draw": "/step-next-draw",
}


class Poster(Protocol):
    async def post(self, path: str) -> str: ...


class CommandClient:
    """One-shot control requests. Holds no target state.

    The effect of a command only shows up on the next poll. Commands are not
    queued or ordered; two in flight at once may reach the server in any order.
    """

    def __init__(self, transport: Poster, *, bus: Optional[EventBus] = None) -> None:
        self.transport = transport
        self.bus = bus
        self._tasks: Set[asyncio.Task] = set()

    async def send(self, command: str) -> bool:
        path = CONTROL_ENDPOINTS[command]
        try:
            await self.transport.post(path)
        except TransportError as exc:
            LOGGER.info("%s failed: %s", command, exc)
            self._publish(COMMAND_FAILED, command, error=str(exc))
            return False
        self._publish(COMMAND_SENT, command)
        return True

    def dispatch(self, command: str) -> asyncio.Task:
        """Send *command* in the background and return immediately."""
        if command not in CONTROL_ENDPOINTS:
            raise KeyError(f"unknown control command '{command}'")
        task = asyncio.create_task(self.send(command))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def pause(self) -> bool:
        return await self.send("pause")

    async def resume(self) -> bool:
        return await self.send("resume")

    async def step(self) -> bool:
        return await self.send("step")

    async def step_draw(self) -> bool:
        return await self.send("step_draw")

    async def drain(self) -> None:
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _publish(self, event_type: str, command: str, *, error: Optional[str] = None) -> None:
        if self.bus is None:
            return
        self.bus.publish(CommandEvent(type=event_type, command=command, error=error))
