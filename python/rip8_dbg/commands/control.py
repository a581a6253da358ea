"""Execution control commands (pause/resume/step/stepdraw)."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import DebuggerContext
from ..output import emit_error, emit_result


class ControlCommand(Command):
    """Sends one control request; the effect shows up on the next poll."""

    def __init__(self, name: str, description: str, control: str, done: str, *, aliases=()) -> None:
        super().__init__(name, description, aliases=aliases)
        self.control = control
        self.done = done

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        if argv:
            emit_error(ctx, message=f"{self.name} takes no arguments")
            return 1
        if not await ctx.commands.send(self.control):
            emit_error(ctx, message=f"{self.name} failed", data={"command": self.control})
            return 2
        emit_result(ctx, message=self.done, data={"command": self.control})
        return 0


class PauseCommand(ControlCommand):
    def __init__(self) -> None:
        super().__init__("pause", "Pause execution", "pause", "Pause requested")


class ResumeCommand(ControlCommand):
    def __init__(self) -> None:
        super().__init__(
            "resume",
            "Resume execution",
            "resume",
            "Resume requested",
            aliases=("continue", "cont", "c"),
        )


class StepCommand(ControlCommand):
    def __init__(self) -> None:
        super().__init__("step", "Execute the next instruction", "step", "Step requested", aliases=("s", "next"))


class StepDrawCommand(ControlCommand):
    def __init__(self) -> None:
        super().__init__(
            "stepdraw",
            "Single-step and draw",
            "step_draw",
            "Step-to-draw requested",
            aliases=("sd",),
        )
