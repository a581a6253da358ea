"""Register, instruction and sprite views."""

from __future__ import annotations

import argparse
from typing import List

from rip8dbg.channels import INSTRUCTION_CHANNELS, REGISTERS, SPRITE_CHANNELS

from .base import Command, parse_args
from ..context import DebuggerContext
from ..output import emit_error, render_sink

SPRITE_TITLES = {
    "last_drawn_sprite": "last drawn sprite",
    "last_draw_area": "last draw area",
    "last_draw_result": "last draw result",
}

SPRITE_SHORT_NAMES = {
    "sprite": "last_drawn_sprite",
    "area": "last_draw_area",
    "result": "last_draw_result",
}


class RegistersCommand(Command):
    def __init__(self) -> None:
        super().__init__("regs", "Show the register snapshot", aliases=("registers", "r"))

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        render_sink(ctx, REGISTERS, title="registers")
        return 0


class InstructionCommand(Command):
    def __init__(self) -> None:
        super().__init__("inst", "Show the last and next instruction", aliases=("instructions", "i"))

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        for channel in INSTRUCTION_CHANNELS:
            render_sink(ctx, channel, title=channel.replace("_", " "))
        return 0


class SpriteCommand(Command):
    def __init__(self) -> None:
        super().__init__("sprite", "Show the last draw (sprite/area/result)", aliases=("draw",))
        parser = argparse.ArgumentParser(prog="sprite", add_help=False)
        parser.add_argument("which", nargs="*", help="Sprite slots to show: sprite, area, result")
        self._parser = parser

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        args = parse_args(self._parser, argv)
        if args is None:
            return 1
        unknown = [name for name in args.which if name not in SPRITE_SHORT_NAMES]
        if unknown:
            emit_error(ctx, message=f"Unknown sprite slot(s): {', '.join(unknown)}")
            return 1
        channels = [SPRITE_SHORT_NAMES[name] for name in args.which] or list(SPRITE_CHANNELS)
        for channel in channels:
            render_sink(ctx, channel, title=SPRITE_TITLES[channel])
        return 0
