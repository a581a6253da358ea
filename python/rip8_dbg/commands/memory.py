"""Memory window command."""

from __future__ import annotations

import argparse
from typing import List

from rip8dbg.view import MEMORY, MEMORY_RANGE

from .base import Command, parse_args
from ..context import DebuggerContext
from ..output import emit_error, emit_result, render_sink


class MemoryCommand(Command):
    def __init__(self) -> None:
        super().__init__("mem", "Show or move the memory window (show/peek/window)", aliases=("memory", "x"))
        parser = argparse.ArgumentParser(prog="mem", add_help=False)
        sub = parser.add_subparsers(dest="subcmd")

        sub.add_parser("show")

        peek = sub.add_parser("peek")
        peek.add_argument("address", help="Hex address to centre the window on")

        window = sub.add_parser("window")
        window.add_argument("size", help="Number of bytes around the peeked address")

        self._parser = parser

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        args = parse_args(self._parser, argv)
        if args is None:
            return 1
        action = args.subcmd or "show"
        if action == "peek":
            if not ctx.view.set_peek_address(args.address):
                emit_error(ctx, message=f"Invalid address '{args.address}'")
                return 1
        elif action == "window":
            if not ctx.view.set_window_size(args.size):
                emit_error(ctx, message=f"Window size must be a positive integer, got '{args.size}'")
                return 1
        return self._show(ctx)

    def _show(self, ctx: DebuggerContext) -> int:
        view = ctx.state.view
        if view.peek_address is None:
            emit_error(ctx, message="No address peeked (use 'mem peek ADDR')")
            return 1
        caption = ctx.sinks.read(MEMORY_RANGE)
        if ctx.json_output:
            emit_result(
                ctx,
                message="memory",
                data={
                    "peek": view.peek_address,
                    "window": view.peek_window_size,
                    "range": caption,
                    "text": ctx.sinks.read(MEMORY),
                },
            )
            return 0
        title = f"memory {caption}" if caption else "memory"
        render_sink(ctx, MEMORY, title=title)
        return 0
