"""Breakpoint management command."""

from __future__ import annotations

import argparse
from typing import List

from rip8dbg.breakpoints import parse_address

from .base import Command, parse_args
from ..context import DebuggerContext
from ..output import emit_error, emit_result


class BreakpointCommand(Command):
    def __init__(self) -> None:
        super().__init__("break", "Manage PC breakpoints (add/remove/list)", aliases=("bp", "b"))
        parser = argparse.ArgumentParser(prog="break", add_help=False)
        sub = parser.add_subparsers(dest="subcmd")
        sub.required = True

        add = sub.add_parser("add")
        add.add_argument("address", help="Hex address, e.g. 2a0 or 0x2A0")

        remove = sub.add_parser("remove", aliases=["delete", "clear"])
        remove.add_argument("address")

        sub.add_parser("list")

        self._parser = parser

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        args = parse_args(self._parser, argv)
        if args is None:
            return 1
        action = args.subcmd
        if action == "add":
            return await self._handle_add(ctx, args.address)
        if action in ("remove", "delete", "clear"):
            return await self._handle_remove(ctx, args.address)
        if action == "list":
            return self._handle_list(ctx)
        return 1

    async def _handle_add(self, ctx: DebuggerContext, text: str) -> int:
        address = parse_address(text)
        if address is None:
            emit_error(ctx, message=f"Invalid address '{text}'")
            return 1
        if address in ctx.state.breakpoints:
            emit_error(ctx, message=f"Breakpoint at {hex(address)} already set")
            return 1
        if not await ctx.breakpoints.add(address):
            emit_error(ctx, message=f"break add {hex(address)} failed", data={"address": address})
            return 2
        emit_result(ctx, message=f"Breakpoint set at {hex(address)}", data={"address": address})
        return 0

    async def _handle_remove(self, ctx: DebuggerContext, text: str) -> int:
        address = parse_address(text)
        if address is None:
            emit_error(ctx, message=f"Invalid address '{text}'")
            return 1
        if not ctx.state.breakpoints.is_confirmed(address):
            emit_error(ctx, message=f"No breakpoint at {hex(address)}")
            return 1
        if not await ctx.breakpoints.remove(address):
            emit_error(ctx, message=f"break remove {hex(address)} failed", data={"address": address})
            return 2
        emit_result(ctx, message=f"Breakpoint removed at {hex(address)}", data={"address": address})
        return 0

    def _handle_list(self, ctx: DebuggerContext) -> int:
        confirmed = ctx.breakpoints.list()
        pending = ctx.breakpoints.pending()
        if ctx.json_output:
            emit_result(ctx, message="breakpoints", data={"breakpoints": confirmed, "pending": pending})
            return 0
        print("breakpoints:")
        if not confirmed:
            print("  (none)")
        for index, address in enumerate(confirmed, start=1):
            print(f"  #{index:<3} {hex(address)}")
        for address in pending:
            print(f"       {hex(address)} (pending)")
        return 0
