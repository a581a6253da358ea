"""Connection and polling status command."""

from __future__ import annotations

import time
from typing import List

from .base import Command
from ..context import DebuggerContext
from ..output import emit_result


class StatusCommand(Command):
    def __init__(self) -> None:
        super().__init__("status", "Show target and per-channel poll status", aliases=("info",))

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        poller = ctx.poller
        channels = {name: stats.as_dict() for name, stats in ctx.state.stats.items()}
        data = {
            "host": ctx.base_url,
            "interval": ctx.poll_interval,
            "polling": poller.running,
            "ticks": poller.ticks,
            "channels": channels,
        }
        state = "polling" if poller.running else "idle"
        emit_result(ctx, message=f"Target {ctx.base_url} ({state}, every {ctx.poll_interval:g}s)", data=data)
        if ctx.json_output:
            return 0
        now = time.time()
        print(f"  {'channel':<18} {'ok':>6} {'fail':>6} {'stale':>6} {'skip':>6}  age     last error")
        for name, stats in ctx.state.stats.items():
            age = "-" if stats.last_update is None else f"{now - stats.last_update:.1f}s"
            error = stats.last_error or ""
            print(f"  {name:<18} {stats.successes:>6} {stats.failures:>6} {stats.stale:>6} {stats.skipped:>6}  {age:<7} {error}")
        return 0


class PollCommand(Command):
    def __init__(self) -> None:
        super().__init__("poll", "Poll every channel once now", aliases=("refresh",))

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        outcome = await ctx.poller.poll_once()
        failed = sorted(name for name, ok in outcome.items() if not ok)
        message = "Polled all channels" if not failed else f"Polled; failed: {', '.join(failed)}"
        emit_result(ctx, message=message, data={"channels": outcome})
        return 0 if not failed else 2
