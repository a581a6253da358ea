"""Auto-display of view sinks as they change."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import DebuggerContext
from ..output import emit_error, emit_result


class DisplayCommand(Command):
    """``display registers memory`` prints those sinks whenever they change."""

    def __init__(self) -> None:
        super().__init__("display", "Print sinks on every change (display SINK...|off)", aliases=("disp",))
        self._watched: set[str] = set()
        self._bound = False

    def _on_sink(self, name: str, text: str) -> None:
        if name not in self._watched:
            return
        print(f"[{name}]")
        print(text.rstrip("\n") or "  (no data)")

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        if not argv:
            emit_result(ctx, message=f"Displaying: {', '.join(sorted(self._watched)) or '(nothing)'}", data={"sinks": sorted(self._watched)})
            return 0
        if argv == ["off"]:
            self._watched.clear()
            emit_result(ctx, message="Display off", data={"sinks": []})
            return 0
        names = ctx.sinks.names()
        unknown = [name for name in argv if name not in names]
        if unknown:
            emit_error(ctx, message=f"Unknown sink(s): {', '.join(unknown)}", data={"known": names})
            return 1
        if not self._bound:
            ctx.sinks.add_listener(self._on_sink)
            self._bound = True
        self._watched.update(argv)
        emit_result(ctx, message=f"Displaying: {', '.join(sorted(self._watched))}", data={"sinks": sorted(self._watched)})
        return 0
