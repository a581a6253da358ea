"""Interactive REPL for rip8-dbg."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, History, InMemoryHistory
from prompt_toolkit.patch_stdout import patch_stdout

from .commands import CommandRegistry
from .completion import DebuggerCompleter
from .context import DebuggerContext
from .parser import split_command

LOGGER = logging.getLogger("rip8_dbg.repl")

PROMPT = "rip8> "


async def dispatch(ctx: DebuggerContext, registry: CommandRegistry, line: str) -> int:
    """Run one command line. Returns the command's exit code."""
    parsed = split_command(line)
    if parsed.error is not None:
        print(f"Parse error: {parsed.error}")
        return 1
    if not parsed.argv:
        return 0
    cmd_name, *cmd_args = parsed.argv
    cmd_name = ctx.resolve_alias(cmd_name)
    command = registry.get(cmd_name)
    if not command:
        print(f"Unknown command: {cmd_name}")
        return 1
    try:
        return await command.run(ctx, cmd_args)
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover
        LOGGER.exception("command failed")
        print(f"Command '{cmd_name}' failed: {exc}")
        return 1


class DebuggerREPL:
    """prompt_toolkit REPL that keeps the poller running in the background."""

    def __init__(
        self,
        ctx: DebuggerContext,
        registry: CommandRegistry,
        *,
        history_path: Optional[str] = None,
    ) -> None:
        self.ctx = ctx
        self.registry = registry
        self.history_path = history_path

    def _history(self) -> History:
        if self.history_path:
            try:
                return FileHistory(self.history_path)
            except OSError as exc:
                LOGGER.warning("history file %s unusable: %s", self.history_path, exc)
        return InMemoryHistory()

    def run(self) -> int:
        return asyncio.run(self.run_async())

    async def run_async(self) -> int:
        session: PromptSession = PromptSession(
            PROMPT,
            history=self._history(),
            completer=DebuggerCompleter(self.ctx, self.registry),
            complete_while_typing=True,
        )
        self.ctx.start_polling()
        try:
            with patch_stdout():
                while True:
                    try:
                        line = await session.prompt_async()
                    except (EOFError, KeyboardInterrupt):
                        print()
                        return 0
                    try:
                        await dispatch(self.ctx, self.registry, line)
                    except SystemExit as exc:
                        return int(exc.code or 0)
        finally:
            await self.ctx.shutdown()
