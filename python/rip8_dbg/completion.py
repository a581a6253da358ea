"""prompt_toolkit completer for rip8-dbg."""

from __future__ import annotations

import shlex
from typing import Iterable, List, Sequence

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .commands import CommandRegistry
from .context import DebuggerContext

SUBCOMMANDS = {
    "break": ("add", "remove", "list"),
    "mem": ("show", "peek", "window"),
    "sprite": ("sprite", "area", "result"),
}


def _normalise_tokens(text: str) -> List[str]:
    if not text:
        return []
    try:
        tokens = shlex.split(text, posix=True)
        trailing = text[-1].isspace()
    except ValueError:
        tokens = text.strip().split()
        trailing = text.endswith((" ", "\t"))
    if trailing:
        tokens.append("")
    return tokens


class DebuggerCompleter(Completer):
    """Completes command names, subcommands, sink names and breakpoints."""

    def __init__(self, ctx: DebuggerContext, registry: CommandRegistry) -> None:
        self.ctx = ctx
        self.registry = registry

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        tokens = _normalise_tokens(document.text_before_cursor)
        prefix = tokens[-1] if tokens else ""
        for entry in self.candidates(tokens):
            yield Completion(entry, start_position=-len(prefix))

    def candidates(self, tokens: Sequence[str]) -> List[str]:
        if len(tokens) <= 1:
            return self._filter(self.registry.names(), tokens[0] if tokens else "")
        prefix = tokens[-1]
        command = self._canonical(tokens[0])
        if command is None:
            return []
        if command == "display":
            return self._filter(list(self.ctx.sinks.names()) + ["off"], prefix)
        if len(tokens) == 2 or command == "sprite":
            return self._filter(SUBCOMMANDS.get(command, ()), prefix)
        if (command, tokens[1]) == ("break", "remove"):
            return self._filter([hex(addr) for addr in self.ctx.state.breakpoints.confirmed()], prefix)
        return []

    def _canonical(self, name: str):
        command = self.registry.get(self.ctx.resolve_alias(name))
        return command.name if command else None

    @staticmethod
    def _filter(candidates: Iterable[str], prefix: str) -> List[str]:
        needle = prefix.lower()
        return sorted(dict.fromkeys(c for c in candidates if c.lower().startswith(needle)))
