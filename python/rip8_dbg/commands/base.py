"""Command base classes for rip8-dbg."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..context import DebuggerContext


@dataclass
class Command:
    """Abstract command description."""

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)

    async def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        raise NotImplementedError("Command must implement run()")

    def format_help(self) -> str:
        return f"{self.name:<12} {self.description}"


def parse_args(parser: argparse.ArgumentParser, argv: List[str]) -> Optional[argparse.Namespace]:
    """Parse *argv*, returning ``None`` instead of exiting on bad input."""
    try:
        return parser.parse_args(argv)
    except SystemExit:
        return None
