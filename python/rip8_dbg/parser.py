"""Command line tokenising for rip8-dbg."""

from __future__ import annotations

import shlex
from typing import List, NamedTuple, Optional


class ParsedLine(NamedTuple):
    argv: List[str]
    error: Optional[str] = None


def split_command(line: str) -> ParsedLine:
    """Split *line* with shell quoting rules; ``#`` starts a comment."""
    if not line or not line.strip():
        return ParsedLine([])
    try:
        return ParsedLine(shlex.split(line, comments=True, posix=True))
    except ValueError as exc:
        return ParsedLine([], str(exc))
