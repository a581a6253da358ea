"""Completion tests for rip8-dbg."""

from __future__ import annotations

from prompt_toolkit.document import Document

from rip8_dbg.commands import build_registry
from rip8_dbg.completion import DebuggerCompleter
from rip8_dbg.context import DebuggerContext


def _complete(ctx: DebuggerContext, text: str):
    completer = DebuggerCompleter(ctx, build_registry())
    doc = Document(text, cursor_position=len(text))
    return [c.text for c in completer.get_completions(doc, None)]


def test_command_completion_offers_break():
    assert "break" in _complete(DebuggerContext(), "br")


def test_subcommand_completion():
    ctx = DebuggerContext()
    assert _complete(ctx, "break ") == ["add", "list", "remove"]
    assert _complete(ctx, "mem p") == ["peek"]
    assert _complete(ctx, "bp a") == ["add"]
    assert _complete(ctx, "sprite area r") == ["result"]


def test_display_completes_sink_names():
    ctx = DebuggerContext()
    assert _complete(ctx, "display mem") == ["memory", "memory_range"]
    assert "off" in _complete(ctx, "display ")


def test_break_remove_offers_confirmed_addresses():
    ctx = DebuggerContext()
    for address in (0x200, 0x2A0, 0x300):
        ctx.state.breakpoints.add_pending(address)
    ctx.state.breakpoints.confirm(0x200)
    ctx.state.breakpoints.confirm(0x2A0)
    assert _complete(ctx, "break remove 0x2") == ["0x200", "0x2a0"]


def test_unknown_command_has_no_argument_completions():
    assert _complete(DebuggerContext(), "frob ") == []


def test_user_alias_is_resolved():
    ctx = DebuggerContext()
    ctx.set_alias("m", "mem")
    assert _complete(ctx, "m w") == ["window"]
