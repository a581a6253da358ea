"""Unit tests for rip8-dbg command handlers."""

from __future__ import annotations

import json
from typing import Optional

import pytest

from rip8_dbg.commands import build_registry
from rip8_dbg.commands.breakpoints import BreakpointCommand
from rip8_dbg.commands.control import PauseCommand, ResumeCommand, StepCommand, StepDrawCommand
from rip8_dbg.commands.display import DisplayCommand
from rip8_dbg.commands.inspect import InstructionCommand, RegistersCommand, SpriteCommand
from rip8_dbg.commands.memory import MemoryCommand
from rip8_dbg.commands.misc import AliasCommand, ExitCommand
from rip8_dbg.commands.status import PollCommand, StatusCommand
from rip8_dbg.context import DebuggerContext
from rip8_dbg.repl import dispatch

from rip8_fakes import FakeTransport


class StubContext(DebuggerContext):
    def __init__(self, transport: Optional[FakeTransport] = None, *, json_output: bool = False):
        super().__init__(json_output=json_output)
        self.fake = transport or FakeTransport()

    def ensure_transport(self):  # type: ignore[override]
        return self.fake


async def _polled(ctx: StubContext) -> StubContext:
    await ctx.poller.poll_once()
    return ctx


@pytest.mark.asyncio
async def test_control_commands_post_requests(capsys):
    ctx = StubContext()
    assert await PauseCommand().run(ctx, []) == 0
    assert await ResumeCommand().run(ctx, []) == 0
    assert await StepCommand().run(ctx, []) == 0
    assert await StepDrawCommand().run(ctx, []) == 0
    assert ctx.fake.posts == ["/pause", "/resume", "/step-next", "/step-next-draw"]
    out = capsys.readouterr().out
    assert "Pause requested" in out
    assert "Step-to-draw requested" in out


@pytest.mark.asyncio
async def test_control_command_failure_and_bad_args(capsys):
    transport = FakeTransport(fail_posts={"/step-next"})
    ctx = StubContext(transport)
    assert await StepCommand().run(ctx, []) == 2
    assert "error: step failed" in capsys.readouterr().out
    assert await PauseCommand().run(ctx, ["now"]) == 1
    assert transport.posts == ["/step-next"]


@pytest.mark.asyncio
async def test_breakpoint_add_list_remove(capsys):
    ctx = StubContext()
    cmd = BreakpointCommand()
    assert await cmd.run(ctx, ["add", "2a0"]) == 0
    assert await cmd.run(ctx, ["add", "0"]) == 0
    assert await cmd.run(ctx, ["list"]) == 0
    assert ctx.fake.posts == ["/add-pc-breakpoint/672", "/add-pc-breakpoint/0"]
    out = capsys.readouterr().out
    assert "Breakpoint set at 0x2a0" in out
    assert "#1   0x2a0" in out
    assert "#2   0x0" in out

    assert await cmd.run(ctx, ["remove", "2a0"]) == 0
    assert ctx.fake.posts[-1] == "/delete-pc-breakpoint/672"
    assert ctx.breakpoints.list() == [0]
    assert "Breakpoint removed at 0x2a0" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_breakpoint_rejections(capsys):
    ctx = StubContext()
    cmd = BreakpointCommand()
    assert await cmd.run(ctx, ["add", "zz"]) == 1
    assert "Invalid address 'zz'" in capsys.readouterr().out
    assert await cmd.run(ctx, ["add", "200"]) == 0
    assert await cmd.run(ctx, ["add", "0x200"]) == 1
    assert "already set" in capsys.readouterr().out
    assert await cmd.run(ctx, ["remove", "300"]) == 1
    assert "No breakpoint at 0x300" in capsys.readouterr().out
    assert await cmd.run(ctx, []) == 1
    assert ctx.fake.posts == ["/add-pc-breakpoint/512"]


@pytest.mark.asyncio
async def test_breakpoint_add_failure_rolls_back(capsys):
    ctx = StubContext(FakeTransport(fail_posts={"/add-pc-breakpoint/512"}))
    cmd = BreakpointCommand()
    assert await cmd.run(ctx, ["add", "200"]) == 2
    assert await cmd.run(ctx, ["list"]) == 0
    out = capsys.readouterr().out
    assert "error: break add 0x200 failed" in out
    assert "(none)" in out


@pytest.mark.asyncio
async def test_breakpoint_list_json(capsys):
    ctx = StubContext(json_output=True)
    cmd = BreakpointCommand()
    assert await cmd.run(ctx, ["add", "200"]) == 0
    assert json.loads(capsys.readouterr().out) == {"status": "ok", "result": {"address": 0x200}}
    assert await cmd.run(ctx, ["list"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["result"] == {"breakpoints": [0x200], "pending": []}


@pytest.mark.asyncio
async def test_memory_requires_peek(capsys):
    ctx = await _polled(StubContext())
    assert await MemoryCommand().run(ctx, []) == 1
    assert "No address peeked" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_memory_peek_and_window(capsys):
    ctx = await _polled(StubContext())
    cmd = MemoryCommand()
    assert await cmd.run(ctx, ["peek", "200"]) == 0
    out = capsys.readouterr().out
    assert "memory 0x1e0 - 0x220:" in out
    assert '  0x200: ["0x60", "0x5", "0xa2", "0xa0"' in out

    assert await cmd.run(ctx, ["window", "16"]) == 0
    out = capsys.readouterr().out
    assert "memory 0x1f8 - 0x208:" in out
    assert out.count("\n") == 3

    assert await cmd.run(ctx, ["window", "0"]) == 1
    assert "positive integer" in capsys.readouterr().out
    assert ctx.state.view.peek_window_size == 16


@pytest.mark.asyncio
async def test_memory_json_output(capsys):
    ctx = await _polled(StubContext(json_output=True))
    assert await MemoryCommand().run(ctx, ["peek", "0x200"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["status"] == "ok"
    assert payload["result"]["peek"] == 0x200
    assert payload["result"]["range"] == "0x1e0 - 0x220"


@pytest.mark.asyncio
async def test_registers_before_and_after_poll(capsys):
    ctx = StubContext()
    ctx.view
    assert await RegistersCommand().run(ctx, []) == 0
    assert "(no data)" in capsys.readouterr().out
    await _polled(ctx)
    assert await RegistersCommand().run(ctx, []) == 0
    out = capsys.readouterr().out
    assert '"PC": "0x200"' in out
    assert '"vF": "0x1"' in out


@pytest.mark.asyncio
async def test_instruction_command(capsys):
    ctx = await _polled(StubContext())
    assert await InstructionCommand().run(ctx, []) == 0
    out = capsys.readouterr().out
    assert "last instruction:\n  CLS\n" in out
    assert "next instruction:\n  LD V0, 0x5\n" in out


@pytest.mark.asyncio
async def test_sprite_command(capsys):
    ctx = await _polled(StubContext())
    cmd = SpriteCommand()
    assert await cmd.run(ctx, ["sprite"]) == 0
    out = capsys.readouterr().out
    assert out == "last drawn sprite:\n  ****....\n  *..*....\n  ****....\n"
    assert await cmd.run(ctx, []) == 0
    out = capsys.readouterr().out
    assert "last draw area:" in out
    assert "last draw result:" in out
    assert await cmd.run(ctx, ["bogus"]) == 1
    assert "Unknown sprite slot(s): bogus" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_status_and_poll_commands(capsys):
    transport = FakeTransport()
    ctx = StubContext(transport)
    assert await PollCommand().run(ctx, []) == 0
    assert "Polled all channels" in capsys.readouterr().out

    transport.routes.pop("/memory")
    assert await PollCommand().run(ctx, []) == 2
    assert "failed: memory" in capsys.readouterr().out

    assert await StatusCommand().run(ctx, []) == 0
    out = capsys.readouterr().out
    assert "Target http://localhost:8000 (idle, every 1s)" in out
    assert "HTTP 404" in out


@pytest.mark.asyncio
async def test_display_prints_changed_sinks(capsys):
    ctx = StubContext()
    cmd = DisplayCommand()
    assert await cmd.run(ctx, ["registers"]) == 0
    capsys.readouterr()
    await _polled(ctx)
    out = capsys.readouterr().out
    assert "[registers]" in out
    assert "[memory]" not in out

    assert await cmd.run(ctx, ["nope"]) == 1
    assert "Unknown sink(s): nope" in capsys.readouterr().out
    assert await cmd.run(ctx, ["off"]) == 0


@pytest.mark.asyncio
async def test_alias_and_dispatch(capsys):
    ctx = StubContext()
    registry = build_registry()
    assert await AliasCommand().run(ctx, ["go", "resume"]) == 0
    assert await dispatch(ctx, registry, "go") == 0
    assert await dispatch(ctx, registry, "c") == 0
    assert ctx.fake.posts == ["/resume", "/resume"]
    capsys.readouterr()

    assert await dispatch(ctx, registry, "frobnicate") == 1
    assert "Unknown command: frobnicate" in capsys.readouterr().out
    assert await dispatch(ctx, registry, 'break add "200') == 1
    assert "Parse error" in capsys.readouterr().out
    assert await dispatch(ctx, registry, "   ") == 0


@pytest.mark.asyncio
async def test_help_and_exit(capsys):
    ctx = StubContext()
    registry = build_registry()
    assert await dispatch(ctx, registry, "help") == 0
    out = capsys.readouterr().out
    assert "break" in out
    assert "stepdraw" in out
    with pytest.raises(SystemExit):
        await ExitCommand().run(ctx, [])
