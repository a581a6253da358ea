"""rip8-dbg CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from rip8dbg.breakpoints import parse_address
from rip8dbg.poller import DEFAULT_POLL_INTERVAL
from rip8dbg.state import DEFAULT_PEEK_WINDOW
from rip8dbg.transport import DEFAULT_BASE_URL

from .commands import CommandRegistry, build_registry
from .context import DebuggerContext
from .repl import DebuggerREPL, dispatch

LOG = logging.getLogger("rip8_dbg.cli")

DEFAULT_PEEK_ADDRESS = 0x200


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {text!r}")
    return value


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {text!r}")
    return value


def _address(text: str) -> int:
    address = parse_address(text)
    if address is None:
        raise argparse.ArgumentTypeError(f"not a hex address: {text!r}")
    return address


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="rip8 CHIP-8 debugger front end")
    parser.add_argument(
        "--host",
        default=os.environ.get("RIP8_DBG_HOST", DEFAULT_BASE_URL),
        help=f"Debug server base URL (default {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--interval",
        type=_positive_float,
        default=os.environ.get("RIP8_DBG_INTERVAL", str(DEFAULT_POLL_INTERVAL)),
        help="Poll interval in seconds (default 1.0)",
    )
    parser.add_argument("--timeout", type=_positive_float, help="Per-request timeout in seconds (default none)")
    parser.add_argument(
        "--window",
        type=_positive_int,
        default=DEFAULT_PEEK_WINDOW,
        help=f"Initial memory window size (default {DEFAULT_PEEK_WINDOW})",
    )
    parser.add_argument(
        "--peek",
        type=_address,
        default=DEFAULT_PEEK_ADDRESS,
        help="Initial peeked address in hex (default 200)",
    )
    parser.add_argument("--json", action="store_true", help="Emit JSON output when supported")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("RIP8_DBG_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    parser.add_argument(
        "-c",
        "--command",
        help="Poll once, execute a single command non-interactively and exit",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".rip8-dbg-history",
        help="Path to command history file",
    )
    return parser


def build_context(args: argparse.Namespace) -> DebuggerContext:
    ctx = DebuggerContext(
        base_url=args.host,
        poll_interval=args.interval,
        timeout=args.timeout,
        json_output=args.json,
    )
    ctx.state.view.set_window_size(args.window)
    ctx.state.view.set_peek_address(args.peek)
    return ctx


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    ctx = build_context(args)
    registry = build_registry()
    if args.command:
        return asyncio.run(_run_single_command(ctx, registry, args.command))
    repl = DebuggerREPL(ctx, registry, history_path=str(args.history))
    try:
        return repl.run()
    except KeyboardInterrupt:
        print()
        return 0


async def _run_single_command(ctx: DebuggerContext, registry: CommandRegistry, command_line: str) -> int:
    try:
        await ctx.poller.poll_once()
        return await dispatch(ctx, registry, command_line)
    except SystemExit as exc:
        return int(exc.code or 0)
    finally:
        await ctx.shutdown()


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
