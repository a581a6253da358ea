"""Output helpers for rip8-dbg."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from .context import DebuggerContext


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True)


def emit_result(ctx: DebuggerContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a successful command result."""
    if ctx.json_output:
        payload: Dict[str, Any] = {"status": "ok"}
        if data is not None:
            payload["result"] = data
        else:
            payload["message"] = message
        print(_json_dump(payload))
    else:
        print(message)


def emit_error(ctx: DebuggerContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit an error message respecting JSON mode."""
    payload: Dict[str, Any] = {"status": "error", "error": message}
    if data:
        payload["details"] = dict(data)
    if ctx.json_output:
        print(_json_dump(payload))
    else:
        print(f"error: {message}")


def render_sink(ctx: DebuggerContext, name: str, *, title: Optional[str] = None) -> None:
    """Print the current text of a view sink under a heading."""
    text = ctx.sinks.read(name)
    if ctx.json_output:
        print(_json_dump({"status": "ok", "result": {"sink": name, "text": text}}))
        return
    print(f"{title or name}:")
    if not text:
        print("  (no data)")
        return
    for line in text.rstrip("\n").splitlines():
        print(f"  {line}")


__all__ = ["emit_result", "emit_error", "render_sink"]
