"""Text rendering for snapshots: hex display, memory windows and sprites."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional, Tuple

ROW_WIDTH = 8
SPRITE_WIDTH = 8


def hexify(value: Any) -> Any:
    """Replace every numeric leaf of *value* with its ``0x`` hex string."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return hex(value)
    if isinstance(value, float):
        return hex(int(value)) if value.is_integer() else value
    if isinstance(value, Mapping):
        return {key: hexify(item) for key, item in value.items()}
    if isinstance(value, (bytes, bytearray)):
        return [hex(byte) for byte in value]
    if isinstance(value, Sequence) and not isinstance(value, str):
        return [hexify(item) for item in value]
    return value


def format_snapshot(value: Any) -> str:
    return json.dumps(hexify(value), indent=2)


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def window_bounds(length: int, center: int, window_size: int) -> Tuple[int, int]:
    """Return the ``(start, end)`` addresses of a peek window, end inclusive."""
    if window_size <= 0:
        raise ValueError(f"window size must be positive, got {window_size}")
    half = window_size // 2
    start = max(0, center - half)
    end = min(length, center + half)
    return start, end


def format_window_caption(length: int, center: int, window_size: int) -> str:
    start, end = window_bounds(length, center, window_size)
    return f"{hex(start)} - {hex(end)}"


def format_window(snapshot: Sequence[int], center: int, window_size: int) -> List[str]:
    """Render the memory around *center* as hex-annotated rows of eight.

    The slice includes the end address, and the number of rows is the slice
    length divided by eight rounded half up, so a trailing partial row of one
    to three entries is not shown.
    """
    start, end = window_bounds(len(snapshot), center, window_size)
    window = list(snapshot[start : end + 1])
    row_count = _round_half_up(len(window) / ROW_WIDTH)
    lines: List[str] = []
    for row in range(row_count):
        offset = row * ROW_WIDTH
        entries = window[offset : offset + ROW_WIDTH]
        lines.append(f"{hex(start + offset)}: {json.dumps(hexify(entries))}\n")
    return lines


def format_sprite(rows: Optional[Sequence[int]]) -> str:
    if rows is None:
        return ""
    lines = []
    for row in rows:
        bits = format(row, "b").rjust(SPRITE_WIDTH, "0")
        lines.append(bits.replace("1", "*").replace("0", ".") + "\n")
    return "".join(lines)


def _format_operand(operand: Any) -> str:
    if isinstance(operand, bool):
        return str(operand).lower()
    if isinstance(operand, int):
        return hex(operand)
    if isinstance(operand, str):
        return operand
    if isinstance(operand, Mapping) and len(operand) == 1:
        # {"Byte": 5} / {"Register": "V1"}
        (inner,) = operand.values()
        return _format_operand(inner)
    return json.dumps(hexify(operand))


def format_instruction(record: Any) -> str:
    """Render the server's instruction record as ``MNEMONIC op, op``."""
    if record is None:
        return "<none>"
    if isinstance(record, str):
        return record
    if isinstance(record, Mapping) and len(record) == 1:
        ((mnemonic, operands),) = record.items()
        if isinstance(operands, Sequence) and not isinstance(operands, str):
            args = [_format_operand(item) for item in operands]
        else:
            args = [_format_operand(operands)]
        return f"{mnemonic} {', '.join(args)}" if args else str(mnemonic)
    return json.dumps(hexify(record))


__all__ = [
    "hexify",
    "format_snapshot",
    "window_bounds",
    "format_window_caption",
    "format_window",
    "format_sprite",
    "format_instruction",
]
