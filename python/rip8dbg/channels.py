"""Polled channels and their response decoders."""

from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

REGISTERS = "registers"
MEMORY = "memory"
LAST_INSTRUCTION = "last_instruction"
NEXT_INSTRUCTION = "next_instruction"
LAST_DRAWN_SPRITE = "last_drawn_sprite"
LAST_DRAW_AREA = "last_draw_area"
LAST_DRAW_RESULT = "last_draw_result"

SPRITE_CHANNELS: Tuple[str, ...] = (LAST_DRAWN_SPRITE, LAST_DRAW_AREA, LAST_DRAW_RESULT)
INSTRUCTION_CHANNELS: Tuple[str, ...] = (LAST_INSTRUCTION, NEXT_INSTRUCTION)


class SnapshotDecodeError(ValueError):
    """Raised when a response body cannot be turned into a snapshot."""


def _is_uint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def decode_registers(payload: Any) -> Mapping[str, int]:
    if not isinstance(payload, dict):
        raise SnapshotDecodeError(f"registers: expected object, got {type(payload).__name__}")
    values: Dict[str, int] = {}
    for name, value in payload.items():
        if not _is_uint(value):
            raise SnapshotDecodeError(f"registers: {name}={value!r} is not an unsigned integer")
        values[str(name)] = value
    return MappingProxyType(values)


def decode_memory(payload: Any) -> bytes:
    if not isinstance(payload, list):
        raise SnapshotDecodeError(f"memory: expected array, got {type(payload).__name__}")
    try:
        return bytes(payload)
    except (TypeError, ValueError) as exc:
        raise SnapshotDecodeError(f"memory: {exc}") from exc


def decode_instruction(payload: Any) -> Any:
    # The server sends the serde form of its instruction enum, or null when the
    # word at PC does not decode. Anything JSON produced is accepted as-is.
    return payload


def decode_sprite(payload: Any) -> Optional[Tuple[int, ...]]:
    if payload is None:
        return None
    if not isinstance(payload, list):
        raise SnapshotDecodeError(f"sprite: expected array, got {type(payload).__name__}")
    for row in payload:
        if not _is_uint(row):
            raise SnapshotDecodeError(f"sprite: row {row!r} is not an unsigned integer")
    return tuple(payload)


@dataclass(frozen=True)
class Channel:
    name: str
    path: str
    decoder: Callable[[Any], Any]

    def decode(self, body: str) -> Any:
        try:
            payload = json.loads(body)
        except (TypeError, ValueError) as exc:
            raise SnapshotDecodeError(f"{self.name}: malformed JSON: {exc}") from exc
        return self.decoder(payload)


CHANNELS: Dict[str, Channel] = {
    channel.name: channel
    for channel in (
        Channel(REGISTERS, "/registers", decode_registers),
        Channel(MEMORY, "/memory", decode_memory),
        Channel(LAST_INSTRUCTION, "/last-instruction", decode_instruction),
        Channel(NEXT_INSTRUCTION, "/next-instruction", decode_instruction),
        Channel(LAST_DRAWN_SPRITE, "/last-drawn-sprite", decode_sprite),
        Channel(LAST_DRAW_AREA, "/last-draw-area", decode_sprite),
        Channel(LAST_DRAW_RESULT, "/last-draw-result", decode_sprite),
    )
}

CHANNEL_NAMES: Tuple[str, ...] = tuple(CHANNELS)


def get_channel(name: str) -> Channel:
    try:
        return CHANNELS[name]
    except KeyError:
        raise KeyError(f"unknown channel '{name}'") from None


__all__ = [
    "Channel",
    "CHANNELS",
    "CHANNEL_NAMES",
    "SPRITE_CHANNELS",
    "INSTRUCTION_CHANNELS",
    "SnapshotDecodeError",
    "get_channel",
    "decode_registers",
    "decode_memory",
    "decode_instruction",
    "decode_sprite",
]
