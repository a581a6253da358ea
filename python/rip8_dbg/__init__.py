"""
rip8-dbg CLI package.

Interactive debugger for the rip8 CHIP-8 emulator's HTTP debug server. Use
``python -m rip8_dbg`` or the ``rip8-dbg`` script to launch it.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
