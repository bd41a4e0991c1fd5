"""Editing modes and cursor presentation."""

from __future__ import annotations

from enum import Enum


class Mode(Enum):
    """Modal editing state."""

    INSERT = "INSERT"
    COMMAND = "COMMAND"


class CursorStyle(Enum):
    """Cursor shape an editor surface shows for each mode."""

    BLOCK = "block"  # command mode
    LINE = "line"  # insert mode


CURSOR_STYLES = {
    Mode.COMMAND: CursorStyle.BLOCK,
    Mode.INSERT: CursorStyle.LINE,
}
