"""Widgets for the ergokeys editor."""

from __future__ import annotations

from pathlib import Path

from textual import events
from textual.events import Key
from textual.message import Message
from textual.widgets import Static, TextArea

from ..core import CursorStyle, Mode


class ModalTextArea(TextArea):
    """TextArea that routes keys through the app's keymaps before editing.

    A block cursor means command mode: the area is read-only so unbound
    letters do not type.
    """

    DEFAULT_CSS = """
    ModalTextArea.-block-cursor .text-area--cursor {
        background: $warning;
        color: $background;
    }
    """

    class FocusGained(Message):
        """Posted when the editor receives focus."""

        def __init__(self, editor: ModalTextArea) -> None:
            self.editor = editor
            super().__init__()

    class FocusLost(Message):
        """Posted when the editor loses focus."""

        def __init__(self, editor: ModalTextArea) -> None:
            self.editor = editor
            super().__init__()

    def __init__(self, text: str = "", *, file_path: Path | None = None, **kwargs) -> None:
        super().__init__(text, **kwargs)
        self.file_path = file_path
        self.cursor_style = CursorStyle.LINE

    def virtual_file(self) -> Path | None:
        """The file behind this editor; None for scratch areas."""
        return self.file_path

    def set_cursor_style(self, style: CursorStyle) -> None:
        self.cursor_style = style
        block = style is CursorStyle.BLOCK
        self.set_class(block, "-block-cursor")
        self.read_only = block

    async def _on_key(self, event: Key) -> None:
        """Offer the key to the app's keymap dispatch first."""
        handler = getattr(self.app, "handle_editor_key", None)
        if handler is not None and handler(self, event.key, event.character):
            event.prevent_default()
            event.stop()
            return
        await super()._on_key(event)

    def on_focus(self, event: events.Focus) -> None:
        self.post_message(self.FocusGained(self))

    def on_blur(self, event: events.Blur) -> None:
        self.post_message(self.FocusLost(self))


class ModeStatusBar(Static):
    """One-line status showing the mode and the active keymap."""

    DEFAULT_CSS = """
    ModeStatusBar {
        dock: bottom;
        height: 1;
        background: $panel;
        padding: 0 1;
    }
    """

    def show_state(self, mode: Mode, keymap_name: str | None, message: str = "") -> None:
        color = "yellow" if mode is Mode.COMMAND else "green"
        text = f"[bold {color}]{mode.value}[/] {keymap_name or '-'}"
        if message:
            text += f"  [dim]{message}[/]"
        self.update(text)
