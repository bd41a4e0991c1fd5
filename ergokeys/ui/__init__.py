"""Textual host for ergokeys."""

from .app import ErgoKeysApp
from .widgets import ModalTextArea, ModeStatusBar

__all__ = ["ErgoKeysApp", "ModalTextArea", "ModeStatusBar"]
