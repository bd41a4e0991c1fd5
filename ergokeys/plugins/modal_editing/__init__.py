"""Modal editing plugin for ergokeys.

Command mode on focus, insert mode on blur, and keymap-driven dispatch of
key presses in editors.
"""

from .. import register_plugin
from .plugin import ModalEditingPlugin

register_plugin(ModalEditingPlugin)

__all__ = ["ModalEditingPlugin"]
