"""ergokeys - modal (insert/command) editing driven by layered keymaps."""

__version__ = "0.3.0"
