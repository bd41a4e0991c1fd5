"""Persistence for ergokeys settings and remembered keymap names."""

from .settings import InMemorySettingsStore, PersistentProperties, SettingsStore

__all__ = [
    "InMemorySettingsStore",
    "PersistentProperties",
    "SettingsStore",
]
