"""Exceptions raised by the ergokeys core."""


class ErgoKeysError(Exception):
    """Base class for ergokeys errors."""


class ConfigurationError(ErgoKeysError):
    """Raised when modal editing cannot be set up, e.g. no command-mode keymap resolves."""


class KeymapNotFoundError(ErgoKeysError, LookupError):
    """Exception raised when a keymap name does not resolve in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Keymap not found: {name!r}")


class KeymapFileError(ErgoKeysError, ValueError):
    """Exception raised when a user keymap file cannot be parsed."""
