"""Custom exceptions for the overlay menu.

Exception Hierarchy:
    MenuError (base)
        ├── EmptyZoneRegistryError
        ├── UnknownZoneError
        └── SessionStateError

Only configuration problems raise. Failures while the menu is running
(missing images, failed shell commands, garbage from a value query) are
logged and absorbed where they happen.
"""


class MenuError(Exception):
    """Base exception for all overlay menu errors."""


class EmptyZoneRegistryError(MenuError):
    """No zone is enabled, the menu cannot open."""

    def __init__(self, requested: int = 0):
        self.requested = requested
        msg = "No menu zones enabled"
        if requested:
            msg += f" ({requested} requested, none available)"
        super().__init__(msg)


class UnknownZoneError(MenuError):
    """Configuration names a zone type that does not exist."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown menu zone: {name!r}")


class SessionStateError(MenuError):
    """Session operation called in the wrong lifecycle state."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cannot {operation}: {reason}")
