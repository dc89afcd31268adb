"""Error types for modgraph."""


class ControlledError(Exception):
    """An expected failure, reported with its message only (no traceback)."""

    is_controlled = True


class InvalidEntryError(ControlledError):
    """Entry paths are missing, relative, or share no qualifying root."""
