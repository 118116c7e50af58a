"""Base exception class for all prompt-arena-specific errors."""


class ArenaError(Exception):
    """Base class for all prompt-arena errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
