"""Error types raised by prompt infrastructure."""

from pathlib import Path

from prompt_arena.core.errors import ArenaError


class PromptLoadError(ArenaError):
    """Raised when a system prompt file argument cannot be read."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        super().__init__(f"Failed to load system prompt: {reason}: {path}")
