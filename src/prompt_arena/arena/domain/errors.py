"""Fatal errors raised by the arena pipeline."""

from pathlib import Path

from prompt_arena.core.errors import ArenaError


class DesignPhaseError(ArenaError):
    """Raised when the judge's design turn exits non-zero. Not retried."""

    def __init__(self, exit_code: int) -> None:
        self.exit_code = exit_code
        super().__init__(f"Design phase failed: judge exited with code {exit_code}")


class TaskArtifactMissingError(ArenaError):
    """Raised when the judge was asked to design the task but wrote no task file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Failed to read designed task: file not found: {path}")


class NoVariationResultsError(ArenaError):
    """Raised when not a single variation artifact could be run."""

    def __init__(self) -> None:
        super().__init__("No variations completed successfully")
