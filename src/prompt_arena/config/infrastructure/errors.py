"""Error types raised by config infrastructure."""

from pathlib import Path

from prompt_arena.core.errors import ArenaError


class MissingEnvVarsError(ArenaError):
    """Raised when one or more referenced environment variables are unset and have no default."""

    def __init__(self, missing_vars: list[str]) -> None:
        self.missing_vars = missing_vars
        var_list = ", ".join(sorted(missing_vars))
        super().__init__(
            f"Failed to load settings: missing environment variables: {var_list}"
        )


class ConfigValidationError(ArenaError):
    """Raised when the settings file parses but violates the settings schema."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to validate settings: {reason}")


class ConfigLoadError(ArenaError):
    """Raised when the settings file cannot be opened or is not valid YAML."""

    def __init__(self, path: Path, reason: str = "file not found") -> None:
        self.path = path
        super().__init__(f"Failed to load settings: {reason}: {path}")
