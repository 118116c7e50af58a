"""PromptLoader — turns the CLI prompt argument into the effective system prompt."""

from pathlib import Path

from prompt_arena.prompt.domain.imports import resolve_imports
from prompt_arena.prompt.domain.reader import FileReader
from prompt_arena.prompt.infrastructure.errors import PromptLoadError

_PATH_PREFIXES: tuple[str, ...] = ("./", "../", "/", "~/")


def looks_like_path(argument: str) -> bool:
    """True for arguments meant as a file: a ``.md`` suffix or an explicit path prefix."""
    candidate = argument.strip()
    if not candidate or "\n" in candidate:
        return False
    return candidate.endswith(".md") or candidate.startswith(_PATH_PREFIXES)


class PromptLoader:
    """Loads a system prompt from literal text or from a markdown file with imports."""

    def __init__(self, reader: FileReader, home: Path | None = None) -> None:
        self._reader = reader
        self._home = home

    def load(self, argument: str) -> str:
        """
        Return the effective system prompt for a CLI argument.

        Path-like arguments are read and import-resolved; anything else is the
        prompt text itself.

        Raises:
            PromptLoadError: if a path-like argument names a missing or unreadable file.
        """
        if not looks_like_path(argument):
            return argument

        path = Path(argument.strip()).expanduser()
        if not self._reader.exists(path):
            raise PromptLoadError(path=path)
        try:
            content = self._reader.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise PromptLoadError(path=path, reason=str(exc)) from exc
        return resolve_imports(content, path.resolve(), self._reader, home=self._home)
