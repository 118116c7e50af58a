"""Inline whole-line ``@path.md`` imports in markdown prompt files.

Supported references, each alone on its own line:

- ``@~/notes/style.md``: relative to the home directory
- ``@/etc/prompts/base.md``: absolute
- ``@./shared.md``, ``@../shared.md``, ``@shared.md``: relative to the importing file

Inline mentions such as ``ask @alice`` and non-markdown targets are left as-is.
"""

import os
import re
from pathlib import Path

from prompt_arena.prompt.domain.reader import FileReader

_IMPORT_PATTERN = re.compile(r"^@(~?\S+\.md)$", re.MULTILINE)


def resolve_import_path(path: str, source_dir: Path, home: Path | None = None) -> Path:
    """Map an import reference to a normalized filesystem path."""
    if path.startswith("~/"):
        base = home if home is not None else Path.home()
        return Path(os.path.normpath(base / path[2:]))
    if path.startswith("/"):
        return Path(os.path.normpath(path))
    return Path(os.path.normpath(source_dir / path))


def resolve_imports(
    content: str,
    source_path: Path,
    reader: FileReader,
    home: Path | None = None,
) -> str:
    """Replace every import line with the trimmed, recursively resolved file content.

    Missing files become ``<!-- Import not found: p -->`` and unreadable ones
    ``<!-- Failed to import: p -->``. A file already being resolved higher up the
    chain becomes ``<!-- Circular import: p -->``. Never raises for a bad import.
    """
    return _resolve(
        content=content,
        source_path=Path(os.path.normpath(source_path)),
        reader=reader,
        home=home,
        active=frozenset(),
    )


def _resolve(
    content: str,
    source_path: Path,
    reader: FileReader,
    home: Path | None,
    active: frozenset[Path],
) -> str:
    active = active | {source_path}

    def replace(match: re.Match[str]) -> str:
        import_path = match.group(1)
        resolved = resolve_import_path(import_path, source_path.parent, home=home)
        if resolved in active:
            return f"<!-- Circular import: {import_path} -->"
        try:
            if not reader.exists(resolved):
                return f"<!-- Import not found: {import_path} -->"
            imported = reader.read_text(resolved)
        except (OSError, UnicodeDecodeError):
            return f"<!-- Failed to import: {import_path} -->"
        return _resolve(imported, resolved, reader, home, active).strip()

    return _IMPORT_PATTERN.sub(replace, content)
