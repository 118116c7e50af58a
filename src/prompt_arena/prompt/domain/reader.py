"""FileReader Protocol — the filesystem access the import resolver needs."""

from pathlib import Path
from typing import Protocol


class FileReader(Protocol):
    def exists(self, path: Path) -> bool: ...

    def read_text(self, path: Path) -> str: ...
