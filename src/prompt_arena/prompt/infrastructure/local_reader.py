"""LocalFileReader — FileReader over the local filesystem."""

from pathlib import Path


class LocalFileReader:
    """Satisfies the FileReader protocol structurally."""

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")
