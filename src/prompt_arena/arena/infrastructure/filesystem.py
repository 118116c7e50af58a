"""FileSystemArtifactStore — ArtifactStore over the local filesystem."""

from pathlib import Path


class FileSystemArtifactStore:
    """Reads and writes UTF-8 artifacts on disk.

    Satisfies the ArtifactStore protocol structurally.
    """

    def write_text(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def exists(self, path: Path) -> bool:
        return path.is_file()

    def ensure_dir(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)
