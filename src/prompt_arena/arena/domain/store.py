"""ArtifactStore Protocol — where the run's markdown artifacts and run dirs live."""

from pathlib import Path
from typing import Protocol


class ArtifactStore(Protocol):
    def write_text(self, path: Path, content: str) -> None: ...

    def read_text(self, path: Path) -> str: ...

    def exists(self, path: Path) -> bool: ...

    def ensure_dir(self, path: Path) -> None: ...
