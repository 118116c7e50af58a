"""Observer port for the config domain — defines events in domain language."""

from pathlib import Path
from typing import Protocol


class ConfigObserver(Protocol):
    def config_loaded(self, path: Path, judge_model: str, runner_model: str) -> None: ...

    def config_unbounded_concurrency_warning(self, variations: int) -> None: ...
