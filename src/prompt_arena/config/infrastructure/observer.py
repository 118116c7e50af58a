"""Structlog implementation of the ConfigObserver port."""

from pathlib import Path

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: Path, judge_model: str, runner_model: str) -> None:
        self._log.info(
            "config.loaded",
            path=str(path),
            judge_model=judge_model,
            runner_model=runner_model,
        )

    def config_unbounded_concurrency_warning(self, variations: int) -> None:
        self._log.warning(
            "config.unbounded_concurrency",
            variations=variations,
            message="No runner.max_concurrent set; every variation process starts at once",
        )
