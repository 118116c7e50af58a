"""Observer port for the arena domain — defines events in domain language."""

from pathlib import Path
from typing import Protocol


class ArenaObserver(Protocol):
    """Observer port emitting structured events during an arena run.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def arena_started(
        self,
        judge_session_id: str,
        output_dir: Path,
        judge_model: str,
        runner_model: str,
        variations: int,
        user_mode: bool,
    ) -> None: ...

    def design_started(self, judge_session_id: str, task_provided: bool) -> None: ...

    def design_completed(
        self, judge_session_id: str, task_path: Path, variation_count: int
    ) -> None: ...

    def design_failed(self, judge_session_id: str, reason: str) -> None: ...

    def test_phase_started(self, strategies: dict[int, str]) -> None: ...

    def variation_skipped(self, variation_number: int, path: Path) -> None: ...

    def variation_started(
        self, variation_number: int, work_dir: Path, isolation: str
    ) -> None: ...

    def variation_status(self, variation_number: int, status: str) -> None: ...

    def variation_completed(self, variation_number: int, exit_code: int) -> None: ...

    def variation_failed(self, variation_number: int, reason: str) -> None: ...

    def test_phase_completed(self, succeeded: int, failed: int) -> None: ...

    def evaluation_started(self, judge_session_id: str, result_count: int) -> None: ...

    def arena_completed(
        self, judge_session_id: str, success: bool, elapsed_seconds: float
    ) -> None: ...
