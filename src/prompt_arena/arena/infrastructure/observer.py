"""StructlogArenaObserver — production observer that delegates to structlog."""

from pathlib import Path

import structlog


class StructlogArenaObserver:
    """Delegates arena domain events to structlog.

    Per-variation status updates are high-volume and logged at debug level.

    Satisfies the ArenaObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def arena_started(
        self,
        judge_session_id: str,
        output_dir: Path,
        judge_model: str,
        runner_model: str,
        variations: int,
        user_mode: bool,
    ) -> None:
        self._log.info(
            "arena.started",
            judge_session_id=judge_session_id,
            output_dir=str(output_dir),
            judge_model=judge_model,
            runner_model=runner_model,
            variations=variations,
            user_mode=user_mode,
        )

    def design_started(self, judge_session_id: str, task_provided: bool) -> None:
        self._log.info(
            "arena.design.started",
            judge_session_id=judge_session_id,
            task_provided=task_provided,
        )

    def design_completed(
        self, judge_session_id: str, task_path: Path, variation_count: int
    ) -> None:
        self._log.info(
            "arena.design.completed",
            judge_session_id=judge_session_id,
            task_path=str(task_path),
            variation_count=variation_count,
        )

    def design_failed(self, judge_session_id: str, reason: str) -> None:
        self._log.error(
            "arena.design.failed", judge_session_id=judge_session_id, reason=reason
        )

    def test_phase_started(self, strategies: dict[int, str]) -> None:
        self._log.info("arena.test.started", variations=len(strategies))

    def variation_skipped(self, variation_number: int, path: Path) -> None:
        self._log.warning(
            "arena.variation.skipped",
            variation_number=variation_number,
            path=str(path),
            message="Variation file not found, skipping",
        )

    def variation_started(
        self, variation_number: int, work_dir: Path, isolation: str
    ) -> None:
        self._log.info(
            "arena.variation.started",
            variation_number=variation_number,
            work_dir=str(work_dir),
            isolation=isolation,
        )

    def variation_status(self, variation_number: int, status: str) -> None:
        self._log.debug(
            "arena.variation.status", variation_number=variation_number, status=status
        )

    def variation_completed(self, variation_number: int, exit_code: int) -> None:
        self._log.info(
            "arena.variation.completed",
            variation_number=variation_number,
            exit_code=exit_code,
        )

    def variation_failed(self, variation_number: int, reason: str) -> None:
        self._log.error(
            "arena.variation.failed", variation_number=variation_number, reason=reason
        )

    def test_phase_completed(self, succeeded: int, failed: int) -> None:
        self._log.info("arena.test.completed", succeeded=succeeded, failed=failed)

    def evaluation_started(self, judge_session_id: str, result_count: int) -> None:
        self._log.info(
            "arena.evaluation.started",
            judge_session_id=judge_session_id,
            result_count=result_count,
        )

    def arena_completed(
        self, judge_session_id: str, success: bool, elapsed_seconds: float
    ) -> None:
        self._log.info(
            "arena.completed",
            judge_session_id=judge_session_id,
            success=success,
            elapsed_seconds=round(elapsed_seconds, 2),
        )
