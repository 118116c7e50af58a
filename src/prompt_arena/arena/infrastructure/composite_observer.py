"""CompositeArenaObserver — fans out all events to a list of observers."""

from pathlib import Path

from prompt_arena.arena.domain.observer import ArenaObserver


class CompositeArenaObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from ArenaObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[ArenaObserver]) -> None:
        self._observers = observers

    def arena_started(
        self,
        judge_session_id: str,
        output_dir: Path,
        judge_model: str,
        runner_model: str,
        variations: int,
        user_mode: bool,
    ) -> None:
        for obs in self._observers:
            obs.arena_started(
                judge_session_id=judge_session_id,
                output_dir=output_dir,
                judge_model=judge_model,
                runner_model=runner_model,
                variations=variations,
                user_mode=user_mode,
            )

    def design_started(self, judge_session_id: str, task_provided: bool) -> None:
        for obs in self._observers:
            obs.design_started(
                judge_session_id=judge_session_id, task_provided=task_provided
            )

    def design_completed(
        self, judge_session_id: str, task_path: Path, variation_count: int
    ) -> None:
        for obs in self._observers:
            obs.design_completed(
                judge_session_id=judge_session_id,
                task_path=task_path,
                variation_count=variation_count,
            )

    def design_failed(self, judge_session_id: str, reason: str) -> None:
        for obs in self._observers:
            obs.design_failed(judge_session_id=judge_session_id, reason=reason)

    def test_phase_started(self, strategies: dict[int, str]) -> None:
        for obs in self._observers:
            obs.test_phase_started(strategies=strategies)

    def variation_skipped(self, variation_number: int, path: Path) -> None:
        for obs in self._observers:
            obs.variation_skipped(variation_number=variation_number, path=path)

    def variation_started(
        self, variation_number: int, work_dir: Path, isolation: str
    ) -> None:
        for obs in self._observers:
            obs.variation_started(
                variation_number=variation_number, work_dir=work_dir, isolation=isolation
            )

    def variation_status(self, variation_number: int, status: str) -> None:
        for obs in self._observers:
            obs.variation_status(variation_number=variation_number, status=status)

    def variation_completed(self, variation_number: int, exit_code: int) -> None:
        for obs in self._observers:
            obs.variation_completed(
                variation_number=variation_number, exit_code=exit_code
            )

    def variation_failed(self, variation_number: int, reason: str) -> None:
        for obs in self._observers:
            obs.variation_failed(variation_number=variation_number, reason=reason)

    def test_phase_completed(self, succeeded: int, failed: int) -> None:
        for obs in self._observers:
            obs.test_phase_completed(succeeded=succeeded, failed=failed)

    def evaluation_started(self, judge_session_id: str, result_count: int) -> None:
        for obs in self._observers:
            obs.evaluation_started(
                judge_session_id=judge_session_id, result_count=result_count
            )

    def arena_completed(
        self, judge_session_id: str, success: bool, elapsed_seconds: float
    ) -> None:
        for obs in self._observers:
            obs.arena_completed(
                judge_session_id=judge_session_id,
                success=success,
                elapsed_seconds=elapsed_seconds,
            )
