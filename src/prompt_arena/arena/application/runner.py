"""ArenaRunner — orchestrates the design, parallel test, and evaluation phases."""

import asyncio
import contextlib
import time
import uuid
from collections.abc import Callable

from prompt_arena.arena.application.prompts import (
    DESIGN_USER_MESSAGE,
    VARIATIONS_ONLY_USER_MESSAGE,
    build_design_prompt,
    build_evaluation_message,
    build_variations_only_prompt,
)
from prompt_arena.arena.domain.artifacts import (
    EFFECTIVE_PROMPT_FILE,
    TASK_FILE,
    run_dir,
    variation_file,
)
from prompt_arena.arena.domain.errors import (
    DesignPhaseError,
    NoVariationResultsError,
    TaskArtifactMissingError,
)
from prompt_arena.arena.domain.observer import ArenaObserver
from prompt_arena.arena.domain.run import ArenaRun
from prompt_arena.arena.domain.store import ArtifactStore
from prompt_arena.config.domain.config import ArenaConfig
from prompt_arena.judge.domain.request import JudgeRequest
from prompt_arena.judge.domain.session import JudgeSession
from prompt_arena.variation.domain.parser import parse_variation_info
from prompt_arena.variation.domain.runner import VariationRunner
from prompt_arena.variation.domain.variation import (
    VariationInfo,
    VariationRequest,
    VariationResult,
    baseline_info,
    failed_result,
    plan_isolation,
)


def _new_session_id() -> str:
    return str(uuid.uuid4())


class ArenaRunner:
    """Runs one arena: the judge designs, every variation runs, the judge evaluates.

    The runner is free of infrastructure dependencies. It receives the judge
    session, the variation runner and the artifact store as ports so that tests
    can substitute in-memory fakes.
    """

    def __init__(
        self,
        config: ArenaConfig,
        judge: JudgeSession,
        variation_runner: VariationRunner,
        store: ArtifactStore,
        observer: ArenaObserver,
        session_id_factory: Callable[[], str] = _new_session_id,
    ) -> None:
        self._config = config
        self._judge = judge
        self._variation_runner = variation_runner
        self._store = store
        self._observer = observer
        self._session_id_factory = session_id_factory

    async def run(self) -> ArenaRun:
        """Execute all three phases and return the ArenaRun.

        Raises:
            DesignPhaseError: if the judge's design turn exits non-zero.
            TaskArtifactMissingError: if the judge designed no task file.
            NoVariationResultsError: if no variation artifact could be run.
        """
        config = self._config
        output_dir = config.output_dir
        judge_session_id = self._session_id_factory()
        started_at = time.monotonic()

        self._observer.arena_started(
            judge_session_id=judge_session_id,
            output_dir=output_dir,
            judge_model=config.judge.model,
            runner_model=config.runner.model,
            variations=config.variations,
            user_mode=config.user_mode,
        )
        self._store.ensure_dir(output_dir)
        self._store.write_text(output_dir / EFFECTIVE_PROMPT_FILE, config.system_prompt)

        task, variation_info = await self._design(judge_session_id)
        results = await self._run_variations(task, variation_info)

        self._observer.evaluation_started(
            judge_session_id=judge_session_id, result_count=len(results)
        )
        evaluation = await self._judge.send(
            JudgeRequest(
                model=config.judge.model,
                user_message=build_evaluation_message(
                    system_prompt=config.system_prompt,
                    task=task,
                    variation_info=variation_info,
                    results=results,
                    output_dir=output_dir,
                ),
                resume_session_id=judge_session_id,
            )
        )

        success = evaluation.exit_code == 0
        self._observer.arena_completed(
            judge_session_id=judge_session_id,
            success=success,
            elapsed_seconds=time.monotonic() - started_at,
        )
        return ArenaRun(
            judge_session_id=judge_session_id,
            task=task,
            variation_info=variation_info,
            results=results,
            evaluation_output=evaluation.output,
            success=success,
            output_dir=output_dir,
        )

    async def _design(self, judge_session_id: str) -> tuple[str, list[VariationInfo]]:
        """Start the judge session and collect the task and variation metadata.

        The baseline is prepended to the judge's list and its artifact is the
        literal original prompt, whatever the judge wrote.
        """
        config = self._config
        output_dir = config.output_dir
        task_path = output_dir / TASK_FILE
        self._observer.design_started(
            judge_session_id=judge_session_id, task_provided=config.task is not None
        )

        if config.task is not None:
            self._store.write_text(task_path, config.task)
            system_prompt = build_variations_only_prompt(
                config.system_prompt, config.variations, output_dir
            )
            user_message = VARIATIONS_ONLY_USER_MESSAGE
        else:
            system_prompt = build_design_prompt(
                config.system_prompt, config.variations, output_dir
            )
            user_message = DESIGN_USER_MESSAGE

        design = await self._judge.send(
            JudgeRequest(
                model=config.judge.model,
                system_prompt=system_prompt,
                user_message=user_message,
                session_id=judge_session_id,
            )
        )
        if design.exit_code != 0:
            error = DesignPhaseError(exit_code=design.exit_code)
            self._observer.design_failed(
                judge_session_id=judge_session_id, reason=str(error)
            )
            raise error

        if config.task is not None:
            task = config.task
        elif self._store.exists(task_path):
            task = self._store.read_text(task_path)
        else:
            error = TaskArtifactMissingError(path=task_path)
            self._observer.design_failed(
                judge_session_id=judge_session_id, reason=str(error)
            )
            raise error

        variation_info = [
            baseline_info(),
            *parse_variation_info(design.output, config.variations),
        ]
        self._store.write_text(variation_file(output_dir, 0), config.system_prompt)

        self._observer.design_completed(
            judge_session_id=judge_session_id,
            task_path=task_path,
            variation_count=len(variation_info) - 1,
        )
        return task, variation_info

    async def _run_variations(
        self, task: str, variation_info: list[VariationInfo]
    ) -> list[VariationResult]:
        """Start every available variation at once and wait for all of them.

        A crashed invocation or an unreadable artifact becomes a failing result
        for its own variation number; the others are unaffected.
        """
        config = self._config
        output_dir = config.output_dir
        strategy_by_number = {info.number: info.strategy for info in variation_info}
        self._observer.test_phase_started(
            strategies={
                number: strategy_by_number.get(number, "UNKNOWN")
                for number in range(config.variations + 1)
            }
        )

        semaphore = (
            asyncio.Semaphore(config.runner.max_concurrent)
            if config.runner.max_concurrent is not None
            else None
        )
        tasks: dict[int, asyncio.Task[VariationResult]] = {}
        results: list[VariationResult] = []

        try:
            for number in range(config.variations + 1):
                path = variation_file(output_dir, number)
                if not self._store.exists(path):
                    self._observer.variation_skipped(variation_number=number, path=path)
                    continue

                work_dir = run_dir(output_dir, number)
                try:
                    content = self._store.read_text(path)
                    self._store.ensure_dir(work_dir)
                except (OSError, UnicodeDecodeError) as exc:
                    self._observer.variation_failed(
                        variation_number=number, reason=str(exc)
                    )
                    results.append(
                        failed_result(number, "Variation could not be prepared", exc)
                    )
                    continue

                isolation = plan_isolation(number, config.user_mode)
                request = VariationRequest(
                    variation_number=number,
                    task=task,
                    # An inherited baseline relies on the user's own CLAUDE.md.
                    variation_content="" if isolation == "inherited" else content,
                    work_dir=work_dir,
                    model=config.runner.model,
                    isolation=isolation,
                )
                self._observer.variation_started(
                    variation_number=number, work_dir=work_dir, isolation=isolation
                )
                tasks[number] = asyncio.create_task(self._run_one(request, semaphore))

            outcomes = await asyncio.gather(*tasks.values(), return_exceptions=True)
        finally:
            pending = [t for t in tasks.values() if not t.done()]
            for pending_task in pending:
                pending_task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        for number, outcome in zip(tasks, outcomes, strict=True):
            if isinstance(outcome, BaseException):
                self._observer.variation_failed(
                    variation_number=number, reason=str(outcome)
                )
                results.append(
                    failed_result(number, "Variation failed to run", outcome)
                )
            else:
                results.append(outcome)

        results.sort(key=lambda r: r.variation_number)
        succeeded = sum(1 for r in results if r.succeeded)
        self._observer.test_phase_completed(
            succeeded=succeeded, failed=len(results) - succeeded
        )
        if not results:
            raise NoVariationResultsError()
        return results

    async def _run_one(
        self, request: VariationRequest, semaphore: asyncio.Semaphore | None
    ) -> VariationResult:
        number = request.variation_number

        def on_status(status: str) -> None:
            self._observer.variation_status(variation_number=number, status=status)

        async with semaphore if semaphore is not None else contextlib.nullcontext():
            result = await self._variation_runner.run(request, on_status=on_status)
        self._observer.variation_completed(
            variation_number=number, exit_code=result.exit_code
        )
        return result
