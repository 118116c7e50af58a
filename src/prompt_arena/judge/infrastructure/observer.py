"""Structlog implementation of the JudgeObserver port."""

import structlog

from prompt_arena.stream.domain.event import UsageStats


class StructlogJudgeObserver:
    """Delegates judge session events to structlog.

    Text deltas are logged at debug level only; the console observer is the
    one that shows the judge's reasoning to a person.

    Satisfies the JudgeObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def judge_session_started(self, session_id: str, model: str, resumed: bool) -> None:
        self._log.info(
            "judge.session.started",
            session_id=session_id,
            model=model,
            resumed=resumed,
        )

    def judge_text(self, session_id: str, text: str) -> None:
        self._log.debug("judge.text", session_id=session_id, length=len(text))

    def judge_tool_used(self, session_id: str, tool_name: str, target: str) -> None:
        self._log.debug(
            "judge.tool_used", session_id=session_id, tool_name=tool_name, target=target
        )

    def judge_usage(self, session_id: str, usage: UsageStats) -> None:
        self._log.info(
            "judge.usage",
            session_id=session_id,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            cached_tokens=usage.cached_tokens,
        )

    def judge_session_completed(
        self, session_id: str, duration_ms: int, num_turns: int, cost_usd: float | None
    ) -> None:
        self._log.info(
            "judge.session.completed",
            session_id=session_id,
            duration_ms=duration_ms,
            num_turns=num_turns,
            cost_usd=cost_usd,
        )

    def judge_session_failed(self, session_id: str, exit_code: int, reason: str) -> None:
        self._log.error(
            "judge.session.failed",
            session_id=session_id,
            exit_code=exit_code,
            reason=reason,
        )
