"""CompositeJudgeObserver — fans out judge events to multiple observers."""

from prompt_arena.judge.domain.observer import JudgeObserver
from prompt_arena.stream.domain.event import UsageStats


class CompositeJudgeObserver:
    """Forwards every JudgeObserver event to each wrapped observer in order.

    Satisfies the JudgeObserver protocol structurally.
    """

    def __init__(self, observers: list[JudgeObserver]) -> None:
        self._observers = observers

    def judge_session_started(self, session_id: str, model: str, resumed: bool) -> None:
        for obs in self._observers:
            obs.judge_session_started(session_id=session_id, model=model, resumed=resumed)

    def judge_text(self, session_id: str, text: str) -> None:
        for obs in self._observers:
            obs.judge_text(session_id=session_id, text=text)

    def judge_tool_used(self, session_id: str, tool_name: str, target: str) -> None:
        for obs in self._observers:
            obs.judge_tool_used(session_id=session_id, tool_name=tool_name, target=target)

    def judge_usage(self, session_id: str, usage: UsageStats) -> None:
        for obs in self._observers:
            obs.judge_usage(session_id=session_id, usage=usage)

    def judge_session_completed(
        self, session_id: str, duration_ms: int, num_turns: int, cost_usd: float | None
    ) -> None:
        for obs in self._observers:
            obs.judge_session_completed(
                session_id=session_id,
                duration_ms=duration_ms,
                num_turns=num_turns,
                cost_usd=cost_usd,
            )

    def judge_session_failed(self, session_id: str, exit_code: int, reason: str) -> None:
        for obs in self._observers:
            obs.judge_session_failed(session_id=session_id, exit_code=exit_code, reason=reason)
