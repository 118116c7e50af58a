"""Observer port for the judge domain — defines events in domain language."""

from typing import Protocol

from prompt_arena.stream.domain.event import UsageStats


class JudgeObserver(Protocol):
    """Observer port for judge session events.

    ``judge_text`` is emitted for every text block as it arrives, so console
    implementations can stream the judge's reasoning live.
    """

    def judge_session_started(self, session_id: str, model: str, resumed: bool) -> None: ...

    def judge_text(self, session_id: str, text: str) -> None: ...

    def judge_tool_used(self, session_id: str, tool_name: str, target: str) -> None: ...

    def judge_usage(self, session_id: str, usage: UsageStats) -> None: ...

    def judge_session_completed(
        self, session_id: str, duration_ms: int, num_turns: int, cost_usd: float | None
    ) -> None: ...

    def judge_session_failed(self, session_id: str, exit_code: int, reason: str) -> None: ...
