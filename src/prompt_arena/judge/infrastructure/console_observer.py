"""ConsoleJudgeObserver — streams the judge's text and tool calls to the terminal."""

from rich.console import Console
from rich.markup import escape

from prompt_arena.stream.domain.event import UsageStats
from prompt_arena.stream.domain.parser import format_tool_use, format_usage_stats


class ConsoleJudgeObserver:
    """Prints judge output live on stdout while a session turn is running.

    Pass ``disabled=True`` to suppress all terminal output (useful in tests).

    Satisfies the JudgeObserver protocol structurally.
    """

    def __init__(self, console: Console | None = None, disabled: bool = False) -> None:
        self._console = console or Console(highlight=False)
        self._disabled = disabled

    def judge_session_started(self, session_id: str, model: str, resumed: bool) -> None:
        pass

    def judge_text(self, session_id: str, text: str) -> None:
        if self._disabled:
            return
        self._console.print(escape(text), end="", soft_wrap=True)

    def judge_tool_used(self, session_id: str, tool_name: str, target: str) -> None:
        if self._disabled:
            return
        self._console.print(f"\n[dim]{escape(format_tool_use(tool_name, target))}[/dim]")

    def judge_usage(self, session_id: str, usage: UsageStats) -> None:
        if self._disabled:
            return
        self._console.print(f"\n[dim]{escape(format_usage_stats(usage))}[/dim]")

    def judge_session_completed(
        self, session_id: str, duration_ms: int, num_turns: int, cost_usd: float | None
    ) -> None:
        if self._disabled:
            return
        self._console.print()

    def judge_session_failed(self, session_id: str, exit_code: int, reason: str) -> None:
        if self._disabled:
            return
        self._console.print(f"\n[red]Judge failed (exit {exit_code}): {escape(reason)}[/red]")
