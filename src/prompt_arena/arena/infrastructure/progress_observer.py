"""ProgressArenaObserver — renders a live per-variation status table to stderr."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.table import Table
from rich.text import Text

type RowState = Literal["pending", "running", "done", "error"]

_ICONS: dict[RowState, tuple[str, str]] = {
    "pending": ("◌", "dim white"),
    "running": ("●", "yellow"),
    "done": ("✓", "bright_green"),
    "error": ("✗", "red"),
}


@dataclass
class VariationRow:
    """Mutable display state of one variation during the test phase."""

    strategy: str
    state: RowState = "pending"
    detail: str = ""
    exit_code: int | None = None

    @property
    def finished(self) -> bool:
        return self.state in ("done", "error")


class ProgressArenaObserver:
    """Renders one row per variation plus an elapsed header and a totals footer.

    Only the test phase events produce output; all other events are no-ops.

    Pass ``disabled=True`` to keep the row state machine without rendering
    anything (useful in tests).

    Does NOT inherit from ArenaObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False, console: Console | None = None) -> None:
        self._disabled = disabled
        self._console = console
        self.rows: dict[int, VariationRow] = {}
        self._started_at: float | None = None
        self._live: Live | None = None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def counts(self) -> tuple[int, int, int]:
        """Return (running, done, failed) row counts."""
        running = sum(1 for row in self.rows.values() if row.state == "running")
        done = sum(1 for row in self.rows.values() if row.state == "done")
        failed = sum(1 for row in self.rows.values() if row.state == "error")
        return running, done, failed

    def get_renderable(self) -> RenderableType:
        elapsed = 0
        if self._started_at is not None:
            elapsed = int(time.monotonic() - self._started_at)
        header = Text(f"⏳ Running variations... ({elapsed}s elapsed)", style="bold")

        table = Table.grid(padding=(0, 1))
        for number in sorted(self.rows):
            row = self.rows[number]
            icon, style = _ICONS[row.state]
            if row.finished and row.exit_code is not None:
                detail = f"exit {row.exit_code}"
            else:
                detail = row.detail
            table.add_row(
                Text(icon, style=style),
                Text(f"[{number}]", style="bold"),
                Text(row.strategy, style="cyan"),
                Text(detail, style="dim"),
            )

        running, done, failed = self.counts()
        footer = Text(f"Running: {running} | Done: {done} | Failed: {failed}", style="dim")
        return Group(header, table, footer)

    def stop(self) -> None:
        """Stop the live display; safe to call when nothing is rendering."""
        if self._live is not None:
            self._live.stop()
            self._live = None

    # ------------------------------------------------------------------
    # Observer events
    # ------------------------------------------------------------------

    def arena_started(
        self,
        judge_session_id: str,
        output_dir: Path,
        judge_model: str,
        runner_model: str,
        variations: int,
        user_mode: bool,
    ) -> None:
        pass

    def design_started(self, judge_session_id: str, task_provided: bool) -> None:
        pass

    def design_completed(
        self, judge_session_id: str, task_path: Path, variation_count: int
    ) -> None:
        pass

    def design_failed(self, judge_session_id: str, reason: str) -> None:
        pass

    def test_phase_started(self, strategies: dict[int, str]) -> None:
        self.rows = {
            number: VariationRow(strategy=strategy)
            for number, strategy in strategies.items()
        }
        self._started_at = time.monotonic()
        if self._disabled:
            return
        self._live = Live(
            get_renderable=self.get_renderable,
            console=self._console or Console(stderr=True),
            refresh_per_second=4,
        )
        self._live.start()

    def variation_skipped(self, variation_number: int, path: Path) -> None:
        self.rows.pop(variation_number, None)

    def variation_started(
        self, variation_number: int, work_dir: Path, isolation: str
    ) -> None:
        row = self.rows.setdefault(variation_number, VariationRow(strategy="?"))
        row.state = "running"
        row.detail = "starting..."

    def variation_status(self, variation_number: int, status: str) -> None:
        row = self.rows.get(variation_number)
        if row is not None and not row.finished:
            row.detail = status

    def variation_completed(self, variation_number: int, exit_code: int) -> None:
        row = self.rows.get(variation_number)
        if row is None:
            return
        row.state = "done" if exit_code == 0 else "error"
        row.exit_code = exit_code

    def variation_failed(self, variation_number: int, reason: str) -> None:
        row = self.rows.get(variation_number)
        if row is None:
            return
        row.state = "error"
        row.exit_code = 1

    def test_phase_completed(self, succeeded: int, failed: int) -> None:
        self.stop()

    def evaluation_started(self, judge_session_id: str, result_count: int) -> None:
        pass

    def arena_completed(
        self, judge_session_id: str, success: bool, elapsed_seconds: float
    ) -> None:
        self.stop()
