"""Tests for ProgressArenaObserver's per-variation row state."""

import io
from pathlib import Path

from rich.console import Console

from prompt_arena.arena.infrastructure.progress_observer import ProgressArenaObserver


def _make_observer() -> ProgressArenaObserver:
    observer = ProgressArenaObserver(disabled=True)
    observer.test_phase_started(strategies={0: "BASELINE", 1: "PERSONA", 2: "EXEMPLAR"})
    return observer


def _render(observer: ProgressArenaObserver) -> str:
    buffer = io.StringIO()
    Console(file=buffer, width=120, color_system=None).print(observer.get_renderable())
    return buffer.getvalue()


class TestRowStates:
    def test_rows_start_pending(self) -> None:
        observer = _make_observer()
        assert {row.state for row in observer.rows.values()} == {"pending"}
        assert observer.rows[1].strategy == "PERSONA"

    def test_started_variation_is_running(self) -> None:
        observer = _make_observer()
        observer.variation_started(1, Path("/tmp/run-1"), "isolated")
        assert observer.rows[1].state == "running"
        assert observer.rows[1].detail == "starting..."

    def test_status_updates_detail(self) -> None:
        observer = _make_observer()
        observer.variation_started(1, Path("/tmp/run-1"), "isolated")
        observer.variation_status(1, "Write:app.py")
        assert observer.rows[1].detail == "Write:app.py"

    def test_status_after_finish_is_ignored(self) -> None:
        observer = _make_observer()
        observer.variation_started(1, Path("/tmp/run-1"), "isolated")
        observer.variation_completed(1, exit_code=0)
        observer.variation_status(1, "late")
        assert observer.rows[1].detail != "late"

    def test_completed_exit_codes(self) -> None:
        observer = _make_observer()
        observer.variation_completed(0, exit_code=0)
        observer.variation_completed(1, exit_code=2)
        assert observer.rows[0].state == "done"
        assert observer.rows[1].state == "error"
        assert observer.rows[1].exit_code == 2

    def test_failed_variation_is_error(self) -> None:
        observer = _make_observer()
        observer.variation_failed(2, reason="boom")
        assert observer.rows[2].state == "error"
        assert observer.rows[2].exit_code == 1

    def test_skipped_variation_has_no_row(self) -> None:
        observer = _make_observer()
        observer.variation_skipped(2, Path("/tmp/variation-2.md"))
        assert 2 not in observer.rows

    def test_counts(self) -> None:
        observer = _make_observer()
        observer.variation_started(0, Path("/tmp/run-0"), "isolated")
        observer.variation_completed(1, exit_code=0)
        observer.variation_failed(2, reason="boom")
        assert observer.counts() == (1, 1, 1)


class TestRendering:
    def test_renders_rows_and_footer(self) -> None:
        observer = _make_observer()
        observer.variation_started(0, Path("/tmp/run-0"), "isolated")
        observer.variation_completed(1, exit_code=3)

        text = _render(observer)

        assert "Running variations..." in text
        assert "[0]" in text and "BASELINE" in text and "starting..." in text
        assert "exit 3" in text
        assert "Running: 1 | Done: 0 | Failed: 1" in text

    def test_stop_without_live_display_is_safe(self) -> None:
        observer = _make_observer()
        observer.stop()
        observer.arena_completed("judge-1", success=True, elapsed_seconds=1.0)
