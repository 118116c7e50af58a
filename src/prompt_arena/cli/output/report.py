"""Run report serialization — arena-run.json and evaluation.md in the output directory."""

import json
from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from prompt_arena.arena.domain.artifacts import EVALUATION_FILE, RUN_REPORT_FILE
from prompt_arena.arena.domain.run import ArenaRun
from prompt_arena.core.errors import ArenaError

type JsonDict = dict[str, Any]

REPORT_SCHEMA_VERSION = "1"


class RunReportError(ArenaError):
    """Raised when a saved run report cannot be read back."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to load run report: {reason}: {path}")


def _prompt_arena_version() -> str:
    try:
        return version("prompt-arena")
    except PackageNotFoundError:
        return "dev"


def build_run_report(
    run: ArenaRun, judge_model: str, runner_model: str, elapsed_seconds: float
) -> JsonDict:
    """Serialize a completed run plus the metadata needed to interpret it later."""
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "generator": {"name": "prompt-arena", "version": _prompt_arena_version()},
        "written_at": datetime.now(UTC).isoformat(),
        "judge_model": judge_model,
        "runner_model": runner_model,
        "elapsed_seconds": round(elapsed_seconds, 3),
        "run": run.model_dump(mode="json"),
    }


def write_run_report(
    run: ArenaRun, judge_model: str, runner_model: str, elapsed_seconds: float
) -> tuple[Path, Path]:
    """Write the JSON report and the judge's evaluation. Returns (json_path, md_path)."""
    json_path = run.output_dir / RUN_REPORT_FILE
    md_path = run.output_dir / EVALUATION_FILE

    report = build_run_report(
        run=run,
        judge_model=judge_model,
        runner_model=runner_model,
        elapsed_seconds=elapsed_seconds,
    )
    json_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    md_path.write_text(run.evaluation_output, encoding="utf-8")
    return json_path, md_path


def load_run_report(path: Path) -> tuple[ArenaRun, JsonDict]:
    """
    Read a saved report. ``path`` may be the JSON file or its output directory.

    Returns the ArenaRun and the report's metadata (everything except ``run``).

    Raises:
        RunReportError: if the file is missing, not JSON, or not a run report.
    """
    if path.is_dir():
        path = path / RUN_REPORT_FILE
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise RunReportError(path=path, reason="file not found") from exc
    except ValueError as exc:
        raise RunReportError(path=path, reason="invalid JSON") from exc

    if not isinstance(raw, dict) or "run" not in raw:
        raise RunReportError(path=path, reason="missing 'run' section")
    try:
        run = ArenaRun.model_validate(raw["run"])
    except ValidationError as exc:
        raise RunReportError(path=path, reason=str(exc)) from exc

    metadata = {key: value for key, value in raw.items() if key != "run"}
    return run, metadata
