"""Top-level ArenaConfig aggregate — the fully resolved inputs of one run."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from prompt_arena.config.domain.judge import JudgeConfig
from prompt_arena.config.domain.runner import RunnerConfig

OUTPUT_DIR_PREFIX = "prompt-arena-"


class ArenaConfig(BaseModel, frozen=True):
    """Root configuration aggregate for one arena run.

    ``task`` is the literal task text when the user supplied one; None asks the
    judge to design the task. ``output_dir`` is computed once, before the run.
    """

    system_prompt: str = Field(min_length=1)
    task: str | None = None
    variations: int = Field(default=5, ge=0)
    user_mode: bool = False
    output_dir: Path
    judge: JudgeConfig = JudgeConfig()
    runner: RunnerConfig = RunnerConfig()


def build_output_dir(root: Path, started_at: datetime) -> Path:
    """Per-run directory name, stamped to the minute: prompt-arena-YYYY-MM-DDTHH-MM."""
    return root / f"{OUTPUT_DIR_PREFIX}{started_at.strftime('%Y-%m-%dT%H-%M')}"
