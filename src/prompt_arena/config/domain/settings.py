"""ArenaSettings — the optional, file-backed defaults for an arena run."""

from pathlib import Path

from pydantic import BaseModel, Field

from prompt_arena.config.domain.judge import JudgeConfig
from prompt_arena.config.domain.runner import RunnerConfig


class ArenaSettings(BaseModel, frozen=True):
    judge: JudgeConfig = JudgeConfig()
    runner: RunnerConfig = RunnerConfig()
    variations: int = Field(default=5, ge=0)
    user_mode: bool = False
    output_root: Path | None = None
