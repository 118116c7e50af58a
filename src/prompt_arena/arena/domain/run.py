"""ArenaRun — the immutable outcome of one complete arena run."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from prompt_arena.variation.domain.variation import VariationInfo, VariationResult


class ArenaRun(BaseModel, frozen=True):
    """Everything a run produced, in the order the judge saw it.

    ``variation_info`` starts with the baseline; ``results`` is sorted ascending by
    variation number and may be shorter when variation artifacts were missing.
    """

    model_config = ConfigDict(frozen=True)

    judge_session_id: str
    task: str
    variation_info: list[VariationInfo]
    results: list[VariationResult]
    evaluation_output: str
    success: bool
    output_dir: Path

    @property
    def succeeded_count(self) -> int:
        return sum(1 for result in self.results if result.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.results) - self.succeeded_count
