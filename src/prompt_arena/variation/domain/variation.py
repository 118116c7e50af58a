"""Variation value objects — metadata, run requests and run results."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

BASELINE_NUMBER = 0
BASELINE_STRATEGY = "BASELINE"
BASELINE_SUMMARY = "Original system prompt without modifications"

# isolated: no ambient settings and an explicit empty MCP config.
# inherited: loads the user's ambient settings, MCP config untouched.
type Isolation = Literal["isolated", "inherited"]


class VariationInfo(BaseModel, frozen=True):
    """Metadata for one variation. Number 0 is reserved for the baseline."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(ge=0)
    strategy: str
    summary: str


def baseline_info() -> VariationInfo:
    return VariationInfo(
        number=BASELINE_NUMBER,
        strategy=BASELINE_STRATEGY,
        summary=BASELINE_SUMMARY,
    )


class VariationResult(BaseModel, frozen=True):
    """Outcome of one variation run; produced exactly once per started variation."""

    model_config = ConfigDict(frozen=True)

    variation_number: int = Field(ge=0)
    output: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


def failed_result(variation_number: int, message: str, reason: object) -> VariationResult:
    """Synthesize the failing result recorded when a variation crashes."""
    return VariationResult(
        variation_number=variation_number,
        output=f"ERROR: {message}\n{reason}",
        exit_code=1,
    )


class VariationRequest(BaseModel, frozen=True):
    """Everything a runner needs to execute one variation against the task."""

    model_config = ConfigDict(frozen=True)

    variation_number: int = Field(ge=0)
    task: str
    variation_content: str
    work_dir: Path
    model: str = Field(min_length=1)
    isolation: Isolation = "isolated"


def plan_isolation(variation_number: int, user_mode: bool) -> Isolation:
    """Only the baseline of a user-mode run inherits the ambient configuration."""
    if user_mode and variation_number == BASELINE_NUMBER:
        return "inherited"
    return "isolated"
