"""Variation runner configuration model."""

from pydantic import BaseModel, Field


class RunnerConfig(BaseModel, frozen=True):
    """How variation subprocesses are launched.

    ``max_concurrent`` caps the number of live child processes; None means
    every variation starts at once.
    """

    model: str = Field(default="haiku", min_length=1)
    binary: str = Field(default="claude", min_length=1)
    max_concurrent: int | None = Field(default=None, ge=1)
