"""VariationRunner Protocol — structural interface for executing one variation."""

from collections.abc import Callable
from typing import Protocol

from prompt_arena.variation.domain.variation import VariationRequest, VariationResult

type StatusCallback = Callable[[str], None]


class VariationRunner(Protocol):
    """Runs a variation against the task and reports liveness through on_status.

    Implementations convert their own failures into a failing VariationResult
    instead of raising.
    """

    async def run(
        self,
        request: VariationRequest,
        on_status: StatusCallback | None = None,
    ) -> VariationResult: ...
