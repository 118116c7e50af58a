"""FakeVariationRunner — a scripted in-memory VariationRunner for orchestrator tests."""

import asyncio

from prompt_arena.variation.domain.runner import StatusCallback
from prompt_arena.variation.domain.variation import VariationRequest, VariationResult


class FakeVariationRunner:
    """Satisfies the VariationRunner protocol structurally.

    ``side_effects`` maps a variation number to an exception raised from run();
    ``exit_codes`` maps a variation number to the exit code it returns (default 0).
    ``live`` / ``max_live`` track how many runs overlap in time.
    """

    def __init__(
        self,
        side_effects: dict[int, Exception] | None = None,
        exit_codes: dict[int, int] | None = None,
        delay: float = 0.0,
    ) -> None:
        self._side_effects = side_effects or {}
        self._exit_codes = exit_codes or {}
        self._delay = delay
        self.requests: list[VariationRequest] = []
        self.live = 0
        self.max_live = 0

    async def run(
        self,
        request: VariationRequest,
        on_status: StatusCallback | None = None,
    ) -> VariationResult:
        self.requests.append(request)
        self.live += 1
        self.max_live = max(self.max_live, self.live)
        try:
            if on_status is not None:
                on_status("working")
            await asyncio.sleep(self._delay)
            number = request.variation_number
            if number in self._side_effects:
                raise self._side_effects[number]
            return VariationResult(
                variation_number=number,
                output=f"transcript {number}",
                exit_code=self._exit_codes.get(number, 0),
            )
        finally:
            self.live -= 1
