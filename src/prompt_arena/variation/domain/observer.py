"""VariationObserver port — domain events emitted around variation subprocesses."""

from typing import Protocol


class VariationObserver(Protocol):
    """Observer port for variation process events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def variation_process_started(
        self, variation_number: int, model: str, isolation: str
    ) -> None: ...

    def variation_process_exited(
        self, variation_number: int, exit_code: int, duration_ms: int
    ) -> None: ...

    def variation_process_failed(self, variation_number: int, reason: str) -> None: ...
