"""Structlog implementation of the VariationObserver port."""

import structlog


class StructlogVariationObserver:
    """Delegates variation process events to structlog.

    Satisfies the VariationObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def variation_process_started(
        self, variation_number: int, model: str, isolation: str
    ) -> None:
        self._log.debug(
            "variation.process.started",
            variation_number=variation_number,
            model=model,
            isolation=isolation,
        )

    def variation_process_exited(
        self, variation_number: int, exit_code: int, duration_ms: int
    ) -> None:
        self._log.debug(
            "variation.process.exited",
            variation_number=variation_number,
            exit_code=exit_code,
            duration_ms=duration_ms,
        )

    def variation_process_failed(self, variation_number: int, reason: str) -> None:
        self._log.error(
            "variation.process.failed",
            variation_number=variation_number,
            reason=reason,
        )
