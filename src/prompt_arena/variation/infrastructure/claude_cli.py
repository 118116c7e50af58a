"""ClaudeCliVariationRunner — runs one variation as a `claude --print` subprocess."""

import asyncio
import contextlib
import json
import time
from pathlib import PurePosixPath

from prompt_arena.config.domain.runner import RunnerConfig
from prompt_arena.stream.domain.event import ToolUse
from prompt_arena.stream.domain.parser import StreamParser
from prompt_arena.stream.domain.state import StreamUpdate
from prompt_arena.variation.domain.observer import VariationObserver
from prompt_arena.variation.domain.runner import StatusCallback
from prompt_arena.variation.domain.variation import (
    VariationRequest,
    VariationResult,
    failed_result,
)

_READ_CHUNK_SIZE = 65536
_PREVIEW_LENGTH = 20
_TOOL_TARGET_LENGTH = 15

STATUS_DONE = "✓ done"
STATUS_ERROR = "✗ error"

_SANDBOX_SETTINGS: dict[str, object] = {
    "sandbox": {"enabled": True, "autoAllowBashIfSandboxed": True},
    "permissions": {"defaultMode": "acceptEdits"},
}
_EMPTY_MCP_CONFIG: dict[str, object] = {"mcpServers": {}}


def build_task_instruction(task: str) -> str:
    return (
        f"git init && complete this task in full:\n\n{task}\n\n"
        "--- CRITICAL: Once complete, diff all of the changed files. NEVER SUMMARIZE!"
    )


def build_variation_args(binary: str, request: VariationRequest) -> list[str]:
    """Build the argv for one variation child process.

    Isolated runs get no ambient setting sources and an explicit empty MCP
    config; inherited runs load the user's settings and MCP servers.
    """
    args = [
        binary,
        "--model",
        request.model,
        "--print",
        "--output-format",
        "stream-json",
        "--verbose",
        build_task_instruction(request.task),
        "--permission-mode",
        "bypassPermissions",
    ]
    if request.variation_content:
        args += ["--append-system-prompt", request.variation_content]

    isolated = request.isolation == "isolated"
    args += ["--setting-sources", "" if isolated else "user"]
    args += ["--settings", json.dumps(_SANDBOX_SETTINGS)]
    if isolated:
        args += ["--mcp-config", json.dumps(_EMPTY_MCP_CONFIG)]
    return args


def text_preview(text: str) -> str:
    """Short single-line preview of a text delta, or "" when blank."""
    preview = text[:_PREVIEW_LENGTH].replace("\n", " ").strip()
    if not preview:
        return ""
    if len(text) > _PREVIEW_LENGTH:
        preview += "…"
    return preview


def tool_preview(tool_use: ToolUse) -> str:
    short_target = PurePosixPath(tool_use.target).name[:_TOOL_TARGET_LENGTH]
    if short_target:
        return f"{tool_use.name}:{short_target}"
    return tool_use.name


class ClaudeCliVariationRunner:
    """VariationRunner backed by the `claude` CLI in stream-json mode.

    Satisfies the VariationRunner protocol structurally. Each call owns a fresh
    StreamParser, so concurrent runs never share parser state.
    """

    def __init__(self, config: RunnerConfig, observer: VariationObserver) -> None:
        self._config = config
        self._observer = observer

    async def run(
        self,
        request: VariationRequest,
        on_status: StatusCallback | None = None,
    ) -> VariationResult:
        """Run the variation to completion and return its transcript and exit code.

        Spawn and stream failures are returned as a failing result, never raised.
        """
        started = time.monotonic()
        self._observer.variation_process_started(
            variation_number=request.variation_number,
            model=request.model,
            isolation=request.isolation,
        )

        try:
            output, exit_code = await self._execute(request, on_status)
        except Exception as exc:  # noqa: BLE001
            self._observer.variation_process_failed(
                variation_number=request.variation_number,
                reason=str(exc),
            )
            _notify(on_status, STATUS_ERROR)
            return failed_result(
                request.variation_number, "Failed to run variation process", exc
            )

        self._observer.variation_process_exited(
            variation_number=request.variation_number,
            exit_code=exit_code,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        _notify(on_status, STATUS_DONE)
        return VariationResult(
            variation_number=request.variation_number,
            output=output,
            exit_code=exit_code,
        )

    async def _execute(
        self, request: VariationRequest, on_status: StatusCallback | None
    ) -> tuple[str, int]:
        process = await asyncio.create_subprocess_exec(
            *build_variation_args(self._config.binary, request),
            cwd=request.work_dir,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        assert process.stdout is not None  # stdout=PIPE

        parser = StreamParser()
        try:
            while chunk := await process.stdout.read(_READ_CHUNK_SIZE):
                _report(parser.feed(chunk), on_status)
            _report(parser.finish(), on_status)
            exit_code = await process.wait()
        finally:
            if process.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
                await process.wait()
        return parser.text, exit_code


def _notify(on_status: StatusCallback | None, status: str) -> None:
    if on_status is not None:
        on_status(status)


def _report(updates: list[StreamUpdate], on_status: StatusCallback | None) -> None:
    if on_status is None:
        return
    for update in updates:
        if update.is_empty:
            continue
        if update.text_delta:
            preview = text_preview(update.text_delta)
            if preview:
                on_status(preview)
        for tool_use in update.tool_uses:
            on_status(tool_preview(tool_use))
