"""ClaudeAgentSDKJudgeSession — judge session implementation using the Claude Agent SDK."""

import time
from pathlib import Path

from claude_agent_sdk import query
from claude_agent_sdk._errors import ClaudeSDKError, ProcessError
from claude_agent_sdk.types import (
    AssistantMessage,
    ClaudeAgentOptions,
    ResultMessage,
    SystemPromptPreset,
    TextBlock,
    ToolUseBlock,
)

from prompt_arena.judge.domain.observer import JudgeObserver
from prompt_arena.judge.domain.request import JudgeRequest, JudgeResponse
from prompt_arena.stream.domain.event import UsageStats
from prompt_arena.stream.domain.parser import resolve_tool_target, usage_from_payload

_CLAUDE_CODE_PRESET = SystemPromptPreset(type="preset", preset="claude_code")


class ClaudeAgentSDKJudgeSession:
    """JudgeSession backed by the Claude Agent SDK.

    The judge works inside the run's output directory, where it writes the task
    and variation artifacts. Ambient user settings and MCP servers are never
    loaded, so the judge behaves the same on every machine.

    Satisfies the JudgeSession protocol structurally.
    """

    def __init__(self, workspace: Path, observer: JudgeObserver) -> None:
        self._workspace = workspace
        self._observer = observer

    async def send(self, request: JudgeRequest) -> JudgeResponse:
        """Run one judge turn and return its concatenated text output.

        SDK failures are reported through the observer and returned as a
        non-zero exit code; they are not raised.
        """
        session_id = request.target_session_id
        self._observer.judge_session_started(
            session_id=session_id, model=request.model, resumed=request.is_resume
        )

        text_parts: list[str] = []
        seen_tool_ids: set[str] = set()
        result_message: ResultMessage | None = None
        started = time.monotonic()

        try:
            async for message in query(
                prompt=request.user_message, options=self._build_options(request)
            ):
                if isinstance(message, ResultMessage):
                    result_message = message
                elif isinstance(message, AssistantMessage):
                    for block in message.content:
                        if isinstance(block, TextBlock):
                            text_parts.append(block.text)
                            self._observer.judge_text(
                                session_id=session_id, text=block.text
                            )
                        elif isinstance(block, ToolUseBlock):
                            if block.id in seen_tool_ids:
                                continue
                            seen_tool_ids.add(block.id)
                            self._observer.judge_tool_used(
                                session_id=session_id,
                                tool_name=block.name,
                                target=resolve_tool_target(block.input),
                            )
        except ProcessError as exc:
            return self._failed(request, text_parts, exc.exit_code or 1, str(exc))
        except ClaudeSDKError as exc:
            return self._failed(request, text_parts, 1, str(exc))
        except Exception as exc:  # noqa: BLE001
            # The SDK raises a bare Exception when its message reader hits a
            # fatal error, e.g. the CLI subprocess exiting early.
            return self._failed(request, text_parts, 1, str(exc))

        output = "".join(text_parts)

        if result_message is None:
            return self._failed(
                request, text_parts, 1, "no ResultMessage in response stream"
            )

        usage = usage_from_payload(result_message.usage)
        if usage is not None:
            self._observer.judge_usage(session_id=session_id, usage=usage)

        if result_message.is_error:
            return self._failed(
                request,
                text_parts,
                1,
                f"judge returned error response: {result_message.result}",
                usage=usage,
            )

        self._observer.judge_session_completed(
            session_id=session_id,
            duration_ms=result_message.duration_ms
            or int((time.monotonic() - started) * 1000),
            num_turns=result_message.num_turns,
            cost_usd=result_message.total_cost_usd,
        )
        return JudgeResponse(
            output=output,
            exit_code=0,
            session_id=result_message.session_id or session_id,
            usage=usage,
        )

    def _build_options(self, request: JudgeRequest) -> ClaudeAgentOptions:
        extra_args: dict[str, str | None] = {"strict-mcp-config": None}
        if request.session_id is not None:
            extra_args["session-id"] = request.session_id

        return ClaudeAgentOptions(
            model=request.model,
            system_prompt=request.system_prompt or _CLAUDE_CODE_PRESET,
            resume=request.resume_session_id,
            permission_mode="acceptEdits",
            setting_sources=[],
            mcp_servers={},
            cwd=self._workspace,
            add_dirs=[self._workspace],
            extra_args=extra_args,
        )

    def _failed(
        self,
        request: JudgeRequest,
        text_parts: list[str],
        exit_code: int,
        reason: str,
        usage: UsageStats | None = None,
    ) -> JudgeResponse:
        self._observer.judge_session_failed(
            session_id=request.target_session_id, exit_code=exit_code, reason=reason
        )
        return JudgeResponse(
            output="".join(text_parts),
            exit_code=exit_code,
            session_id=request.target_session_id,
            usage=usage,
        )
