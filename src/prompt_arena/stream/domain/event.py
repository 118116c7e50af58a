"""StreamEvent and ContentBlock — decoded lines of a coding-agent transcript."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

type EventType = Literal["system", "assistant", "user"]

TEXT_BLOCK = "text"
TOOL_USE_BLOCK = "tool_use"
END_TURN = "end_turn"


class ContentBlock(BaseModel, frozen=True):
    """One block of an assistant message.

    Only ``text`` and ``tool_use`` blocks carry meaning for the parser; any other
    block type (thinking, images, ...) is kept but ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = ""
    text: str | None = None
    id: str | None = None
    name: str | None = None
    input: dict[str, Any] | None = None


class StreamMessage(BaseModel, frozen=True):
    """The ``message`` payload of an assistant or user event."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    model: str | None = None
    content: list[ContentBlock] | None = None
    stop_reason: str | None = None
    usage: dict[str, Any] | None = None


class ToolUseResult(BaseModel, frozen=True):
    model_config = ConfigDict(frozen=True, extra="ignore")

    file_path: str | None = Field(default=None, alias="filePath")


class StreamEvent(BaseModel, frozen=True):
    """One line of stream-json output, tagged by ``type``.

    Every field except ``type`` is optional so that format drift in the external
    tool degrades to missing data instead of a decode failure.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    type: EventType
    subtype: str | None = None
    model: str | None = None
    tools: list[Any] | None = None
    uuid: str | None = None
    message: StreamMessage | None = None
    tool_use_result: ToolUseResult | None = Field(default=None, alias="toolUseResult")

    @property
    def is_assistant(self) -> bool:
        return self.type == "assistant"

    @property
    def message_key(self) -> str:
        """Identity used to deduplicate blocks: message id, else transcript uuid."""
        if self.message is not None and self.message.id:
            return self.message.id
        return self.uuid or ""

    @property
    def content(self) -> list[ContentBlock]:
        if self.message is None or self.message.content is None:
            return []
        return self.message.content

    @property
    def stop_reason(self) -> str:
        if self.message is None:
            return ""
        return self.message.stop_reason or ""


class ToolUse(BaseModel, frozen=True):
    """A tool invocation reported by the agent, with its best-effort target."""

    id: str
    name: str = "Tool"
    target: str = ""


class UsageStats(BaseModel, frozen=True):
    """Token usage summary reported at the end of an assistant turn."""

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cached_tokens: int = Field(default=0, ge=0)
