"""ParserState and StreamUpdate — per-stream parsing state and its per-line output."""

from dataclasses import dataclass, field

from prompt_arena.stream.domain.event import StreamEvent, ToolUse, UsageStats


@dataclass
class ParserState:
    """Mutable state owned by exactly one subprocess stream.

    Created when the subprocess is spawned, mutated once per received chunk,
    discarded when the subprocess exits. ``accumulated_text`` is append-only.
    """

    accumulated_text: str = ""
    seen_text_keys: set[str] = field(default_factory=set)
    seen_tool_keys: set[str] = field(default_factory=set)
    partial_line: str = ""


@dataclass(frozen=True)
class StreamUpdate:
    """What a single decoded transcript line contributed to the stream."""

    event: StreamEvent
    text_delta: str = ""
    tool_uses: tuple[ToolUse, ...] = ()
    usage: UsageStats | None = None

    @property
    def is_empty(self) -> bool:
        return not self.text_delta and not self.tool_uses and self.usage is None
