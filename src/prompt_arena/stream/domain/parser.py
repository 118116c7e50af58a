"""Incremental parser for line-delimited stream-json transcripts.

The functions in this module never raise on malformed input: a line that fails
to decode, or an event missing the expected structure, contributes nothing.
"""

import codecs
import json
import math
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from prompt_arena.stream.domain.event import (
    END_TURN,
    TEXT_BLOCK,
    TOOL_USE_BLOCK,
    StreamEvent,
    ToolUse,
    UsageStats,
)
from prompt_arena.stream.domain.state import ParserState, StreamUpdate

# Input fields consulted, in order, when resolving a tool's file/command argument.
_TARGET_FIELDS: tuple[str, ...] = ("file_path", "path", "command")


def split_chunk(state: ParserState, chunk: str) -> list[str]:
    """Append chunk to the carried fragment and return every complete line.

    The trailing incomplete fragment stays in ``state.partial_line`` until a
    later chunk terminates it.
    """
    state.partial_line += chunk
    *lines, state.partial_line = state.partial_line.split("\n")
    return lines


def parse_stream_line(line: str) -> StreamEvent | None:
    """Decode one transcript line, or return None for blank/invalid lines."""
    if not line.strip():
        return None
    try:
        raw = json.loads(line)
    except ValueError:
        return None
    if not isinstance(raw, dict):
        return None
    try:
        return StreamEvent.model_validate(raw)
    except ValidationError:
        return None


def extract_text_content(event: StreamEvent) -> list[str]:
    """Return the text of every text block of an assistant event, in order."""
    if not event.is_assistant:
        return []
    return [
        block.text
        for block in event.content
        if block.type == TEXT_BLOCK and isinstance(block.text, str)
    ]


def accumulate_text(state: ParserState, event: StreamEvent) -> str:
    """Append unseen text blocks to the transcript and return only the delta.

    Blocks are keyed by ``<message id or uuid>-text-<block index>``, so feeding
    the same event twice never duplicates accumulated output.
    """
    if not event.is_assistant:
        return ""

    delta = ""
    msg_key = event.message_key
    for index, block in enumerate(event.content):
        if block.type != TEXT_BLOCK or not block.text:
            continue
        text_key = f"{msg_key}-text-{index}"
        if text_key in state.seen_text_keys:
            continue
        state.seen_text_keys.add(text_key)
        state.accumulated_text += block.text
        delta += block.text
    return delta


def resolve_tool_target(tool_input: Mapping[str, Any] | None) -> str:
    """Best-effort file/command argument of a tool call, or "" when absent."""
    if not tool_input:
        return ""
    for field_name in _TARGET_FIELDS:
        value = tool_input.get(field_name)
        if isinstance(value, str) and value:
            return value
    return ""


def extract_tool_uses(event: StreamEvent) -> list[ToolUse]:
    """Return every tool_use block with a string id, without deduplication."""
    if not event.is_assistant:
        return []
    return [
        ToolUse(
            id=block.id,
            name=block.name or "Tool",
            target=resolve_tool_target(block.input),
        )
        for block in event.content
        if block.type == TOOL_USE_BLOCK and isinstance(block.id, str) and block.id
    ]


def claim_tool_uses(state: ParserState, event: StreamEvent) -> list[ToolUse]:
    """Return the tool uses of event not yet reported on this stream."""
    claimed: list[ToolUse] = []
    for tool_use in extract_tool_uses(event):
        if tool_use.id in state.seen_tool_keys:
            continue
        state.seen_tool_keys.add(tool_use.id)
        claimed.append(tool_use)
    return claimed


def _count(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and math.isfinite(value):
        return max(int(value), 0)
    return 0


def usage_from_payload(payload: object) -> UsageStats | None:
    """Map a raw usage mapping to UsageStats; missing or bad numbers become 0."""
    if not isinstance(payload, Mapping):
        return None
    return UsageStats(
        input_tokens=_count(payload.get("input_tokens")),
        output_tokens=_count(payload.get("output_tokens")),
        cached_tokens=_count(payload.get("cache_read_input_tokens")),
    )


def extract_usage_stats(event: StreamEvent) -> UsageStats | None:
    """Usage summary of an assistant event that ended its turn, else None."""
    if not event.is_assistant or event.stop_reason != END_TURN:
        return None
    usage = event.message.usage if event.message is not None else None
    return usage_from_payload(usage)


def process_event(state: ParserState, event: StreamEvent) -> StreamUpdate:
    """Fold one decoded event into state and describe what it contributed."""
    return StreamUpdate(
        event=event,
        text_delta=accumulate_text(state, event),
        tool_uses=tuple(claim_tool_uses(state, event)),
        usage=extract_usage_stats(event),
    )


def format_tool_use(tool_name: str, target: str = "") -> str:
    if target:
        return f"📝 {tool_name}: {target}"
    return f"🔧 {tool_name}"


def format_usage_stats(stats: UsageStats) -> str:
    return (
        f"📊 Tokens: {stats.input_tokens} in ({stats.cached_tokens} cached)"
        f" → {stats.output_tokens} out"
    )


class StreamParser:
    """Stateful front end over one subprocess's stdout.

    Accepts raw bytes (decoded incrementally, so multi-byte characters may be
    split across reads) or already-decoded text.
    """

    def __init__(self) -> None:
        self.state = ParserState()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def text(self) -> str:
        return self.state.accumulated_text

    def feed(self, chunk: bytes | str) -> list[StreamUpdate]:
        """Consume one chunk and return an update per complete, decodable line."""
        if isinstance(chunk, bytes):
            chunk = self._decoder.decode(chunk)
        return self._process_lines(split_chunk(self.state, chunk))

    def finish(self) -> list[StreamUpdate]:
        """Flush the decoder and the retained fragment at end of stream."""
        tail = self._decoder.decode(b"", final=True)
        lines = split_chunk(self.state, tail)
        remainder, self.state.partial_line = self.state.partial_line, ""
        if remainder.strip():
            lines.append(remainder)
        return self._process_lines(lines)

    def _process_lines(self, lines: list[str]) -> list[StreamUpdate]:
        updates: list[StreamUpdate] = []
        for line in lines:
            event = parse_stream_line(line)
            if event is None:
                continue
            updates.append(process_event(self.state, event))
        return updates
