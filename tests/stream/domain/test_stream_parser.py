"""Tests for the incremental stream-json parser."""

import json
from typing import Any

from prompt_arena.stream.domain.event import StreamEvent, UsageStats
from prompt_arena.stream.domain.parser import (
    StreamParser,
    accumulate_text,
    claim_tool_uses,
    extract_text_content,
    extract_tool_uses,
    extract_usage_stats,
    format_tool_use,
    format_usage_stats,
    parse_stream_line,
    resolve_tool_target,
    split_chunk,
    usage_from_payload,
)
from prompt_arena.stream.domain.state import ParserState


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _assistant(
    content: list[dict[str, Any]],
    message_id: str | None = "msg_1",
    uuid: str | None = None,
    stop_reason: str | None = None,
    usage: dict[str, Any] | None = None,
) -> dict[str, Any]:
    message: dict[str, Any] = {"content": content}
    if message_id is not None:
        message["id"] = message_id
    if stop_reason is not None:
        message["stop_reason"] = stop_reason
    if usage is not None:
        message["usage"] = usage
    event: dict[str, Any] = {"type": "assistant", "message": message}
    if uuid is not None:
        event["uuid"] = uuid
    return event


def _event(raw: dict[str, Any]) -> StreamEvent:
    return StreamEvent.model_validate(raw)


def _line(raw: dict[str, Any]) -> str:
    return json.dumps(raw, ensure_ascii=False) + "\n"


# ---------------------------------------------------------------------------
# split_chunk
# ---------------------------------------------------------------------------


class TestSplitChunk:
    """Complete lines are returned; the trailing fragment is carried over."""

    def test_returns_complete_lines_and_retains_partial(self) -> None:
        state = ParserState()
        lines = split_chunk(state, "line1\nline2\npartial")
        assert lines == ["line1", "line2"]
        assert state.partial_line == "partial"

    def test_partial_is_completed_by_next_chunk(self) -> None:
        state = ParserState()
        split_chunk(state, "hel")
        lines = split_chunk(state, "lo\nwor")
        assert lines == ["hello"]
        assert state.partial_line == "wor"

    def test_chunk_ending_in_newline_leaves_empty_partial(self) -> None:
        state = ParserState()
        assert split_chunk(state, "a\nb\n") == ["a", "b"]
        assert state.partial_line == ""

    def test_chunking_does_not_change_the_lines(self) -> None:
        text = "first line\nsecond line\nthird"
        whole = ParserState()
        expected = split_chunk(whole, text)

        for size in (1, 2, 3, 7):
            state = ParserState()
            lines: list[str] = []
            for start in range(0, len(text), size):
                lines += split_chunk(state, text[start : start + size])
            assert lines == expected
            assert state.partial_line == whole.partial_line


# ---------------------------------------------------------------------------
# parse_stream_line
# ---------------------------------------------------------------------------


class TestParseStreamLine:
    """Malformed lines decode to None instead of raising."""

    def test_parses_valid_assistant_line(self) -> None:
        event = parse_stream_line('{"type":"assistant","message":{"content":[]}}')
        assert event is not None
        assert event.is_assistant
        assert event.content == []

    def test_blank_lines_are_none(self) -> None:
        assert parse_stream_line("") is None
        assert parse_stream_line("   ") is None

    def test_invalid_json_is_none(self) -> None:
        assert parse_stream_line("not json") is None
        assert parse_stream_line("{invalid}") is None

    def test_non_object_json_is_none(self) -> None:
        assert parse_stream_line("[1, 2, 3]") is None
        assert parse_stream_line('"assistant"') is None

    def test_unknown_event_type_is_none(self) -> None:
        assert parse_stream_line('{"type":"result","result":"done"}') is None

    def test_schema_violation_is_none(self) -> None:
        assert parse_stream_line('{"type":"assistant","message":{"content":"x"}}') is None

    def test_unknown_keys_are_ignored(self) -> None:
        event = parse_stream_line(
            '{"type":"system","subtype":"init","model":"haiku","session_id":"s"}'
        )
        assert event is not None
        assert event.subtype == "init"
        assert event.model == "haiku"

    def test_tool_use_result_alias(self) -> None:
        event = parse_stream_line(
            '{"type":"user","toolUseResult":{"filePath":"/tmp/a.py"}}'
        )
        assert event is not None
        assert event.tool_use_result is not None
        assert event.tool_use_result.file_path == "/tmp/a.py"


# ---------------------------------------------------------------------------
# Text extraction and accumulation
# ---------------------------------------------------------------------------


class TestExtractTextContent:
    def test_extracts_text_blocks_in_order(self) -> None:
        event = _event(
            _assistant([{"type": "text", "text": "Hello "}, {"type": "text", "text": "World"}])
        )
        assert extract_text_content(event) == ["Hello ", "World"]

    def test_ignores_non_assistant_events(self) -> None:
        event = _event(
            {"type": "user", "message": {"content": [{"type": "text", "text": "x"}]}}
        )
        assert extract_text_content(event) == []

    def test_ignores_other_block_types(self) -> None:
        event = _event(
            _assistant(
                [
                    {"type": "thinking", "thinking": "hmm"},
                    {"type": "tool_use", "id": "t1", "name": "Read", "input": {}},
                    {"type": "text", "text": "ok"},
                ]
            )
        )
        assert extract_text_content(event) == ["ok"]

    def test_missing_message_gives_empty_list(self) -> None:
        assert extract_text_content(_event({"type": "assistant"})) == []


class TestAccumulateText:
    """Text blocks are appended once per (message, block index) key."""

    def test_appends_text_and_returns_delta(self) -> None:
        state = ParserState()
        event = _event(_assistant([{"type": "text", "text": "Hello"}]))
        assert accumulate_text(state, event) == "Hello"
        assert state.accumulated_text == "Hello"

    def test_redelivery_is_idempotent(self) -> None:
        state = ParserState()
        event = _event(_assistant([{"type": "text", "text": "Hello"}]))
        accumulate_text(state, event)
        assert accumulate_text(state, event) == ""
        assert state.accumulated_text == "Hello"

    def test_growing_message_only_adds_new_blocks(self) -> None:
        state = ParserState()
        accumulate_text(state, _event(_assistant([{"type": "text", "text": "A"}])))
        delta = accumulate_text(
            state,
            _event(_assistant([{"type": "text", "text": "A"}, {"type": "text", "text": "B"}])),
        )
        assert delta == "B"
        assert state.accumulated_text == "AB"

    def test_distinct_messages_accumulate_separately(self) -> None:
        state = ParserState()
        accumulate_text(state, _event(_assistant([{"type": "text", "text": "one "}], "m1")))
        accumulate_text(state, _event(_assistant([{"type": "text", "text": "two"}], "m2")))
        assert state.accumulated_text == "one two"

    def test_falls_back_to_uuid_when_message_has_no_id(self) -> None:
        state = ParserState()
        first = _event(
            _assistant([{"type": "text", "text": "x"}], message_id=None, uuid="u-1")
        )
        accumulate_text(state, first)
        assert "u-1-text-0" in state.seen_text_keys

    def test_empty_text_blocks_are_skipped(self) -> None:
        state = ParserState()
        assert accumulate_text(state, _event(_assistant([{"type": "text", "text": ""}]))) == ""
        assert state.seen_text_keys == set()

    def test_non_assistant_events_contribute_nothing(self) -> None:
        state = ParserState()
        event = _event({"type": "system", "subtype": "init"})
        assert accumulate_text(state, event) == ""
        assert state.accumulated_text == ""


# ---------------------------------------------------------------------------
# Tool uses
# ---------------------------------------------------------------------------


class TestToolUses:
    def test_target_prefers_file_path_then_path_then_command(self) -> None:
        assert resolve_tool_target({"file_path": "a.py", "path": "b", "command": "c"}) == "a.py"
        assert resolve_tool_target({"path": "src/", "command": "ls"}) == "src/"
        assert resolve_tool_target({"command": "pytest -q"}) == "pytest -q"
        assert resolve_tool_target({"pattern": "*.py"}) == ""
        assert resolve_tool_target(None) == ""

    def test_non_string_targets_are_ignored(self) -> None:
        assert resolve_tool_target({"file_path": 3, "command": "ls"}) == "ls"

    def test_extracts_tool_uses_with_defaults(self) -> None:
        event = _event(
            _assistant(
                [
                    {"type": "tool_use", "id": "t1", "name": "Write", "input": {"file_path": "/x/app.py"}},
                    {"type": "tool_use", "id": "t2", "input": {}},
                ]
            )
        )
        tools = extract_tool_uses(event)
        assert [(t.id, t.name, t.target) for t in tools] == [
            ("t1", "Write", "/x/app.py"),
            ("t2", "Tool", ""),
        ]

    def test_tool_blocks_without_id_are_skipped(self) -> None:
        event = _event(_assistant([{"type": "tool_use", "name": "Bash", "input": {}}]))
        assert extract_tool_uses(event) == []

    def test_claim_reports_each_tool_once(self) -> None:
        state = ParserState()
        event = _event(
            _assistant([{"type": "tool_use", "id": "t1", "name": "Bash", "input": {"command": "ls"}}])
        )
        assert len(claim_tool_uses(state, event)) == 1
        assert claim_tool_uses(state, event) == []


# ---------------------------------------------------------------------------
# Usage
# ---------------------------------------------------------------------------


class TestUsageStats:
    def test_end_turn_usage_is_extracted(self) -> None:
        event = _event(
            _assistant(
                [],
                stop_reason="end_turn",
                usage={"input_tokens": 100, "output_tokens": 50, "cache_read_input_tokens": 20},
            )
        )
        assert extract_usage_stats(event) == UsageStats(
            input_tokens=100, output_tokens=50, cached_tokens=20
        )

    def test_other_stop_reasons_give_none(self) -> None:
        event = _event(
            _assistant([], stop_reason="tool_use", usage={"input_tokens": 1})
        )
        assert extract_usage_stats(event) is None

    def test_missing_usage_gives_none(self) -> None:
        assert extract_usage_stats(_event(_assistant([], stop_reason="end_turn"))) is None

    def test_malformed_numbers_default_to_zero(self) -> None:
        usage = usage_from_payload(
            {"input_tokens": "many", "output_tokens": -4, "cache_read_input_tokens": True}
        )
        assert usage == UsageStats(input_tokens=0, output_tokens=0, cached_tokens=0)

    def test_float_counts_are_truncated(self) -> None:
        usage = usage_from_payload({"input_tokens": 12.9, "output_tokens": float("nan")})
        assert usage == UsageStats(input_tokens=12, output_tokens=0, cached_tokens=0)

    def test_non_mapping_payload_gives_none(self) -> None:
        assert usage_from_payload([1, 2]) is None
        assert usage_from_payload(None) is None


class TestFormatting:
    def test_format_tool_use_with_target(self) -> None:
        assert format_tool_use("Write", "src/app.py") == "📝 Write: src/app.py"

    def test_format_tool_use_without_target(self) -> None:
        assert format_tool_use("TodoWrite") == "🔧 TodoWrite"

    def test_format_usage_stats(self) -> None:
        stats = UsageStats(input_tokens=100, output_tokens=50, cached_tokens=20)
        assert format_usage_stats(stats) == "📊 Tokens: 100 in (20 cached) → 50 out"


# ---------------------------------------------------------------------------
# StreamParser
# ---------------------------------------------------------------------------


class TestStreamParser:
    """The stateful front end yields the same transcript however stdout is chunked."""

    def _transcript(self) -> bytes:
        lines = [
            {"type": "system", "subtype": "init", "model": "haiku"},
            _assistant([{"type": "text", "text": "Héllo "}], "m1"),
            _assistant(
                [
                    {"type": "text", "text": "Héllo "},
                    {"type": "tool_use", "id": "t1", "name": "Write", "input": {"file_path": "a.py"}},
                ],
                "m1",
            ),
            _assistant([{"type": "text", "text": "wörld ✓"}], "m2", stop_reason="end_turn", usage={"input_tokens": 3}),
        ]
        return "".join(_line(raw) for raw in lines).encode("utf-8")

    def test_whole_stream_accumulates_text(self) -> None:
        parser = StreamParser()
        parser.feed(self._transcript())
        parser.finish()
        assert parser.text == "Héllo wörld ✓"

    def test_byte_by_byte_feed_matches_whole_feed(self) -> None:
        data = self._transcript()
        parser = StreamParser()
        for index in range(len(data)):
            parser.feed(data[index : index + 1])
        parser.finish()
        assert parser.text == "Héllo wörld ✓"

    def test_updates_report_deltas_tools_and_usage(self) -> None:
        parser = StreamParser()
        updates = parser.feed(self._transcript())
        assert [u.text_delta for u in updates] == ["", "Héllo ", "", "wörld ✓"]
        assert [t.id for u in updates for t in u.tool_uses] == ["t1"]
        assert updates[-1].usage == UsageStats(input_tokens=3)
        assert updates[0].is_empty

    def test_finish_flushes_unterminated_final_line(self) -> None:
        parser = StreamParser()
        parser.feed(json.dumps(_assistant([{"type": "text", "text": "tail"}])))
        assert parser.text == ""
        updates = parser.finish()
        assert len(updates) == 1
        assert parser.text == "tail"
        assert parser.state.partial_line == ""

    def test_garbage_lines_are_skipped(self) -> None:
        parser = StreamParser()
        parser.feed("not json\n\n[1]\n" + _line(_assistant([{"type": "text", "text": "ok"}])))
        parser.finish()
        assert parser.text == "ok"

    def test_accepts_text_chunks(self) -> None:
        parser = StreamParser()
        parser.feed(_line(_assistant([{"type": "text", "text": "plain"}])))
        assert parser.text == "plain"
