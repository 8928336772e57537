"""
Tests for the interview-chat stream decoder.

Last Grunted: 10/18/2026
"""

from __future__ import annotations

from photorabbit.stream_decoder import ChatStreamDecoder, extract_delta
from tests.mock_data import split_bytes, sse_line, sse_stream


def decode_all(chunks: list[bytes]) -> ChatStreamDecoder:
    decoder = ChatStreamDecoder()
    for chunk in chunks:
        decoder.feed(chunk)
    return decoder


class TestExtractDelta:
    """Tests for extract_delta."""

    def test_content_delta(self) -> None:
        """Returns choices[0].delta.content."""
        assert extract_delta({"choices": [{"delta": {"content": "Hi"}}]}) == "Hi"

    def test_missing_paths_return_none(self) -> None:
        """Chunks without a content delta yield None."""
        assert extract_delta({"choices": []}) is None
        assert extract_delta({"choices": [{"delta": {}}]}) is None
        assert extract_delta({"choices": [{"delta": {"role": "assistant"}}]}) is None
        assert extract_delta({"id": "x"}) is None
        assert extract_delta(["not", "a", "dict"]) is None

    def test_non_string_content(self) -> None:
        """Null content is not a delta."""
        assert extract_delta({"choices": [{"delta": {"content": None}}]}) is None


class TestChatStreamDecoder:
    """Tests for ChatStreamDecoder."""

    def test_single_feed(self) -> None:
        """A whole stream in one read yields every delta."""
        decoder = ChatStreamDecoder()
        deltas = decoder.feed(sse_stream(["Hel", "lo", " there"]))

        assert deltas == ["Hel", "lo", " there"]
        assert decoder.content == "Hello there"
        assert decoder.done is True

    def test_byte_at_a_time(self) -> None:
        """Splitting every byte gives the same content."""
        data = sse_stream(["The belly ", "flop!"])
        decoder = decode_all(split_bytes(data, sizes=[1]))

        assert decoder.content == "The belly flop!"

    def test_random_boundaries(self) -> None:
        """Content is independent of where reads split."""
        data = sse_stream(["A golden ", "retriever ", "alarm clock!"], keepalive=True)
        for seed in range(10):
            decoder = decode_all(split_bytes(data, seed=seed))
            assert decoder.content == "A golden retriever alarm clock!"

    def test_multibyte_characters_split(self) -> None:
        """Multi-byte characters cut across reads decode intact."""
        data = sse_stream(["Ball on the face 🐶", " … so dedicated ✨"])
        decoder = decode_all(split_bytes(data, sizes=[3, 1, 2]))

        assert decoder.content == "Ball on the face 🐶 … so dedicated ✨"
        assert "�" not in decoder.content

    def test_partial_line_kept_pending(self) -> None:
        """An unterminated line is buffered until its newline arrives."""
        decoder = ChatStreamDecoder()
        line = sse_line("Hi")

        assert decoder.feed(line[:-1]) == []
        assert decoder.pending == line[:-1]
        assert decoder.feed("\n") == ["Hi"]
        assert decoder.pending == ""

    def test_comments_and_blank_lines_ignored(self) -> None:
        """Comment lines and blank separators carry nothing."""
        decoder = ChatStreamDecoder()
        deltas = decoder.feed(": keep-alive\n\n\n" + sse_line("ok"))

        assert deltas == ["ok"]

    def test_crlf_line_endings(self) -> None:
        """Trailing carriage returns are stripped."""
        decoder = ChatStreamDecoder()
        deltas = decoder.feed(sse_line("ok").replace("\n", "\r\n"))

        assert deltas == ["ok"]

    def test_non_data_lines_ignored(self) -> None:
        """Other SSE fields such as event: are skipped."""
        decoder = ChatStreamDecoder()
        deltas = decoder.feed("event: ping\n" + sse_line("ok"))

        assert deltas == ["ok"]

    def test_done_stops_processing(self) -> None:
        """Lines after [DONE] are left for the next read."""
        decoder = ChatStreamDecoder()
        deltas = decoder.feed(sse_line("a") + "data: [DONE]\n" + sse_line("b"))

        assert deltas == ["a"]
        assert decoder.done is True
        assert decoder.content == "a"
        assert decoder.pending == sse_line("b")

    def test_unparseable_json_is_rebuffered(self) -> None:
        """A data line that is not valid JSON goes back into the buffer."""
        decoder = ChatStreamDecoder()
        deltas = decoder.feed('data: {"choices": [\n')

        assert deltas == []
        assert decoder.content == ""
        assert decoder.pending == 'data: {"choices": [\n'

    def test_deltas_without_content_skipped(self) -> None:
        """Role-only and finish chunks add nothing."""
        decoder = ChatStreamDecoder()
        deltas = decoder.feed(
            'data: {"choices":[{"delta":{"role":"assistant"}}]}\n'
            + sse_line("Hi")
            + 'data: {"choices":[{"delta":{},"finish_reason":"stop"}]}\n'
        )

        assert deltas == ["Hi"]
        assert decoder.content == "Hi"

    def test_stream_without_done(self) -> None:
        """A stream that just ends keeps what it delivered."""
        decoder = ChatStreamDecoder()
        decoder.feed(sse_stream(["partial"], done=False))

        assert decoder.content == "partial"
        assert decoder.done is False
