"""
Incremental decoder for the interview-chat stream.

The completion stream is newline-delimited text in a server-sent-events
framing:

    : keep-alive comment
    data: {"choices": [{"delta": {"content": "Hel"}}]}
    data: {"choices": [{"delta": {"content": "lo"}}]}
    data: [DONE]

Network reads can split a line (or a multi-byte character) anywhere, so the
decoder keeps a residual buffer between feeds and only parses complete lines.

Last Grunted: 10/18/2026
"""

from __future__ import annotations

import codecs
import json
import logging
from typing import Any


__all__ = ["ChatStreamDecoder", "DATA_PREFIX", "DONE_SENTINEL", "extract_delta"]


logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def extract_delta(payload: Any) -> str | None:
    """
    Pull ``choices[0].delta.content`` out of a parsed chunk.

    Returns:
        The content delta, or None when the chunk carries none.
    """
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if not isinstance(content, str):
        return None
    return content


class ChatStreamDecoder:
    """
    Turns raw stream reads into content deltas.

    Each call to ``feed`` appends to the residual buffer and processes every
    complete line in it. Feeding the same bytes split at any boundaries
    yields the same ``content``.

    Example:
        >>> decoder = ChatStreamDecoder()
        >>> decoder.feed(b'data: {"choices":[{"delta":{"content":"Hi"}}]}\\n')
        ['Hi']
        >>> decoder.content
        'Hi'
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._text_decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self.content = ""
        self.done = False

    @property
    def pending(self) -> str:
        """Text received but not yet consumed as a complete line."""
        return self._buffer

    def feed(self, chunk: bytes | str) -> list[str]:
        """
        Consume one network read.

        Args:
            chunk: Raw bytes (decoded incrementally as UTF-8) or text.

        Returns:
            Content deltas emitted by the lines completed by this read,
            in stream order.
        """
        if isinstance(chunk, bytes):
            self._buffer += self._text_decoder.decode(chunk)
        else:
            self._buffer += chunk

        deltas: list[str] = []
        while True:
            newline_idx = self._buffer.find("\n")
            if newline_idx == -1:
                break

            line = self._buffer[:newline_idx]
            self._buffer = self._buffer[newline_idx + 1:]

            if line.endswith("\r"):
                line = line[:-1]
            if line.startswith(":") or not line.strip():
                continue
            if not line.startswith(DATA_PREFIX):
                continue

            data = line[len(DATA_PREFIX):].strip()
            if data == DONE_SENTINEL:
                # Lines after the sentinel wait for the next feed.
                self.done = True
                break

            try:
                payload = json.loads(data)
            except json.JSONDecodeError:
                logger.debug("Incomplete stream line re-buffered: %.80s", line)
                self._buffer = line + "\n" + self._buffer
                break

            delta = extract_delta(payload)
            if delta:
                self.content += delta
                deltas.append(delta)

        return deltas
