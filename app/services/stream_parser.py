"""Incremental decoder for the upstream ``data:`` event stream.

The upstream sends newline-delimited events::

    data: {"choices": [{"delta": {"content": "Hel"}}]}
    data: {"choices": [{"delta": {"content": "lo"}}]}
    data: [DONE]

Network reads do not respect line or character boundaries, so the parser
keeps both a partial UTF-8 sequence and a partial line between calls to
``feed``.
"""

from __future__ import annotations

import codecs
import json
import logging

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


class StreamParser:
    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""
        self.done = False

    def feed(self, chunk: bytes) -> list[str]:
        """Consume one network read and return the text deltas it completed."""
        if self.done:
            return []
        self._buffer += self._decoder.decode(chunk)
        return self._drain()

    def close(self) -> list[str]:
        """Flush whatever is left once the upstream body ends."""
        if self.done:
            return []
        self._buffer += self._decoder.decode(b"", final=True)
        if self._buffer and not self._buffer.endswith("\n"):
            self._buffer += "\n"
        return self._drain()

    def _drain(self) -> list[str]:
        fragments: list[str] = []
        while "\n" in self._buffer:
            line, self._buffer = self._buffer.split("\n", 1)
            payload = _payload_of(line)
            if payload is None:
                continue
            if payload == DONE_SENTINEL:
                self.done = True
                self._buffer = ""
                break
            text = _delta_text(payload)
            if text:
                fragments.append(text)
        return fragments


def _payload_of(line: str) -> str | None:
    line = line.rstrip("\r")
    if not line.startswith(DATA_PREFIX):
        return None
    payload = line[len(DATA_PREFIX):]
    if payload.startswith(" "):
        payload = payload[1:]
    return payload


def _delta_text(payload: str) -> str | None:
    try:
        event = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug("Skipping malformed stream event: %r", payload[:200])
        return None

    choices = event.get("choices") if isinstance(event, dict) else None
    first = choices[0] if isinstance(choices, list) and choices else None
    delta = first.get("delta") if isinstance(first, dict) else None
    content = delta.get("content") if isinstance(delta, dict) else None
    if not isinstance(delta, dict):
        logger.debug("Skipping stream event without a delta: %r", payload[:200])
    return content if isinstance(content, str) else None
