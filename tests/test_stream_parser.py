from app.services.stream_parser import StreamParser


def _event(content: str) -> bytes:
    return ('data: {"choices": [{"delta": {"content": "%s"}}]}\n' % content).encode("utf-8")


def test_feed_returns_completed_deltas():
    parser = StreamParser()

    assert parser.feed(_event("Hel") + _event("lo")) == ["Hel", "lo"]
    assert parser.done is False


def test_line_split_across_reads_is_reassembled():
    parser = StreamParser()
    raw = _event("split")

    assert parser.feed(raw[:10]) == []
    assert parser.feed(raw[10:]) == ["split"]


def test_multibyte_character_split_across_reads():
    parser = StreamParser()
    raw = _event("héllo wörld")
    cut = raw.index("é".encode("utf-8")) + 1

    assert parser.feed(raw[:cut]) == []
    assert parser.feed(raw[cut:]) == ["héllo wörld"]


def test_sentinel_stops_parsing():
    parser = StreamParser()

    out = parser.feed(_event("a") + b"data: [DONE]\n" + _event("b"))

    assert out == ["a"]
    assert parser.done is True
    assert parser.feed(_event("c")) == []
    assert parser.close() == []


def test_malformed_and_foreign_lines_are_skipped():
    parser = StreamParser()

    out = parser.feed(
        b"data: {oops\n"
        b"event: ping\n"
        b"\n"
        b'data: {"choices": [{"delta": {"role": "assistant"}}]}\n'
        b"data: []\n" + _event("kept")
    )

    assert out == ["kept"]


def test_crlf_and_prefix_without_space():
    parser = StreamParser()

    out = parser.feed(b'data:{"choices": [{"delta": {"content": "x"}}]}\r\n')

    assert out == ["x"]


def test_close_flushes_trailing_line():
    parser = StreamParser()
    raw = _event("tail").rstrip(b"\n")

    assert parser.feed(raw) == []
    assert parser.close() == ["tail"]


def test_events_with_unexpected_shape_are_skipped():
    parser = StreamParser()

    out = parser.feed(
        _event("a")
        + b'data: {"choices": {"x": 1}}\n'
        + b'data: {"choices": "abc"}\n'
        + b'data: {"choices": [null]}\n'
        + b'data: {"choices": [{"delta": ["x"]}]}\n'
        + b'data: {"choices": [{"delta": {"content": 5}}]}\n'
        + b"data: 42\n"
        + _event("b")
    )

    assert out == ["a", "b"]
