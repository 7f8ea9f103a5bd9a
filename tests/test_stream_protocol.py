import pytest

from clean_text.errors import InvalidEncoding, StreamProtocolError
from clean_text.pipeline.context import CLEAN_END, Status, Stream
from clean_text.sources.runes import read_runes_from_bytes, runes_from_text
from clean_text.stages.line_terminators import ConvertLineTerminators
from clean_text.stages.sort import SortLFLinesI


def _tracked(text, closed):
    def produce():
        try:
            yield from text
            return Status.clean()
        finally:
            closed.append(True)
    return Stream(produce())


def test_status_only_after_drain():
    stream = runes_from_text("ab")
    with pytest.raises(StreamProtocolError):
        stream.status
    assert next(stream) == "a"
    with pytest.raises(StreamProtocolError):
        stream.status
    assert list(stream) == ["b"]
    assert stream.exhausted
    assert stream.status.ok
    assert list(stream) == []


def test_close_propagates_upstream():
    closed = []
    out = ConvertLineTerminators()(_tracked("a\r\nb", closed))
    assert next(out) == "a"
    out.close()
    assert closed == [True]
    assert list(out) == []
    with pytest.raises(StreamProtocolError):
        out.status


def test_context_manager_closes_stream():
    closed = []
    with ConvertLineTerminators()(_tracked("a\rb", closed)) as out:
        assert next(out) == "a"
        assert closed == []
    assert closed == [True]


def test_sort_stage_drains_upstream_before_emitting():
    closed = []
    out = SortLFLinesI()(_tracked("b\na\n", closed))
    assert next(out) == "a"
    assert closed == [True]
    out.close()


def test_read_text_raises_failure():
    assert runes_from_text("ok").read_text() == "ok"
    with pytest.raises(InvalidEncoding):
        read_runes_from_bytes(b"a\xff").read_text()


def test_status_helpers():
    assert Status.clean() is CLEAN_END
    assert CLEAN_END.ok
    assert str(CLEAN_END) == "clean end"
    CLEAN_END.raise_for_status()

    failed = Status.failed(InvalidEncoding(3))
    assert not failed.ok
    assert str(failed) == "InvalidEncoding: invalid UTF-8 at byte 3"
    with pytest.raises(InvalidEncoding):
        failed.raise_for_status()


def test_producer_must_return_status():
    def produce():
        yield "x"

    stream = Stream(produce())
    assert next(stream) == "x"
    with pytest.raises(StreamProtocolError):
        next(stream)
