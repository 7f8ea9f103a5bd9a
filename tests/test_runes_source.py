import io

import pytest

from clean_text.errors import InvalidEncoding, UpstreamIOError
from clean_text.sources.runes import read_runes, read_runes_from_bytes, runes_from_text


class FailingReader:
    def __init__(self, first: bytes):
        self.first = first
        self.calls = 0

    def read(self, n):
        self.calls += 1
        if self.calls == 1:
            return self.first
        raise OSError("disk gone")


def test_read_runes_valid_and_invalid():
    cases = {
        b"": ("", None),
        b"\x80a": ("", 0),
        "a•🧐/".encode(): ("a•🧐/", None),
        "@�\t".encode(): ("@�\t", None),
        b"=\xe2\x80\xa2\xf0\x9f!": ("=•", 4),
        b"ab\xe2\x80": ("ab", 2),
        b"abcdef\xff": ("abcdef", 6),
        b"\xed\xa0\x80": ("", 0),
    }
    for data, (want, position) in cases.items():
        for chunk_size in (1, 3, 4096):
            runes, status = read_runes_from_bytes(data, chunk_size=chunk_size).drain()
            assert "".join(runes) == want, (data, chunk_size)
            if position is None:
                assert status.ok
            else:
                assert isinstance(status.error, InvalidEncoding)
                assert status.error.position == position, (data, chunk_size)


def test_runes_are_single_code_points():
    runes, _ = read_runes_from_bytes("👽é\r\n".encode(), chunk_size=1).drain()
    assert runes == ["👽", "é", "\r", "\n"]


def test_upstream_io_failure_keeps_decoded_prefix():
    reader = FailingReader(b"ok")
    runes, status = read_runes(reader, chunk_size=2).drain()
    assert "".join(runes) == "ok"
    assert isinstance(status.error, UpstreamIOError)
    assert isinstance(status.error.cause, OSError)
    assert "disk gone" in str(status.error)


def test_source_is_not_closed():
    buf = io.BytesIO(b"abc")
    read_runes(buf).drain()
    assert not buf.closed


def test_chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        read_runes(io.BytesIO(b""), chunk_size=0)


def test_runes_from_text():
    runes, status = runes_from_text("hé").drain()
    assert runes == ["h", "é"]
    assert status.ok
