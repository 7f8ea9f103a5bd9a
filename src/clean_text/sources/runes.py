"""Rune source: forward-only byte source -> Stream of code points.

Bytes are read in chunks and decoded with an incremental strict UTF-8 decoder,
so multi-byte sequences split across chunks are handled. A malformed sequence
ends the stream with InvalidEncoding at the absolute byte offset of its first
byte; every valid rune before it is still emitted.
"""

from __future__ import annotations
import codecs
import io
import logging
from typing import BinaryIO, Generator

from ..errors import InvalidEncoding, UpstreamIOError
from ..pipeline.context import Status, Stream

log = logging.getLogger("clean_text.sources")

DEFAULT_CHUNK_SIZE = 64 * 1024


def read_runes(source: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Stream[str]:
    """Decode ``source`` lazily. The source is read once and is not closed."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    return Stream(_decode(source, chunk_size))


def read_runes_from_bytes(data: bytes, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Stream[str]:
    return read_runes(io.BytesIO(data), chunk_size=chunk_size)


def runes_from_text(text: str) -> Stream[str]:
    """Clean stream over an already-decoded string."""
    def produce() -> Generator[str, None, Status]:
        yield from text
        return Status.clean()

    return Stream(produce())


def _decode(source: BinaryIO, chunk_size: int) -> Generator[str, None, Status]:
    decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
    consumed = 0
    while True:
        try:
            chunk = source.read(chunk_size)
        except OSError as exc:
            log.debug("Byte source failed after %d bytes: %s", consumed, exc)
            return Status.failed(UpstreamIOError(f"read failed after {consumed} bytes", exc))
        final = not chunk
        try:
            text = decoder.decode(chunk, final=final)
        except UnicodeDecodeError as exc:
            # exc.object is the decoder's carried-over bytes followed by chunk
            carried = len(exc.object) - len(chunk)
            yield from exc.object[:exc.start].decode("utf-8")
            position = consumed - carried + exc.start
            log.debug("Invalid UTF-8 at byte %d (%s)", position, exc.reason)
            return Status.failed(InvalidEncoding(position))
        consumed += len(chunk)
        yield from text
        if final:
            return Status.clean()
