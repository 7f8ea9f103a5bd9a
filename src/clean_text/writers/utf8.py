"""UTF-8 rune sink.

Encodes a Stream back to bytes and writes it to a binary file object. All data
is written and flushed before the stream status is returned, so a failed
stream still leaves its valid prefix in the output (streaming stages may have
emitted useful content before the failure).
"""

from __future__ import annotations
from typing import BinaryIO, Iterator, List

from ..errors import UpstreamIOError
from ..pipeline.context import Status, Stream

DEFAULT_WRITE_BUFFER = 64 * 1024


def encode_runes(stream: Stream[str], buffer_size: int = DEFAULT_WRITE_BUFFER) -> Iterator[bytes]:
    """Yield UTF-8 chunks of roughly ``buffer_size`` characters."""
    pending: List[str] = []
    size = 0
    for item in stream:
        pending.append(item)
        size += len(item)
        if size >= buffer_size:
            yield "".join(pending).encode("utf-8")
            pending = []
            size = 0
    if pending:
        yield "".join(pending).encode("utf-8")


def write_runes(stream: Stream[str], out: BinaryIO, buffer_size: int = DEFAULT_WRITE_BUFFER) -> Status:
    """Write the whole stream to ``out``, flush, then return its status.

    A failing write closes the pipeline and raises UpstreamIOError.
    """
    try:
        for chunk in encode_runes(stream, buffer_size):
            out.write(chunk)
        out.flush()
    except OSError as e:
        stream.close()
        raise UpstreamIOError("write failed", e) from e
    return stream.status
