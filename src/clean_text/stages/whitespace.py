"""Trailing whitespace removal (LF end of line).

Whitespace is held back until we know whether it is trailing. Only the current
run of consecutive whitespace is buffered, never a whole line.

If the stream fails while a run is pending, the run is dropped: the line never
completed, so we do not emit whitespace that might have been trailing.
"""

from __future__ import annotations
from typing import Generator, List

from ..pipeline.context import Status, Stream
from ..utils.text import LF, is_space
from .base import Stage


class TrimTrailingWhiteSpace(Stage):
    name = "trail"
    doc = "Remove trailing whitespace (LF end of line)"

    def run(self, upstream: Stream[str]) -> Generator[str, None, Status]:
        pending: List[str] = []
        for rune in upstream:
            if rune == LF:
                pending.clear()
                yield rune
            elif is_space(rune):
                pending.append(rune)
            else:
                yield from pending
                pending.clear()
                yield rune
        return upstream.status
