"""Leading and trailing empty line removal (LF end of line)."""

from __future__ import annotations
from typing import Generator

from ..pipeline.context import Status, Stream
from ..utils.text import LF
from .base import Stage


class TrimLeadingEmptyLFLines(Stage):
    name = "trim_leading_lf"
    doc = "Remove empty lines at the start (LF end of line)"

    def run(self, upstream: Stream[str]) -> Generator[str, None, Status]:
        skipping = True
        for rune in upstream:
            if skipping:
                if rune == LF:
                    continue
                skipping = False
            yield rune
        return upstream.status


class TrimTrailingEmptyLFLines(Stage):
    """Hold back runs of empty lines until something other than LF follows.

    Pending LFs are dropped when the stream ends, cleanly or not.
    """

    name = "trim_trailing_lf"
    doc = "Remove empty lines at the end (LF end of line)"

    def run(self, upstream: Stream[str]) -> Generator[str, None, Status]:
        at_line_start = True
        pending = 0
        for rune in upstream:
            if at_line_start and rune == LF:
                pending += 1
                continue
            yield from LF * pending
            pending = 0
            yield rune
            at_line_start = rune == LF
        return upstream.status
