"""Line terminator conversion: CR and CRLF become LF."""

from __future__ import annotations
from typing import Generator

from ..pipeline.context import Status, Stream
from ..utils.text import CR, LF
from .base import Stage


class ConvertLineTerminators(Stage):
    name = "lf"
    doc = "Convert line terminators to LF"

    def run(self, upstream: Stream[str]) -> Generator[str, None, Status]:
        # set right after a CR was turned into LF: a following LF belongs to it
        swallow_lf = False
        for rune in upstream:
            if swallow_lf and rune == LF:
                swallow_lf = False
                continue
            if rune == CR:
                yield LF
                swallow_lf = True
            else:
                yield rune
                swallow_lf = False
        return upstream.status
