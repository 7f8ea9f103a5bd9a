"""Final newline enforcement."""

from __future__ import annotations
from typing import Generator

from ..pipeline.context import Status, Stream
from ..utils.text import LF
from .base import Stage


class EnsureFinalLFIfNonEmpty(Stage):
    name = "nelf"
    doc = "Ensure non-empty content ends with LF"

    def run(self, upstream: Stream[str]) -> Generator[str, None, Status]:
        # empty input behaves as if it already ended in LF
        last = LF
        for rune in upstream:
            yield rune
            last = rune
        status = upstream.status
        if status.ok and last != LF:
            yield LF
        return status
