"""Tokenizers: rune Stream -> Stream of line or paragraph content.

Truncation policy: an unterminated line (or paragraph) at the end is a token
only if the stream ended cleanly. On failure it is discarded, since the
consumer could not tell it apart from a complete one.
"""

from __future__ import annotations
from typing import Generator, List

from ..pipeline.context import Status, Stream
from ..utils.text import LF
from .base import Stage


class LineContent(Stage):
    name = "lines"
    layer = "tokenize"
    doc = "Content of LF-terminated lines, without the LF"

    def run(self, upstream: Stream[str]) -> Generator[str, None, Status]:
        line: List[str] = []
        for rune in upstream:
            if rune == LF:
                yield "".join(line)
                line = []
            else:
                line.append(rune)
        status = upstream.status
        if status.ok and line:
            yield "".join(line)
        return status


class ParagraphContent(Stage):
    """Adjacent non-empty lines joined by LF. Empty lines separate paragraphs."""

    name = "paragraphs"
    layer = "tokenize"
    doc = "Content of paragraphs (runs of non-empty LF lines), without the final LF"

    def __init__(self):
        self.lines = LineContent()

    def apply(self, upstream: Stream[str]) -> Stream[str]:
        lines = self.lines(upstream)
        return Stream(self.run(lines), upstream=lines)

    def run(self, lines: Stream[str]) -> Generator[str, None, Status]:
        paragraph: List[str] = []
        for line in lines:
            if line:
                paragraph.append(line)
            elif paragraph:
                yield LF.join(paragraph)
                paragraph = []
        status = lines.status
        if status.ok and paragraph:
            yield LF.join(paragraph)
        return status
