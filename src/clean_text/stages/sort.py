"""Case-insensitive sort of lines or paragraphs.

Unlike the streaming stages these buffer every token (O(n) memory) and are
all-or-nothing: output starts only after upstream ended cleanly; on failure
nothing is emitted and the failure is the only result.
"""

from __future__ import annotations
from abc import abstractmethod
from typing import Generator, Iterable, Iterator, List

from ..pipeline.context import Status, Stream
from ..utils.text import LF, sort_tokens_i
from .base import Stage
from .tokenize import LineContent, ParagraphContent

PARAGRAPH_SEPARATOR = LF + LF


class SortTokensI(Stage):
    layer = "sort"

    def __init__(self, tokenizer: Stage):
        self.tokenizer = tokenizer

    def apply(self, upstream: Stream[str]) -> Stream[str]:
        tokens = self.tokenizer(upstream)
        return Stream(self.run(tokens), upstream=tokens)

    def run(self, tokens: Stream[str]) -> Generator[str, None, Status]:
        collected = list(tokens)
        status = tokens.status
        if not status.ok:
            return status
        yield from self.render(sort_tokens_i(collected))
        return status

    @abstractmethod
    def render(self, tokens: List[str]) -> Iterable[str]:
        ...


class SortLFLinesI(SortTokensI):
    name = "sortli"
    doc = "Sort lines case-insensitive (LF end of line)"

    def __init__(self):
        super().__init__(LineContent())

    def render(self, tokens: List[str]) -> Iterator[str]:
        for token in tokens:
            yield from token
            yield LF


class SortLFParagraphsI(SortTokensI):
    name = "sortpi"
    doc = "Sort paragraphs case-insensitive (LF end of line)"

    def __init__(self):
        super().__init__(ParagraphContent())

    def render(self, tokens: List[str]) -> Iterator[str]:
        for index, token in enumerate(tokens):
            if index:
                yield from PARAGRAPH_SEPARATOR
            yield from token
        if tokens:
            yield LF
