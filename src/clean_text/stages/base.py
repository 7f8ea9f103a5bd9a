"""Stage plugin interface.

Stages must:
- accept an upstream Stream and return a new Stream
- keep all state local to one call (generator locals), so a stage instance
  can be reused across pipelines
- drain upstream data before reading upstream status
- end with exactly one Status: the upstream one, or their own failure

Transformers map runes to runes; tokenizers map runes to tokens. Both share
this signature so they compose with Chain.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Generator

from ..pipeline.context import Status, Stream


class Stage(ABC):
    name: str = "stage"
    layer: str = "transform"  # transform | tokenize | sort | chain
    doc: str = ""

    def __call__(self, upstream: Stream[str]) -> Stream[str]:
        return self.apply(upstream)

    def apply(self, upstream: Stream[str]) -> Stream[str]:
        return Stream(self.run(upstream), upstream=upstream)

    @abstractmethod
    def run(self, upstream: Stream[str]) -> Generator[str, None, Status]:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r}>"
