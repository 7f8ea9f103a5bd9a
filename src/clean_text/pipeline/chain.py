"""Chaining combinator: N same-signature stages behave as one."""

from __future__ import annotations
from typing import Generator, Iterable, Optional

from ..stages.base import Stage
from .context import Status, Stream


class Chain(Stage):
    """Apply ``stages`` in order. An empty chain is the identity."""

    layer = "chain"

    def __init__(self, stages: Iterable[Stage], name: str = "chain", doc: Optional[str] = None):
        self.stages = tuple(stages)
        self.name = name
        self.doc = doc if doc is not None else "Chain: " + " ".join(s.name for s in self.stages)

    def apply(self, upstream: Stream[str]) -> Stream[str]:
        stream = upstream
        for stage in self.stages:
            stream = stage(stream)
        return stream

    def run(self, upstream: Stream[str]) -> Generator[str, None, Status]:
        stream = self.apply(upstream)
        yield from stream
        return stream.status
